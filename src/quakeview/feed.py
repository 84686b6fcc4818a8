"""USGS CSV feed loading and record enrichment."""

import csv
import io
import logging
import math
from dataclasses import replace
from datetime import datetime

import httpx

from quakeview.config import USGS_MONTH_FEED
from quakeview.models import QuakeRecord

logger = logging.getLogger(__name__)

# CSV header → QuakeRecord field, for the optional numeric columns.
_OPTIONAL_NUMERIC: dict[str, str] = {
    "nst": "nst",
    "gap": "gap",
    "dmin": "dmin",
    "rms": "rms",
    "horizontalError": "horizontal_error",
    "depthError": "depth_error",
    "magError": "mag_error",
    "magNst": "mag_nst",
}


class FeedError(Exception):
    """Feed download or parse failure."""


def fetch_csv(url: str = USGS_MONTH_FEED, client: httpx.Client | None = None) -> str:
    """Download the feed body.

    Raises:
        FeedError: On transport error or a non-2xx response.
    """
    headers = {"Accept": "text/csv, text/plain, */*"}
    try:
        if client is None:
            resp = httpx.get(url, headers=headers, timeout=30)
        else:
            resp = client.get(url, headers=headers)
        resp.raise_for_status()
    except httpx.HTTPError as exc:
        raise FeedError(f"Failed to fetch earthquake data: {exc}") from exc
    return resp.text


def parse_csv(text: str) -> list[QuakeRecord]:
    """Parse USGS CSV text into enriched records.

    Rows without an id are skipped with a warning. Missing required numeric
    values become NaN and are filtered per axis downstream.

    Raises:
        FeedError: When the text holds no header and data row.
    """
    reader = csv.DictReader(io.StringIO(text.strip()))
    if not reader.fieldnames or "id" not in reader.fieldnames:
        raise FeedError("CSV data appears to be empty or invalid")

    records: list[QuakeRecord] = []
    skipped = 0
    for row in reader:
        if not row.get("id"):
            skipped += 1
            continue
        records.append(_to_record(row))
    if skipped:
        logger.warning("Skipped %d feed row(s) without an id", skipped)
    if not records:
        raise FeedError("CSV data appears to be empty or invalid")
    return records


def load_records(
    url: str = USGS_MONTH_FEED, client: httpx.Client | None = None
) -> list[QuakeRecord]:
    """Fetch and parse the feed, falling back to bundled sample records."""
    try:
        records = parse_csv(fetch_csv(url, client=client))
    except FeedError as exc:
        logger.warning("Using sample data: %s", exc)
        return list(SAMPLE_RECORDS)
    logger.info("Loaded %d earthquake record(s) from %s", len(records), url)
    return records


def extract_region(place: str) -> str:
    """Trailing comma-separated component: "5km NE of Tokyo, Japan" → "Japan"."""
    if not place or not place.strip():
        return "Unknown"
    parts = place.split(",")
    return parts[-1].strip() if len(parts) > 1 else place.strip()


def magnitude_category(magnitude: float) -> str:
    if magnitude < 2.0:
        return "Micro"
    if magnitude < 3.0:
        return "Minor"
    if magnitude < 4.0:
        return "Light"
    if magnitude < 5.0:
        return "Moderate"
    if magnitude < 6.0:
        return "Strong"
    if magnitude < 7.0:
        return "Major"
    return "Great"


def depth_category(depth: float) -> str:
    if depth < 70:
        return "Shallow"
    if depth < 300:
        return "Intermediate"
    return "Deep"


def enrich(record: QuakeRecord) -> QuakeRecord:
    """Fill the derived region and category fields."""
    return replace(
        record,
        region=extract_region(record.place),
        magnitude_category=magnitude_category(record.mag)
        if math.isfinite(record.mag)
        else "",
        depth_category=depth_category(record.depth)
        if math.isfinite(record.depth)
        else "",
    )


def _to_record(row: dict[str, str]) -> QuakeRecord:
    optional = {
        name: _optional_float(row.get(col)) for col, name in _OPTIONAL_NUMERIC.items()
    }
    record = QuakeRecord(
        id=row["id"],
        latitude=_required_float(row.get("latitude")),
        longitude=_required_float(row.get("longitude")),
        depth=_required_float(row.get("depth")),
        mag=_required_float(row.get("mag")),
        place=row.get("place") or "",
        time=_parse_time(row.get("time")),
        updated=_parse_time(row.get("updated")),
        mag_type=row.get("magType") or "",
        net=row.get("net") or "",
        status=row.get("status") or "",
        type=row.get("type") or "earthquake",
        **optional,
    )
    return enrich(record)


def _optional_float(raw: str | None) -> float | None:
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError:
        return None


def _required_float(raw: str | None) -> float:
    value = _optional_float(raw)
    return math.nan if value is None else value


def _parse_time(raw: str | None) -> datetime | None:
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None


SAMPLE_RECORDS: tuple[QuakeRecord, ...] = tuple(
    enrich(r)
    for r in (
        QuakeRecord(
            id="mock1",
            latitude=37.7749,
            longitude=-122.4194,
            depth=10.5,
            mag=4.2,
            place="10km NE of San Francisco, CA",
            time=datetime.fromisoformat("2024-01-15T10:30:00+00:00"),
            mag_type="ml",
            net="nc",
            status="reviewed",
            nst=25,
            gap=45,
            dmin=0.1,
            rms=0.15,
            horizontal_error=0.5,
            depth_error=1.2,
            mag_error=0.1,
            mag_nst=30,
        ),
        QuakeRecord(
            id="mock2",
            latitude=34.0522,
            longitude=-118.2437,
            depth=15.3,
            mag=3.8,
            place="5km SW of Los Angeles, CA",
            time=datetime.fromisoformat("2024-01-15T09:15:00+00:00"),
            mag_type="ml",
            net="ci",
            status="automatic",
            nst=20,
            gap=38,
            dmin=0.08,
            rms=0.12,
            horizontal_error=0.4,
            depth_error=0.8,
            mag_error=0.08,
            mag_nst=25,
        ),
        QuakeRecord(
            id="mock3",
            latitude=40.7128,
            longitude=-74.0060,
            depth=8.2,
            mag=2.1,
            place="12km E of New York, NY",
            time=datetime.fromisoformat("2024-01-15T08:45:00+00:00"),
            mag_type="md",
            net="ld",
            status="reviewed",
            nst=15,
            gap=55,
            dmin=0.15,
            rms=0.18,
            horizontal_error=0.7,
            depth_error=1.5,
            mag_error=0.15,
            mag_nst=18,
        ),
    )
)
