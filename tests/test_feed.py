"""
Tests for USGS CSV loading and record enrichment.
"""

import logging
import math
from datetime import datetime, timezone

import httpx
import pytest

from quakeview.feed import (
    SAMPLE_RECORDS,
    FeedError,
    depth_category,
    extract_region,
    fetch_csv,
    load_records,
    magnitude_category,
    parse_csv,
)

HEADER = (
    "time,latitude,longitude,depth,mag,magType,nst,gap,dmin,rms,net,id,updated,place,"
    "type,horizontalError,depthError,magError,magNst,status,locationSource,magSource"
)

FEED_CSV = "\n".join(
    [
        HEADER,
        '2024-01-15T10:30:00.000Z,38.8,-122.8,2.5,1.2,md,12,80,0.01,0.02,nc,nc1,'
        '2024-01-15T10:35:00.000Z,"5km NW of The Geysers, CA",earthquake,0.3,0.5,0.15,10,'
        "automatic,nc,nc",
        ",61.2,-150.1,30.1,2.8,ml,,,,0.5,ak,ak1,2024-01-15T09:00:00.040Z,"
        '"20 km N of Anchorage, Alaska",earthquake,,0.3,,,reviewed,ak,ak',
        "2024-01-15T08:00:00.000Z,1.0,1.0,1.0,1.0,ml,,,,,xx,,,Nowhere,earthquake,,,,,"
        "automatic,xx,xx",
        "2024-01-15T07:00:00.000Z,-5.5,150.2,,,mb,,,,,us,us1,,"
        '"New Britain region, Papua New Guinea",earthquake,,,,,reviewed,us,us',
    ]
)


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


class TestParseCsv:
    def test_parses_rows(self):
        records = parse_csv(FEED_CSV)

        assert [r.id for r in records] == ["nc1", "ak1", "us1"]
        nc1 = records[0]
        assert nc1.latitude == 38.8
        assert nc1.longitude == -122.8
        assert nc1.mag_type == "md"
        assert nc1.nst == 12.0
        assert nc1.horizontal_error == 0.3
        assert nc1.mag_error == 0.15
        assert nc1.time == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
        assert nc1.status == "automatic"

    def test_enriches_derived_fields(self):
        nc1, ak1, us1 = parse_csv(FEED_CSV)
        assert (nc1.region, nc1.magnitude_category, nc1.depth_category) == ("CA", "Micro", "Shallow")
        assert (ak1.region, ak1.magnitude_category) == ("Alaska", "Minor")
        assert us1.region == "Papua New Guinea"

    def test_blank_optionals_are_none(self):
        ak1 = parse_csv(FEED_CSV)[1]
        assert ak1.time is None
        assert ak1.nst is None
        assert ak1.gap is None
        assert ak1.rms == 0.5

    def test_missing_required_numbers_become_nan(self):
        us1 = parse_csv(FEED_CSV)[2]
        assert math.isnan(us1.depth)
        assert math.isnan(us1.mag)
        assert us1.magnitude_category == ""
        assert us1.depth_category == ""

    def test_rows_without_id_skipped_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="quakeview.feed"):
            records = parse_csv(FEED_CSV)
        assert "Nowhere" not in [r.place for r in records]
        assert "without an id" in caplog.text

    @pytest.mark.parametrize("text", ["", HEADER, "<html>oops</html>"])
    def test_empty_or_invalid_raises(self, text):
        with pytest.raises(FeedError, match="empty or invalid"):
            parse_csv(text)


class TestFetch:
    def test_fetch_returns_body(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, text=FEED_CSV)

        with _client(handler) as client:
            body = fetch_csv("https://feed.test/all_month.csv", client=client)

        assert body == FEED_CSV
        assert seen == ["https://feed.test/all_month.csv"]

    def test_http_error_wrapped(self):
        with _client(lambda request: httpx.Response(503)) as client:
            with pytest.raises(FeedError, match="Failed to fetch"):
                fetch_csv("https://feed.test/all_month.csv", client=client)

    def test_transport_error_wrapped(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("no route", request=request)

        with _client(handler) as client:
            with pytest.raises(FeedError):
                fetch_csv("https://feed.test/all_month.csv", client=client)


class TestLoadRecords:
    def test_loads_feed(self):
        with _client(lambda request: httpx.Response(200, text=FEED_CSV)) as client:
            records = load_records("https://feed.test/all_month.csv", client=client)
        assert len(records) == 3

    def test_falls_back_to_sample_data(self, caplog):
        with _client(lambda request: httpx.Response(500)) as client:
            with caplog.at_level(logging.WARNING, logger="quakeview.feed"):
                records = load_records("https://feed.test/all_month.csv", client=client)

        assert records == list(SAMPLE_RECORDS)
        assert [r.id for r in records] == ["mock1", "mock2", "mock3"]
        assert "Using sample data" in caplog.text

    def test_sample_records_are_enriched(self):
        mock1 = SAMPLE_RECORDS[0]
        assert mock1.region == "CA"
        assert mock1.magnitude_category == "Moderate"
        assert mock1.depth_category == "Shallow"


class TestCategories:
    @pytest.mark.parametrize(
        "mag, expected",
        [
            (1.99, "Micro"),
            (2.0, "Minor"),
            (3.5, "Light"),
            (4.0, "Moderate"),
            (5.9, "Strong"),
            (6.99, "Major"),
            (7.0, "Great"),
        ],
    )
    def test_magnitude_category(self, mag, expected):
        assert magnitude_category(mag) == expected

    @pytest.mark.parametrize(
        "depth, expected",
        [(0.0, "Shallow"), (69.9, "Shallow"), (70.0, "Intermediate"), (300.0, "Deep")],
    )
    def test_depth_category(self, depth, expected):
        assert depth_category(depth) == expected

    @pytest.mark.parametrize(
        "place, expected",
        [
            ("5km NE of Tokyo, Japan", "Japan"),
            ("Fiji region", "Fiji region"),
            ("  ", "Unknown"),
            ("", "Unknown"),
        ],
    )
    def test_extract_region(self, place, expected):
        assert extract_region(place) == expected
