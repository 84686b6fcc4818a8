"""Environment-driven settings. Entry points call load_dotenv() before from_env()."""

import os
from dataclasses import dataclass

USGS_MONTH_FEED = (
    "https://earthquake.usgs.gov/earthquakes/feed/v1.0/summary/all_month.csv"
)


@dataclass(frozen=True)
class Settings:
    feed_url: str = USGS_MONTH_FEED
    max_points: int = 200  # Chart representative budget
    row_height: int = 50  # Table row height (px)
    overscan: int = 5  # Extra rows materialized on each side
    table_height: int = 600  # Table viewport height (px)
    log_level: str = "INFO"
    lang: str = "en"  # UI language, "en" or "ko"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from QUAKEVIEW_* environment variables.

        Raises:
            ValueError: When an integer variable is malformed or below its minimum.
        """
        return cls(
            feed_url=os.environ.get("QUAKEVIEW_FEED_URL", USGS_MONTH_FEED),
            max_points=_int_env("QUAKEVIEW_MAX_POINTS", cls.max_points),
            row_height=_int_env("QUAKEVIEW_ROW_HEIGHT", cls.row_height, minimum=1),
            overscan=_int_env("QUAKEVIEW_OVERSCAN", cls.overscan),
            table_height=_int_env("QUAKEVIEW_TABLE_HEIGHT", cls.table_height),
            log_level=os.environ.get("QUAKEVIEW_LOG_LEVEL", cls.log_level).upper(),
            lang=os.environ.get("QUAKEVIEW_LANG", cls.lang),
        )


def _int_env(name: str, default: int, minimum: int = 0) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value
