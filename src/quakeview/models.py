"""Data model definitions: explicit boundaries between the feed, core, and render layers."""

from dataclasses import dataclass
from datetime import datetime

# Axis-selectable numeric fields, in selector order.
NUMERIC_COLUMNS: tuple[tuple[str, str], ...] = (
    ("latitude", "Latitude"),
    ("longitude", "Longitude"),
    ("depth", "Depth (km)"),
    ("mag", "Magnitude"),
    ("nst", "Number of Stations"),
    ("gap", "Gap (degrees)"),
    ("dmin", "Distance to Nearest Station"),
    ("rms", "RMS Travel Time Residual"),
    ("horizontal_error", "Horizontal Error"),
    ("depth_error", "Depth Error"),
    ("mag_error", "Magnitude Error"),
    ("mag_nst", "Magnitude Stations"),
)


@dataclass(frozen=True)
class QuakeRecord:
    """A single validated earthquake event. Produced by the feed layer."""

    id: str  # USGS event id ("us7000abcd")
    latitude: float
    longitude: float
    depth: float  # Kilometres below surface
    mag: float
    place: str  # Free-text location ("5km NE of Tokyo, Japan")
    time: datetime | None = None
    updated: datetime | None = None
    mag_type: str = ""
    net: str = ""
    status: str = ""
    type: str = "earthquake"
    nst: float | None = None
    gap: float | None = None
    dmin: float | None = None
    rms: float | None = None
    horizontal_error: float | None = None
    depth_error: float | None = None
    mag_error: float | None = None
    mag_nst: float | None = None
    region: str = "Unknown"  # Trailing component of place
    magnitude_category: str = ""  # "Micro" … "Great"
    depth_category: str = ""  # "Shallow" / "Intermediate" / "Deep"

    def field(self, name: str) -> object:
        """Look up a column value by name."""
        return getattr(self, name)


@dataclass(frozen=True)
class ChartPoint:
    """One plottable record projected onto the active axis pair."""

    id: str
    x: float
    y: float
    magnitude: float
    place: str


@dataclass(frozen=True)
class Cluster:
    """Synthetic aggregate for two or more points sharing a grid cell."""

    synthetic_id: str  # "cluster_" + sorted member ids joined by "_"
    x: float  # Mean member x
    y: float  # Mean member y
    magnitude: float  # Max member magnitude
    member_ids: frozenset[str]
    x_min: float  # Member bounding box, used for zoom-in
    x_max: float
    y_min: float
    y_max: float

    @property
    def size(self) -> int:
        return len(self.member_ids)

    @property
    def place(self) -> str:
        return f"{self.size} earthquakes in this area"


@dataclass(frozen=True)
class ViewportRect:
    """Zoom rectangle in data coordinates. Bounds are inclusive."""

    x_min: float
    x_max: float
    y_min: float
    y_max: float

    def contains(self, x: float, y: float) -> bool:
        return self.x_min <= x <= self.x_max and self.y_min <= y <= self.y_max


@dataclass(frozen=True)
class RowDescriptor:
    """A materialized row: sorted index, pixel offset, and height."""

    index: int
    start: float
    size: float

    @property
    def end(self) -> float:
        return self.start + self.size


@dataclass(frozen=True)
class RowWindow:
    """Contiguous materialized range [start_index, end_index) of the sorted rows."""

    start_index: int
    end_index: int  # Exclusive
    rows: tuple[RowDescriptor, ...]
    total_size: float

    def __contains__(self, index: object) -> bool:
        return isinstance(index, int) and self.start_index <= index < self.end_index


@dataclass(frozen=True)
class ScrollRequest:
    """Last programmatic scroll issued against the virtualizer."""

    index: int
    align: str  # "start" | "center" | "end" | "auto"
    behavior: str  # "auto" (instant) | "smooth"
    offset: float


@dataclass(frozen=True)
class SortCriterion:
    column: str
    descending: bool = False


@dataclass(frozen=True)
class InteractionState:
    """Snapshot of cross-view selection and hover."""

    selected_id: str | None = None
    hovered_id: str | None = None


@dataclass(frozen=True)
class DrawableEntry:
    """A chart entry with its resolved visual attributes."""

    item: ChartPoint | Cluster
    color: str
    size: float
    opacity: float
    is_selected: bool = False
    is_hovered: bool = False

    @property
    def is_cluster(self) -> bool:
        return isinstance(self.item, Cluster)


@dataclass(frozen=True)
class TableRow:
    """A materialized table row with its derived visual flags."""

    record: QuakeRecord
    descriptor: RowDescriptor
    is_selected: bool = False
    is_hovered: bool = False


@dataclass(frozen=True)
class DownsampleSummary:
    """Counts shown next to the chart."""

    chart_points: int
    clusters: int
    individual_points: int
    represented: int
    total: int
    is_downsampled: bool = False
