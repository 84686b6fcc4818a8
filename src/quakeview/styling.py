"""Pure visual-attribute mapping for chart entries."""

import math

# Magnitude bands: <2, 2-3, 3-4, 4-5, >=5
_MAGNITUDE_COLORS: tuple[tuple[float, str], ...] = (
    (5.0, "#b91c1c"),
    (4.0, "#ea580c"),
    (3.0, "#d97706"),
    (2.0, "#84cc16"),
)
_MAGNITUDE_FLOOR_COLOR = "#22c55e"

# Cluster-size bands: 2-4, 5-9, 10-19, >=20
_CLUSTER_COLORS: tuple[tuple[int, str], ...] = (
    (20, "#7c3aed"),
    (10, "#2563eb"),
    (5, "#0891b2"),
)
_CLUSTER_FLOOR_COLOR = "#059669"

SELECTED_COLOR = "#1d4ed8"
HOVER_COLOR = "#facc15"

MAGNITUDE_LEGEND: tuple[tuple[str, str], ...] = (
    ("<2", _MAGNITUDE_FLOOR_COLOR),
    ("2-3", "#84cc16"),
    ("3-4", "#d97706"),
    ("4-5", "#ea580c"),
    ("5+", "#b91c1c"),
)

CLUSTER_LEGEND: tuple[tuple[str, str], ...] = (
    ("2-4", _CLUSTER_FLOOR_COLOR),
    ("5-9", "#0891b2"),
    ("10-19", "#2563eb"),
    ("20+", "#7c3aed"),
)


def magnitude_color(magnitude: float) -> str:
    for threshold, color in _MAGNITUDE_COLORS:
        if magnitude >= threshold:
            return color
    return _MAGNITUDE_FLOOR_COLOR


def cluster_color(size: int) -> str:
    for threshold, color in _CLUSTER_COLORS:
        if size >= threshold:
            return color
    return _CLUSTER_FLOOR_COLOR


def magnitude_size(magnitude: float) -> float:
    """Marker radius for an individual event, 4 to 12."""
    return max(4.0, min(12.0, magnitude * 2))


def cluster_size(size: int) -> float:
    """Marker radius for a cluster, 8 to 20, growing with log(size)."""
    return max(8.0, min(20.0, 6 + math.log(size) * 3))
