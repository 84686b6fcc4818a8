"""Zoom state machine: Full (no rectangle) or Zoomed(rect)."""

import logging
from collections.abc import Callable

from quakeview.models import Cluster, ViewportRect
from quakeview.observable import Observable

logger = logging.getLogger(__name__)

ZOOM_MARGIN = 0.1  # Fraction of the member span added on each side
MIN_ZOOM_SPAN = 1.0  # Nominal span for an axis where all members coincide


def zoom_rect_for(cluster: Cluster, margin: float = ZOOM_MARGIN) -> ViewportRect:
    """Member bounding box of a cluster, expanded by margin on each axis."""
    x_min, x_max = _expand(cluster.x_min, cluster.x_max, margin)
    y_min, y_max = _expand(cluster.y_min, cluster.y_max, margin)
    return ViewportRect(x_min=x_min, x_max=x_max, y_min=y_min, y_max=y_max)


def _expand(lo: float, hi: float, margin: float) -> tuple[float, float]:
    span = hi - lo
    if span <= 0:
        half = MIN_ZOOM_SPAN / 2
        return lo - half, hi + half
    return lo - span * margin, hi + span * margin


class ZoomController:
    """Holds the current viewport rectangle; ``None`` means full extent.

    Transitions are synchronous replacements:
      Full -> Zoomed(rect) on cluster activation
      Zoomed(r1) -> Zoomed(r2) on activating a cluster while zoomed
      Zoomed -> Full on reset() or on an axis change
    """

    def __init__(self, x_axis: str = "longitude", y_axis: str = "latitude") -> None:
        self._axes = (x_axis, y_axis)
        self._rect: Observable[ViewportRect | None] = Observable(None)

    @property
    def rect(self) -> ViewportRect | None:
        return self._rect.value

    @property
    def is_zoomed(self) -> bool:
        return self._rect.value is not None

    @property
    def axes(self) -> tuple[str, str]:
        return self._axes

    def activate_cluster(self, cluster: Cluster) -> ViewportRect:
        rect = zoom_rect_for(cluster)
        logger.debug("Zooming into %d-member cluster: %s", cluster.size, rect)
        self._rect.set(rect)
        return rect

    def reset(self) -> None:
        self._rect.set(None)

    def set_axes(self, x_axis: str, y_axis: str) -> None:
        """Axis reassignment redefines the coordinate space and clears zoom."""
        if (x_axis, y_axis) == self._axes:
            return
        self._axes = (x_axis, y_axis)
        self._rect.set(None)

    def subscribe(
        self, listener: Callable[[ViewportRect | None, ViewportRect | None], None]
    ) -> Callable[[], None]:
        return self._rect.subscribe(listener)
