"""Dashboard facade. Owns one instance of every controller and wires the two views.

Derived collections (eligible records, chart points, representative set,
sorted rows) are recomputed from upstream state and memoized on a key built
from the record-set version, axis pair, zoom rect and sort criteria.
"""

import logging
import math
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from quakeview import styling
from quakeview.config import Settings
from quakeview.coordinator import SelectionCoordinator
from quakeview.downsample import build_chart_points, downsample, make_cluster, summarize
from quakeview.models import (
    NUMERIC_COLUMNS,
    ChartPoint,
    Cluster,
    DownsampleSummary,
    DrawableEntry,
    QuakeRecord,
    RowWindow,
    TableRow,
    ViewportRect,
)
from quakeview.sorting import SortController
from quakeview.virtualizer import RowVirtualizer
from quakeview.zoom import ZoomController

logger = logging.getLogger(__name__)

AXIS_KEYS: frozenset[str] = frozenset(key for key, _ in NUMERIC_COLUMNS)


class Dashboard:
    """Chart + table over one record set, kept in sync through a coordinator.

    Upward events (``on_point_activate`` and friends) are the only mutation
    paths used by the UI layer.
    """

    def __init__(
        self,
        records: Iterable[QuakeRecord] = (),
        settings: Settings | None = None,
        x_axis: str = "longitude",
        y_axis: str = "latitude",
    ) -> None:
        self.settings = settings or Settings()
        _check_axes(x_axis, y_axis)
        self.zoom = ZoomController(x_axis, y_axis)
        self.sort = SortController()
        self.virtualizer = RowVirtualizer(
            viewport_extent=self.settings.table_height,
            row_height=self.settings.row_height,
            overscan=self.settings.overscan,
        )
        self.coordinator = SelectionCoordinator(self.virtualizer)
        self._records: tuple[QuakeRecord, ...] = ()
        self._version = 0
        self._memo: dict[str, tuple[Any, Any]] = {}

        self.sort.subscribe(self._on_sort_changed)
        self.set_records(records)

    # --- upstream inputs ---

    @property
    def axes(self) -> tuple[str, str]:
        return self.zoom.axes

    @property
    def records(self) -> tuple[QuakeRecord, ...]:
        return self._records

    def set_records(self, records: Iterable[QuakeRecord]) -> None:
        self._records = tuple(records)
        self._version += 1
        self._sync_rows()
        logger.info("Dashboard holds %d record(s)", len(self._records))

    def set_axes(self, x_axis: str, y_axis: str) -> None:
        """Change the chart axes. Clears zoom and invalidates chart points.

        Raises:
            ValueError: When either key is not a numeric column.
        """
        _check_axes(x_axis, y_axis)
        if (x_axis, y_axis) == self.axes:
            return
        self.zoom.set_axes(x_axis, y_axis)
        # Eligibility depends on the axis pair, so the row set changes too.
        self._sync_rows()

    # --- derived collections ---

    def eligible_records(self) -> tuple[QuakeRecord, ...]:
        """Records with finite values on both axes; shared by chart and table."""
        x_axis, y_axis = self.axes

        def compute() -> tuple[QuakeRecord, ...]:
            return tuple(
                r
                for r in self._records
                if _finite(r.field(x_axis)) and _finite(r.field(y_axis))
            )

        return self._cached("eligible", (self._version, x_axis, y_axis), compute)

    def chart_points(self) -> list[ChartPoint]:
        x_axis, y_axis = self.axes
        return self._cached(
            "points",
            (self._version, x_axis, y_axis),
            lambda: build_chart_points(self.eligible_records(), x_axis, y_axis),
        )

    def representative_set(self) -> list[ChartPoint | Cluster]:
        key = (self._version, self.axes, self.zoom.rect, self.settings.max_points)
        return self._cached(
            "entries",
            key,
            lambda: downsample(
                self.chart_points(), self.settings.max_points, self.zoom.rect
            ),
        )

    def sorted_rows(self) -> list[QuakeRecord]:
        key = (self._version, self.axes, self.sort.criteria)
        return self._cached(
            "sorted", key, lambda: self.sort.apply(self.eligible_records())
        )

    def summary(self) -> DownsampleSummary:
        return summarize(self.representative_set(), len(self.chart_points()))

    # --- render outputs ---

    def chart_entries(self) -> list[DrawableEntry]:
        entries: list[DrawableEntry] = []
        for item in self.representative_set():
            if isinstance(item, Cluster):
                entries.append(
                    DrawableEntry(
                        item=item,
                        color=styling.cluster_color(item.size),
                        size=styling.cluster_size(item.size),
                        opacity=0.8,
                    )
                )
                continue
            is_selected, is_hovered = self.coordinator.visual_state(item.id)
            entries.append(
                DrawableEntry(
                    item=item,
                    color=styling.magnitude_color(item.magnitude),
                    size=styling.magnitude_size(item.magnitude),
                    opacity=0.7,
                    is_selected=is_selected,
                    is_hovered=is_hovered,
                )
            )
        return entries

    def table_window(self) -> tuple[RowWindow, list[TableRow]]:
        window = self.virtualizer.flush_frame()
        rows = self.sorted_rows()
        materialized: list[TableRow] = []
        for descriptor in window.rows:
            record = rows[descriptor.index]
            is_selected, is_hovered = self.coordinator.visual_state(record.id)
            materialized.append(
                TableRow(
                    record=record,
                    descriptor=descriptor,
                    is_selected=is_selected,
                    is_hovered=is_hovered,
                )
            )
        return window, materialized

    def selected_record(self) -> QuakeRecord | None:
        selected = self.coordinator.selected_id
        if selected is None:
            return None
        return next((r for r in self.eligible_records() if r.id == selected), None)

    # --- upward events ---

    def on_point_activate(self, point_id: str) -> bool:
        """Click on an individual point or table row."""
        if not self._is_point(point_id):
            logger.debug("Ignoring activation of non-point id %r", point_id)
            return False
        return self.coordinator.select(point_id)

    def on_point_hover(self, point_id: str | None) -> bool:
        """Pointer enter (an id) or leave (None) on an individual point.

        Cluster ids are ignored; clusters are not hoverable.
        """
        if point_id is not None and not self._is_point(point_id):
            logger.debug("Ignoring hover on non-point id %r", point_id)
            return False
        return self.coordinator.hover(point_id)

    def on_cluster_activate(self, member_ids: Iterable[str]) -> ViewportRect | None:
        """Zoom into the bounding box of the given members."""
        wanted = set(member_ids)
        members = [p for p in self.chart_points() if p.id in wanted]
        if not members:
            logger.debug("Cluster activation with no known members ignored")
            return None
        return self.zoom.activate_cluster(make_cluster(members))

    def on_zoom_reset(self) -> None:
        self.zoom.reset()

    def on_sort_change(self, column: str, direction: str | None) -> None:
        self.sort.set_sort(column, direction)

    def toggle_sort(self, column: str) -> str | None:
        return self.sort.toggle(column)

    def on_scroll(self, offset: float) -> None:
        self.virtualizer.on_scroll(offset)

    # --- internals ---

    def _is_point(self, point_id: str) -> bool:
        ids = self._cached(
            "ids",
            (self._version, self.axes),
            lambda: frozenset(r.id for r in self.eligible_records()),
        )
        return point_id in ids

    def _sync_rows(self) -> None:
        rows = self.sorted_rows()
        self.virtualizer.set_row_count(len(rows))
        self.coordinator.bind_rows([r.id for r in rows])

    def _on_sort_changed(self, column: str, direction: str | None) -> None:
        logger.debug("Sort changed: %s %s", column, direction)
        self._sync_rows()
        # Keep the selected row in view under the new order.
        self.coordinator.rescroll()

    def _cached(self, name: str, key: Any, compute: Callable[[], Any]) -> Any:
        hit = self._memo.get(name)
        if hit is not None and hit[0] == key:
            return hit[1]
        value = compute()
        self._memo[name] = (key, value)
        return value


def _check_axes(x_axis: str, y_axis: str) -> None:
    for axis in (x_axis, y_axis):
        if axis not in AXIS_KEYS:
            raise ValueError(f"Unknown axis column: {axis!r}")


def _finite(value: object) -> bool:
    return isinstance(value, (int, float)) and math.isfinite(value)


def axis_label(key: str, columns: Sequence[tuple[str, str]] = NUMERIC_COLUMNS) -> str:
    return dict(columns).get(key, key)
