"""Windowed row materialization for the table view.

Only the rows intersecting the scroll viewport, plus a fixed overscan on
each side, are materialized. Rows share one height, so the scrollable extent
and every row offset are O(1) arithmetic.
"""

import logging
import math
from collections.abc import Callable

from quakeview.models import RowDescriptor, RowWindow, ScrollRequest
from quakeview.observable import Observable

logger = logging.getLogger(__name__)

DEFAULT_ROW_HEIGHT = 50
DEFAULT_OVERSCAN = 5

ALIGNMENTS = ("start", "center", "end", "auto")
BEHAVIORS = ("auto", "smooth")

EMPTY_WINDOW = RowWindow(start_index=0, end_index=0, rows=(), total_size=0.0)


class RowVirtualizer:
    """Computes the minimal contiguous row window for a scroll position.

    Raw scroll events go through ``on_scroll``, which only records the latest
    offset; ``flush_frame`` applies it once per rendered frame. Programmatic
    scrolls (``scroll_to_index``, ``scroll_to_offset``) apply immediately and
    supersede any pending raw offset.
    """

    def __init__(
        self,
        row_count: int = 0,
        viewport_extent: float = 600,
        row_height: float = DEFAULT_ROW_HEIGHT,
        overscan: int = DEFAULT_OVERSCAN,
    ) -> None:
        if row_height <= 0:
            raise ValueError(f"row_height must be positive, got {row_height}")
        if overscan < 0:
            raise ValueError(f"overscan must be >= 0, got {overscan}")
        if viewport_extent < 0:
            raise ValueError(f"viewport_extent must be >= 0, got {viewport_extent}")
        if row_count < 0:
            raise ValueError(f"row_count must be >= 0, got {row_count}")
        self._row_count = row_count
        self._viewport_extent = float(viewport_extent)
        self._row_height = float(row_height)
        self._overscan = overscan
        self._scroll_offset = 0.0
        self._pending_offset: float | None = None
        self._last_request: ScrollRequest | None = None
        self._window: Observable[RowWindow] = Observable(self._compute())

    # --- read accessors ---

    @property
    def row_count(self) -> int:
        return self._row_count

    @property
    def row_height(self) -> float:
        return self._row_height

    @property
    def overscan(self) -> int:
        return self._overscan

    @property
    def viewport_extent(self) -> float:
        return self._viewport_extent

    @property
    def scroll_offset(self) -> float:
        return self._scroll_offset

    @property
    def total_size(self) -> float:
        return self._row_count * self._row_height

    @property
    def max_offset(self) -> float:
        return max(0.0, self.total_size - self._viewport_extent)

    @property
    def last_scroll_request(self) -> ScrollRequest | None:
        return self._last_request

    @property
    def has_pending_scroll(self) -> bool:
        return self._pending_offset is not None

    def window(self) -> RowWindow:
        return self._window.value

    def descriptor(self, index: int) -> RowDescriptor:
        return RowDescriptor(
            index=index, start=index * self._row_height, size=self._row_height
        )

    # --- inputs ---

    def set_row_count(self, row_count: int) -> None:
        """Resize the row set, keeping the scroll offset where still valid."""
        if row_count < 0:
            raise ValueError(f"row_count must be >= 0, got {row_count}")
        if row_count == self._row_count:
            return
        self._row_count = row_count
        self._scroll_offset = self._clamp(self._scroll_offset)
        self._refresh()

    def set_viewport_extent(self, extent: float) -> None:
        if extent < 0:
            raise ValueError(f"viewport_extent must be >= 0, got {extent}")
        self._viewport_extent = float(extent)
        self._scroll_offset = self._clamp(self._scroll_offset)
        self._refresh()

    def on_scroll(self, offset: float) -> None:
        """Record a raw scroll event; applied by the next flush_frame()."""
        self._pending_offset = offset

    def flush_frame(self) -> RowWindow:
        """Apply the latest pending scroll offset, at most once per frame."""
        if self._pending_offset is not None:
            self._scroll_offset = self._clamp(self._pending_offset)
            self._pending_offset = None
            self._refresh()
        return self.window()

    def scroll_to_offset(self, offset: float) -> None:
        self._pending_offset = None
        self._scroll_offset = self._clamp(offset)
        self._refresh()

    def scroll_to_index(
        self, index: int, align: str = "auto", behavior: str = "auto"
    ) -> bool:
        """Scroll so row ``index`` is placed per ``align``.

        Returns False, without scrolling, when the index is outside
        ``[0, row_count)``; the row may simply have been filtered out.
        """
        if align not in ALIGNMENTS:
            raise ValueError(f"align must be one of {ALIGNMENTS}, got {align!r}")
        if behavior not in BEHAVIORS:
            raise ValueError(f"behavior must be one of {BEHAVIORS}, got {behavior!r}")
        if not 0 <= index < self._row_count:
            logger.debug(
                "scroll_to_index(%d) ignored: %d row(s)", index, self._row_count
            )
            return False

        offset = self._clamp(self._offset_for(index, align))
        self._last_request = ScrollRequest(
            index=index, align=align, behavior=behavior, offset=offset
        )
        self.scroll_to_offset(offset)
        return True

    def subscribe(
        self, listener: Callable[[RowWindow, RowWindow], None]
    ) -> Callable[[], None]:
        """Notify on window changes (new, old)."""
        return self._window.subscribe(listener)

    # --- internals ---

    def _offset_for(self, index: int, align: str) -> float:
        row = self.descriptor(index)
        extent = self._viewport_extent
        if align == "auto":
            if row.end >= self._scroll_offset + extent:
                align = "end"
            elif row.start <= self._scroll_offset:
                align = "start"
            else:
                return self._scroll_offset
        if align == "start":
            return row.start
        if align == "end":
            return row.end - extent
        return row.start + row.size / 2 - extent / 2

    def _clamp(self, offset: float) -> float:
        return min(max(float(offset), 0.0), self.max_offset)

    def _refresh(self) -> None:
        self._window.set(self._compute())

    def _compute(self) -> RowWindow:
        if self._row_count == 0:
            return EMPTY_WINDOW
        top = self._scroll_offset
        bottom = top + self._viewport_extent
        height = self._row_height
        last_row = self._row_count - 1

        # Rows whose [start, end] touches [top, bottom].
        first = min(max(math.ceil(top / height) - 1, 0), last_row)
        last = min(max(math.floor(bottom / height), first), last_row)

        start = max(first - self._overscan, 0)
        end = min(last + self._overscan, last_row) + 1
        rows = tuple(self.descriptor(i) for i in range(start, end))
        return RowWindow(
            start_index=start, end_index=end, rows=rows, total_size=self.total_size
        )
