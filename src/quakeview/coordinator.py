"""Cross-view selection and hover coordination.

One coordinator instance is owned by the dashboard and handed to both the
chart and the table. Each surface subscribes to the slice it draws from
(selection or hover) and is only notified when that slice changes.
"""

import logging
from collections.abc import Callable, Sequence

from quakeview.models import InteractionState
from quakeview.observable import Observable
from quakeview.virtualizer import RowVirtualizer

logger = logging.getLogger(__name__)

Listener = Callable[[str | None, str | None], None]


class SelectionCoordinator:
    """Single source of truth for the selected and hovered ids.

    Selecting a new id scrolls the bound virtualizer so that row is centered
    in the current sorted order. Re-selecting the current id does not scroll
    again; call ``rescroll()`` for an explicit re-center.
    """

    def __init__(
        self,
        virtualizer: RowVirtualizer | None = None,
        row_order: Sequence[str] = (),
    ) -> None:
        self._virtualizer = virtualizer
        self._positions: dict[str, int] = {}
        self._selected: Observable[str | None] = Observable(None)
        self._hovered: Observable[str | None] = Observable(None)
        self.bind_rows(row_order)

    @property
    def selected_id(self) -> str | None:
        return self._selected.value

    @property
    def hovered_id(self) -> str | None:
        return self._hovered.value

    @property
    def state(self) -> InteractionState:
        return InteractionState(
            selected_id=self._selected.value, hovered_id=self._hovered.value
        )

    def bind_rows(self, row_order: Sequence[str]) -> None:
        """Install the current sorted id order used to resolve scroll targets."""
        self._positions = {row_id: i for i, row_id in enumerate(row_order)}

    def position(self, row_id: str) -> int | None:
        return self._positions.get(row_id)

    def select(self, row_id: str | None) -> bool:
        """Set the selection. Returns True when it changed."""
        if not self._selected.set(row_id):
            return False
        if row_id is not None:
            self._scroll_to(row_id)
        return True

    def rescroll(self) -> bool:
        """Scroll to the current selection again, e.g. after a re-sort."""
        if self._selected.value is None:
            return False
        return self._scroll_to(self._selected.value)

    def hover(self, row_id: str | None) -> bool:
        return self._hovered.set(row_id)

    def clear(self) -> None:
        self._selected.set(None)
        self._hovered.set(None)

    def is_selected(self, row_id: str) -> bool:
        return row_id == self._selected.value

    def is_hovered(self, row_id: str) -> bool:
        # Selection visually dominates hover.
        return row_id == self._hovered.value and not self.is_selected(row_id)

    def visual_state(self, row_id: str) -> tuple[bool, bool]:
        return self.is_selected(row_id), self.is_hovered(row_id)

    def on_selection(self, listener: Listener) -> Callable[[], None]:
        return self._selected.subscribe(listener)

    def on_hover(self, listener: Listener) -> Callable[[], None]:
        return self._hovered.subscribe(listener)

    def _scroll_to(self, row_id: str) -> bool:
        index = self._positions.get(row_id)
        if index is None or self._virtualizer is None:
            logger.debug("No row to scroll to for selection %r", row_id)
            return False
        return self._virtualizer.scroll_to_index(
            index, align="center", behavior="smooth"
        )
