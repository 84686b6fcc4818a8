"""Virtualized table renderer.

Produces an HTML fragment for the current row window: a fixed-height
clipping container with only the materialized rows absolutely positioned
at their offsets relative to the applied scroll offset. Overscan rows land
just outside the clip.
"""

from __future__ import annotations

import html
import math
from datetime import datetime, timezone

from quakeview.models import QuakeRecord, RowWindow, TableRow
from quakeview.styling import magnitude_color

# (column key, header, width px)
TABLE_COLUMNS: tuple[tuple[str, str, int], ...] = (
    ("time", "Date & Time", 160),
    ("mag", "Magnitude", 120),
    ("place", "Location", 250),
    ("depth", "Depth (km)", 110),
    ("latitude", "Latitude", 130),
    ("longitude", "Longitude", 130),
    ("region", "Region", 120),
    ("magnitude_category", "Category", 100),
    ("status", "Status", 100),
)

_SELECTED_BG = "#eff6ff"
_HOVER_BG = "#fefce8"


def format_number(value: float | None, decimals: int = 2) -> str:
    if value is None or not math.isfinite(value):
        return "N/A"
    return f"{value:.{decimals}f}"


def format_date(value: datetime | None) -> str:
    """UTC timestamp like "Jan 15, 2024, 10:30"."""
    if value is None:
        return "Invalid Date"
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%b %d, %Y, %H:%M")


def _with_error(value: float, error: float | None, decimals: int, err_decimals: int) -> str:
    if error is None or not math.isfinite(error):
        return format_number(value, decimals)
    return f"{format_number(value, decimals)} ± {format_number(error, err_decimals)}"


def format_cell(record: QuakeRecord, column: str) -> str:
    """Display text for one cell. Uncertainties are shown as "± err"."""
    if column == "time":
        return format_date(record.time)
    if column == "mag":
        return _with_error(record.mag, record.mag_error, 1, 2)
    if column == "depth":
        return _with_error(record.depth, record.depth_error, 1, 1)
    if column in ("latitude", "longitude"):
        return _with_error(record.field(column), record.horizontal_error, 3, 3)  # type: ignore[arg-type]
    return str(record.field(column))


def render_table_html(
    window: RowWindow,
    rows: list[TableRow],
    viewport_height: float,
    scroll_offset: float = 0.0,
    sort_directions: dict[str, str | None] | None = None,
) -> str:
    """Return an HTML fragment for the materialized window.

    Args:
        window: Current row window (carries the total scroll extent).
        rows: Materialized rows with their visual flags.
        viewport_height: Height of the scroll container in pixels.
        scroll_offset: Applied scroll offset; row offsets are drawn relative to it.
        sort_directions: Optional column → "asc"/"desc" for header arrows.

    Returns:
        HTML string suitable for st.html() / st.markdown(unsafe_allow_html=True).
    """
    sort_directions = sort_directions or {}
    total_width = sum(width for _, _, width in TABLE_COLUMNS)

    header_cells: list[str] = []
    for key, label, width in TABLE_COLUMNS:
        arrow = {"asc": " ▲", "desc": " ▼"}.get(sort_directions.get(key) or "", "")
        header_cells.append(
            f'<div class="qv-cell qv-head" style="width:{width}px">'
            f"{html.escape(label)}{arrow}</div>"
        )

    row_parts: list[str] = []
    for row in rows:
        d = row.descriptor
        classes = "qv-row"
        if row.is_selected:
            classes += " qv-selected"
        elif row.is_hovered:
            classes += " qv-hovered"
        cells: list[str] = []
        for key, _, width in TABLE_COLUMNS:
            style = f"width:{width}px"
            if key == "mag":
                style += f";color:{magnitude_color(row.record.mag)};font-weight:600"
            text = html.escape(format_cell(row.record, key))
            cells.append(
                f'<div class="qv-cell" style="{style}" title="{text}">{text}</div>'
            )
        row_parts.append(
            f'<div class="{classes}" data-id="{html.escape(row.record.id)}" '
            f'data-index="{d.index}" '
            f'style="height:{d.size:g}px;transform:translateY({d.start - scroll_offset:g}px)">'
            + "".join(cells)
            + "</div>"
        )

    empty = (
        '<div class="qv-empty">No earthquake data available</div>'
        if window.total_size == 0
        else ""
    )

    return f"""<style>
.qv-scroll {{ height: {viewport_height:g}px; overflow: hidden; contain: strict; }}
.qv-spacer {{ position: relative; height: 100%; min-width: {total_width}px; }}
.qv-header {{ display: flex; position: sticky; top: 0; z-index: 2; background: #f9fafb;
    border-bottom: 1px solid #e5e7eb; font-weight: 600; font-size: 0.8rem; }}
.qv-row {{ display: flex; position: absolute; top: 0; left: 0; width: 100%;
    border-bottom: 1px solid #f3f4f6; border-left: 4px solid transparent;
    align-items: center; font-size: 0.85rem; }}
.qv-row.qv-selected {{ background: {_SELECTED_BG}; border-left-color: #3b82f6; }}
.qv-row.qv-hovered {{ background: {_HOVER_BG}; border-left-color: #facc15; }}
.qv-cell {{ padding: 0 0.5rem; overflow: hidden; white-space: nowrap; text-overflow: ellipsis; }}
.qv-empty {{ padding: 2rem; text-align: center; color: #6b7280; }}
</style>
<div class="qv-scroll" data-total-size="{window.total_size:g}">
  <div class="qv-header">{"".join(header_cells)}</div>
  <div class="qv-spacer">
    {"".join(row_parts)}
  </div>
  {empty}
</div>"""
