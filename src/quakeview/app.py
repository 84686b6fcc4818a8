"""QuakeView — Streamlit dashboard: synchronized earthquake chart and table.

Run with:
    uv run streamlit run src/quakeview/app.py
"""

import html
import logging

import streamlit as st
from dotenv import load_dotenv

load_dotenv()

from quakeview.config import Settings  # noqa: E402
from quakeview.dashboard import Dashboard, axis_label  # noqa: E402
from quakeview.feed import load_records  # noqa: E402
from quakeview.i18n import t  # noqa: E402
from quakeview.models import NUMERIC_COLUMNS, QuakeRecord  # noqa: E402
from quakeview.renderers.plotly_2d import render_plotly_chart, resolve_click  # noqa: E402
from quakeview.renderers.table_html import (  # noqa: E402
    TABLE_COLUMNS,
    format_number,
    render_table_html,
)
from quakeview.sorting import SORTABLE_COLUMNS  # noqa: E402
from quakeview.styling import CLUSTER_LEGEND, MAGNITUDE_LEGEND  # noqa: E402

_settings = Settings.from_env()
logging.basicConfig(
    level=_settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("quakeview.app")
_lang = _settings.lang

st.set_page_config(
    page_title=t("page_title", _lang),
    page_icon="◉",
    layout="wide",
)


@st.cache_data(ttl=300, show_spinner=False)
def _load(url: str) -> list[QuakeRecord]:
    return load_records(url)


# --- Session state initialization ---
# One Dashboard per browser session; chart and table share it by reference.

if "dashboard" not in st.session_state:
    st.session_state.dashboard = Dashboard(_load(_settings.feed_url), _settings)

board: Dashboard = st.session_state.dashboard
_axis_keys = [key for key, _ in NUMERIC_COLUMNS]


# --- Event callbacks (run before the script body on rerun) ---


def _on_axes_change() -> None:
    board.set_axes(st.session_state.x_axis, st.session_state.y_axis)


def _on_chart_select() -> None:
    event = st.session_state.get("chart")
    points = (event or {}).get("selection", {}).get("points", [])
    if not points:
        return
    first = points[0]
    kind, ids = resolve_click(first.get("curve_number", 1), first.get("customdata"))
    logger.debug("Chart click on %s: %d id(s)", kind, len(ids))
    if kind == "cluster":
        board.on_cluster_activate(ids)
    else:
        board.on_point_activate(ids[0])


def _on_row_select() -> None:
    row_id = st.session_state.row_pick
    if row_id:
        board.on_point_activate(row_id)


def _on_first_row_change() -> None:
    board.on_scroll(st.session_state.first_row * board.virtualizer.row_height)


def _on_sort_click(column: str) -> None:
    board.toggle_sort(column)


# --- Header ---

eligible = board.eligible_records()
subtitle = t("subtitle", _lang).format(shown=len(eligible))
if len(eligible) != len(board.records):
    subtitle += t("subtitle_of_total", _lang).format(total=len(board.records))
st.title(t("page_title", _lang))
st.caption(subtitle)

if not board.records:
    st.warning(t("no_data", _lang))
    st.stop()

chart_col, table_col = st.columns(2)

# --- Chart panel ---

with chart_col:
    ax1, ax2 = st.columns(2)
    x_axis, y_axis = board.axes
    with ax1:
        st.selectbox(
            t("label_x_axis", _lang),
            _axis_keys,
            index=_axis_keys.index(x_axis),
            format_func=axis_label,
            key="x_axis",
            on_change=_on_axes_change,
        )
    with ax2:
        st.selectbox(
            t("label_y_axis", _lang),
            _axis_keys,
            index=_axis_keys.index(y_axis),
            format_func=axis_label,
            key="y_axis",
            on_change=_on_axes_change,
        )

    summary = board.summary()
    st.info(
        t("downsample_banner", _lang).format(
            points=summary.chart_points, represented=summary.represented
        )
    )
    if summary.is_downsampled:
        st.caption(
            t("downsample_detail", _lang).format(
                clusters=summary.clusters, individual=summary.individual_points
            )
        )
    if board.zoom.is_zoomed:
        st.button(t("btn_reset_zoom", _lang), on_click=board.on_zoom_reset)

    fig = render_plotly_chart(
        board.chart_entries(),
        axis_label(board.axes[0]),
        axis_label(board.axes[1]),
        board.zoom.rect,
    )
    st.plotly_chart(
        fig,
        key="chart",
        on_select=_on_chart_select,
        selection_mode="points",
        config=fig._config,  # type: ignore[attr-defined]
    )

    legend = " ".join(
        f"<span style='color:{color}'>●</span> {label}"
        for label, color in MAGNITUDE_LEGEND
    )
    cluster_legend = " ".join(
        f"<span style='color:{color}'>◉</span> {label}"
        for label, color in CLUSTER_LEGEND
    )
    st.markdown(
        f"<small><b>{t('legend_magnitude', _lang)}:</b> {legend}<br>"
        f"<b>{t('legend_cluster', _lang)}:</b> {cluster_legend}</small>",
        unsafe_allow_html=True,
    )

# --- Table panel ---

with table_col:
    st.subheader(t("table_title", _lang))
    st.caption(t("table_count", _lang).format(count=len(board.sorted_rows())))

    sort_cols = st.columns(len(SORTABLE_COLUMNS))
    labels = {key: label for key, label, _ in TABLE_COLUMNS}
    for col, key in zip(sort_cols, SORTABLE_COLUMNS):
        arrow = {"asc": " ▲", "desc": " ▼"}.get(board.sort.direction(key) or "", "")
        col.button(
            labels.get(key, key) + arrow,
            key=f"sort_{key}",
            on_click=_on_sort_click,
            args=(key,),
            use_container_width=True,
        )

    # Reflect programmatic scrolls (auto-scroll on select) in the widget.
    v = board.virtualizer
    v.flush_frame()
    max_first_row = max(int(v.max_offset // v.row_height), 0)
    st.session_state.first_row = min(int(v.scroll_offset // v.row_height), max_first_row)
    st.number_input(
        t("label_first_row", _lang),
        min_value=0,
        max_value=max_first_row,
        step=10,
        key="first_row",
        on_change=_on_first_row_change,
    )

    window, rows = board.table_window()
    st.selectbox(
        t("label_select_row", _lang),
        [""] + [r.record.id for r in rows],
        index=0,
        format_func=lambda rid: "" if not rid else next(
            (r.record.place for r in rows if r.record.id == rid), rid
        ),
        key="row_pick",
        on_change=_on_row_select,
    )

    st.markdown(
        render_table_html(
            window,
            rows,
            viewport_height=v.viewport_extent,
            scroll_offset=v.scroll_offset,
            sort_directions={key: board.sort.direction(key) for key in SORTABLE_COLUMNS},
        ),
        unsafe_allow_html=True,
    )

    selected = board.selected_record()
    if selected is not None:
        st.success(
            t("selected", _lang).format(
                place=html.escape(selected.place), mag=format_number(selected.mag, 1)
            )
        )
