"""Plotly 2D interactive scatter renderer.

Individual events and clusters go into separate traces so a click can be
routed by trace: points to the selection coordinator, clusters to the zoom
controller. Each marker carries its id in ``customdata``.
"""

import numpy as np
import plotly.graph_objects as go

from quakeview.models import Cluster, DrawableEntry, ViewportRect
from quakeview.styling import HOVER_COLOR, SELECTED_COLOR

_BG = "#ffffff"
_GRID_COLOR = "#e5e7eb"

POINT_TRACE = "events"
CLUSTER_TRACE = "clusters"
# Trace order in the figure; selection events report the curve number.
CLUSTER_CURVE = 0
POINT_CURVE = 1


def render_plotly_chart(
    entries: list[DrawableEntry],
    x_label: str,
    y_label: str,
    zoom_rect: ViewportRect | None = None,
) -> go.Figure:
    """Render drawable entries as a Plotly scatter chart.

    Selected points get a thick blue ring, hovered points a yellow one.
    Cluster markers are outlined in white and their customdata holds the
    comma-joined member ids.

    Args:
        entries: Output of Dashboard.chart_entries().
        x_label: X axis title.
        y_label: Y axis title.
        zoom_rect: Current zoom rectangle; fixes the axis ranges when set.

    Returns:
        Plotly Figure object.
    """
    points = [e for e in entries if not e.is_cluster]
    clusters = [e for e in entries if e.is_cluster]

    outline = [
        SELECTED_COLOR if e.is_selected else HOVER_COLOR if e.is_hovered else e.color
        for e in points
    ]
    outline_width = [3 if (e.is_selected or e.is_hovered) else 0 for e in points]

    # Plotly marker size is a diameter; styling sizes are radii.
    point_trace = go.Scatter(
        x=[e.item.x for e in points],
        y=[e.item.y for e in points],
        mode="markers",
        marker=dict(
            size=list(np.array([e.size for e in points]) * 2),
            color=[e.color for e in points],
            opacity=0.7,
            line=dict(color=outline, width=outline_width),
        ),
        customdata=[e.item.id for e in points],
        text=[
            f"{e.item.place}<br>Magnitude: {e.item.magnitude:.1f}" for e in points
        ],
        hovertemplate="%{text}<br>%{x:.2f}, %{y:.2f}<extra></extra>",
        name=POINT_TRACE,
    )

    cluster_items: list[Cluster] = [e.item for e in clusters]  # type: ignore[misc]
    cluster_trace = go.Scatter(
        x=[c.x for c in cluster_items],
        y=[c.y for c in cluster_items],
        mode="markers",
        marker=dict(
            size=list(np.array([e.size for e in clusters]) * 2),
            color=[e.color for e in clusters],
            opacity=0.8,
            line=dict(color="#ffffff", width=2),
        ),
        customdata=[",".join(sorted(c.member_ids)) for c in cluster_items],
        text=[
            f"Cluster of {c.size} earthquakes<br>Max magnitude: {c.magnitude:.1f}"
            "<br>Click to zoom in"
            for c in cluster_items
        ],
        hovertemplate="%{text}<extra></extra>",
        name=CLUSTER_TRACE,
    )

    fig = go.Figure(data=[cluster_trace, point_trace])
    fig.update_layout(
        paper_bgcolor=_BG,
        plot_bgcolor=_BG,
        showlegend=False,
        margin=dict(l=40, r=10, t=10, b=40),
        clickmode="event+select",
        xaxis=dict(title=x_label, gridcolor=_GRID_COLOR),
        yaxis=dict(title=y_label, gridcolor=_GRID_COLOR),
    )
    if zoom_rect is not None:
        fig.update_xaxes(range=[zoom_rect.x_min, zoom_rect.x_max], autorange=False)
        fig.update_yaxes(range=[zoom_rect.y_min, zoom_rect.y_max], autorange=False)

    fig._config = {"scrollZoom": False, "displayModeBar": False}  # type: ignore[attr-defined]

    return fig


def resolve_click(curve_number: int, customdata: object) -> tuple[str, list[str]]:
    """Map a clicked marker to ("point", [id]) or ("cluster", member_ids)."""
    raw = customdata[0] if isinstance(customdata, (list, tuple)) else customdata
    value = str(raw)
    if curve_number == CLUSTER_CURVE:
        return "cluster", [m for m in value.split(",") if m]
    return "point", [value]
