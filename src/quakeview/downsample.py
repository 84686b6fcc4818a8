"""Spatial downsampling: grid clustering that bounds the rendered point count."""

import logging
import math
from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from quakeview.models import (
    ChartPoint,
    Cluster,
    DownsampleSummary,
    QuakeRecord,
    ViewportRect,
)

logger = logging.getLogger(__name__)

# Grid edge fallback when the data span collapses on an axis.
MIN_CELL_SIZE = 1e-9


def build_chart_points(
    records: Iterable[QuakeRecord], x_axis: str, y_axis: str
) -> list[ChartPoint]:
    """Project records onto the (x_axis, y_axis) pair.

    Records whose axis values are missing or non-finite are skipped; the
    dashboard filters them beforehand, so this only guards direct callers.
    """
    points: list[ChartPoint] = []
    for record in records:
        x = record.field(x_axis)
        y = record.field(y_axis)
        if not (_is_finite(x) and _is_finite(y)):
            continue
        points.append(
            ChartPoint(
                id=record.id,
                x=float(x),  # type: ignore[arg-type]
                y=float(y),  # type: ignore[arg-type]
                magnitude=record.mag,
                place=record.place,
            )
        )
    return points


def downsample(
    points: Sequence[ChartPoint],
    max_points: int,
    viewport: ViewportRect | None = None,
) -> list[ChartPoint | Cluster]:
    """Reduce points to roughly max_points representatives.

    Small inputs come back unchanged. With a viewport, only points inside it
    are considered, and if those already fit they are returned as-is, so
    zooming in always trades density for fidelity. Otherwise points are
    bucketed into a uniform grid whose edge, sqrt(x_range * y_range /
    max_points), targets ``max_points`` cells. Singleton cells stay
    individual and the rest become clusters.

    The output is ordered by grid cell, and cluster membership by id, so the
    result does not depend on input order.

    Args:
        points: Chart points for the active axis pair.
        max_points: Target upper bound for the representative count.
        viewport: Optional zoom rectangle (inclusive bounds).

    Returns:
        List of ChartPoint (individual) and Cluster entries.
    """
    finite = [p for p in points if math.isfinite(p.x) and math.isfinite(p.y)]
    if len(finite) != len(points):
        logger.warning(
            "Dropped %d point(s) with non-finite coordinates",
            len(points) - len(finite),
        )

    if len(finite) <= max_points:
        return list(finite)

    scoped = finite
    if viewport is not None:
        scoped = [p for p in finite if viewport.contains(p.x, p.y)]
        if len(scoped) <= max_points:
            return scoped

    if not scoped:
        return []

    grid = Grid.fit(scoped, max_points)
    cells: dict[tuple[int, int], list[ChartPoint]] = defaultdict(list)
    for point in scoped:
        cells[grid.cell(point.x, point.y)].append(point)

    result: list[ChartPoint | Cluster] = []
    for key in sorted(cells):
        members = cells[key]
        if len(members) == 1:
            result.append(members[0])
        else:
            result.append(make_cluster(members))

    logger.debug(
        "Downsampled %d point(s) into %d entries (edge=%g, grid=%dx%d)",
        len(scoped),
        len(result),
        grid.edge,
        grid.columns,
        grid.rows,
    )
    return result


@dataclass(frozen=True)
class Grid:
    """Uniform square-cell grid anchored at the data minimum.

    The last column and row absorb the upper boundary, so a point at the
    maximum never spills into an extra cell and ``columns * rows`` stays
    within the requested cell budget.
    """

    x0: float
    y0: float
    edge: float
    columns: int
    rows: int

    @classmethod
    def fit(cls, points: Sequence[ChartPoint], max_cells: int) -> "Grid":
        xs = [p.x for p in points]
        ys = [p.y for p in points]
        x0, y0 = min(xs), min(ys)
        x_range = max(xs) - x0
        y_range = max(ys) - y0
        budget = max(max_cells, 1)

        if x_range > 0 and y_range > 0:
            edge = math.sqrt((x_range * y_range) / budget)
        else:
            # Zero span on one or both axes: spread the budget along the other.
            edge = max(x_range, y_range) / budget
        if not (edge > 0 and math.isfinite(edge)):
            edge = MIN_CELL_SIZE
        edge = max(edge, MIN_CELL_SIZE)

        columns = max(int(min(x_range / edge, budget)), 1)
        rows = max(int(min(y_range / edge, budget // columns)), 1)
        return cls(x0=x0, y0=y0, edge=edge, columns=columns, rows=rows)

    def cell(self, x: float, y: float) -> tuple[int, int]:
        col = int(min((x - self.x0) / self.edge, self.columns - 1))
        row = int(min((y - self.y0) / self.edge, self.rows - 1))
        return col, row


def make_cluster(members: Sequence[ChartPoint]) -> Cluster:
    """Summarize two or more points: mean position, max magnitude."""
    ordered = sorted(members, key=lambda p: p.id)
    xs = [p.x for p in ordered]
    ys = [p.y for p in ordered]
    # Missing magnitudes (NaN) never mask a real member maximum.
    magnitudes = [p.magnitude for p in ordered if math.isfinite(p.magnitude)]
    return Cluster(
        synthetic_id="cluster_" + "_".join(p.id for p in ordered),
        x=math.fsum(xs) / len(xs),
        y=math.fsum(ys) / len(ys),
        magnitude=max(magnitudes, default=math.nan),
        member_ids=frozenset(p.id for p in ordered),
        x_min=min(xs),
        x_max=max(xs),
        y_min=min(ys),
        y_max=max(ys),
    )


def summarize(entries: Sequence[ChartPoint | Cluster], total: int) -> DownsampleSummary:
    """Counts for the "N points representing M earthquakes" banner."""
    clusters = sum(1 for e in entries if isinstance(e, Cluster))
    represented = sum(e.size if isinstance(e, Cluster) else 1 for e in entries)
    return DownsampleSummary(
        chart_points=len(entries),
        clusters=clusters,
        individual_points=len(entries) - clusters,
        represented=represented,
        total=total,
        is_downsampled=represented < total,
    )


def _is_finite(value: object) -> bool:
    return isinstance(value, (int, float)) and math.isfinite(value)
