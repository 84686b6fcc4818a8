"""Shared fixtures: synthetic earthquake records."""

import random

import pytest

from quakeview.models import ChartPoint, QuakeRecord


def make_record(record_id: str, lon: float, lat: float, mag: float = 3.0, **kwargs) -> QuakeRecord:
    fields = dict(depth=10.0, place=f"Somewhere {record_id}, Testland")
    fields.update(kwargs)
    return QuakeRecord(id=record_id, latitude=lat, longitude=lon, mag=mag, **fields)


def make_points(n: int, seed: int = 7, span: float = 100.0) -> list[ChartPoint]:
    rng = random.Random(seed)
    return [
        ChartPoint(
            id=f"p{i:05d}",
            x=rng.uniform(-span, span),
            y=rng.uniform(-span / 2, span / 2),
            magnitude=round(rng.uniform(0.5, 7.0), 1),
            place=f"place {i}",
        )
        for i in range(n)
    ]


@pytest.fixture
def records() -> list[QuakeRecord]:
    rng = random.Random(42)
    return [
        make_record(
            f"eq{i}",
            lon=rng.uniform(-180, 180),
            lat=rng.uniform(-60, 60),
            mag=round(rng.uniform(0.5, 7.5), 1),
            depth=round(rng.uniform(0, 600), 1),
        )
        for i in range(300)
    ]
