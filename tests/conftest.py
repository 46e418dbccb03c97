"""Shared route / plan factories."""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence

import pytest

from course_pacer.config import Settings
from course_pacer.core.models import PacingPlan, PacingSegment, RoutePoint


def make_route(
    n: int,
    spacing_m: float = 5.0,
    elevation: Optional[Callable[[int], Optional[float]]] = None,
) -> List[RoutePoint]:
    """``n`` points heading north, ``spacing_m`` apart."""
    return [
        RoutePoint(
            latitude=45.0 + i * 0.00005,
            longitude=7.0,
            elevation=elevation(i) if elevation else 100.0,
            distance=i * spacing_m,
        )
        for i in range(n)
    ]


def make_plan(
    distances: Sequence[float],
    powers: Sequence[float],
    times: Optional[Sequence[float]] = None,
    **kwargs,
) -> PacingPlan:
    times = times if times is not None else [d / 8.0 for d in distances]  # ~29 km/h
    return PacingPlan(
        segments=[
            PacingSegment(distance_meters=d, target_power_watts=p, estimated_time_seconds=t)
            for d, p, t in zip(distances, powers, times)
        ],
        **kwargs,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def long_route() -> List[RoutePoint]:
    """10,000 points, 5 m apart (0 .. 49,995 m)."""
    return make_route(10_000)


@pytest.fixture
def five_segment_plan() -> PacingPlan:
    """5 x 10 km at 150/200/250/200/150 W, 1500 s each, checkpoints every 10 km."""
    return make_plan(
        [10_000.0] * 5,
        [150, 200, 250, 200, 150],
        [1500.0] * 5,
        enable_time_checkpoints=True,
        time_checkpoint_interval=10.0,
    )
