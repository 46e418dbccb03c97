"""Route statistics: validation plus one-pass elevation gain/loss."""
from __future__ import annotations

import logging
from typing import Sequence

from course_pacer.contracts.course_contract import CourseStats
from course_pacer.core.models import RoutePoint
from course_pacer.errors import InvalidRoute

log = logging.getLogger(__name__)


def validate_route(points: Sequence[RoutePoint]) -> None:
    """Raise ``InvalidRoute`` unless there are >= 2 points with non-decreasing distance."""
    if len(points) < 2:
        raise InvalidRoute(f"route needs at least 2 points, got {len(points)}")

    for i in range(1, len(points)):
        if points[i].distance < points[i - 1].distance:
            raise InvalidRoute(
                f"distance decreases at index {i}: "
                f"{points[i - 1].distance:.1f} -> {points[i].distance:.1f}"
            )


def accumulate_elevation(points: Sequence[RoutePoint]) -> CourseStats:
    """
    Walk consecutive pairs once and total the climbing and descending.

    Missing elevation counts as 0 m for the delta (it is not skipped), so a
    gap in the elevation track shows up as a drop to sea level and back.
    Statistics are taken on the full route, before any downsampling.
    """
    validate_route(points)

    gain = 0.0
    loss = 0.0
    for i in range(1, len(points)):
        cur = points[i].elevation if points[i].elevation is not None else 0.0
        prev = points[i - 1].elevation if points[i - 1].elevation is not None else 0.0
        diff = cur - prev
        if diff > 0:
            gain += diff
        else:
            loss += abs(diff)

    stats = CourseStats(
        total_distance=points[-1].distance,
        elevation_gain=gain,
        elevation_loss=loss,
    )
    log.debug(
        "Route stats: %.2f km, +%.0f m / -%.0f m",
        stats.total_distance / 1000.0, stats.elevation_gain, stats.elevation_loss,
    )
    return stats
