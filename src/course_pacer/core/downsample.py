"""Point downsampling: bounded-size course that keeps structurally important points."""
from __future__ import annotations

import logging
from typing import List, Sequence, Set

from course_pacer.contracts.course_contract import SegmentBoundary
from course_pacer.core.models import RoutePoint

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def nearest_index_in_window(
    points: Sequence[RoutePoint],
    target_distance: float,
    window: int = 500,
) -> int:
    """
    Index of the point whose ``distance`` is closest to ``target_distance``.

    Starts from a proportional estimate (target / total * count) and scans
    ``window`` indices either side of it.  On routes with very uneven point
    density the true nearest point can sit outside the window; the result is
    then the best point inside it.
    """
    n = len(points)
    total = points[-1].distance
    approx = int((target_distance / total) * n) if total > 0 else 0
    approx = max(0, min(n - 1, approx))

    lo = max(0, approx - window)
    hi = min(n - 1, approx + window)

    best_idx = approx
    best_diff = float("inf")
    for i in range(lo, hi + 1):
        diff = abs(points[i].distance - target_distance)
        if diff < best_diff:
            best_diff = diff
            best_idx = i
    return best_idx


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def retained_indices(
    points: Sequence[RoutePoint],
    boundaries: Sequence[SegmentBoundary],
    target_count: int = 3500,
    window: int = 500,
    warn_radius_m: float = 50.0,
) -> List[int]:
    """
    Sorted indices of the points to keep.

    Below the ceiling every index is kept.  Above it the set is the union of
    the two route ends, the nearest point to every boundary start, and a
    uniform stride of ``target_count`` samples.  The size is not capped
    exactly: forced boundary points that miss the stride add on top of it.
    """
    n = len(points)
    if n <= target_count:
        return list(range(n))

    keep: Set[int] = {0, n - 1}

    # 1. Points that must exist for power course points
    for b in boundaries:
        idx = nearest_index_in_window(points, b.start_distance, window=window)
        miss = abs(points[idx].distance - b.start_distance)
        if miss > warn_radius_m:
            log.warning(
                "Nearest point to boundary at %.0f m is %.0f m away (window=%d)",
                b.start_distance, miss, window,
            )
        keep.add(idx)

    # 2. Uniform stride for the rest
    step = n / target_count
    for i in range(target_count):
        keep.add(int(i * step))

    return sorted(keep)


def downsample_route(
    points: Sequence[RoutePoint],
    boundaries: Sequence[SegmentBoundary],
    target_count: int = 3500,
    window: int = 500,
) -> List[RoutePoint]:
    """Retained points in route order; the input itself when already small enough."""
    if len(points) <= target_count:
        return list(points)
    out = [points[i] for i in retained_indices(points, boundaries, target_count, window)]
    log.info("Optimized route from %d to %d points", len(points), len(out))
    return out
