"""Time checkpoints: where the rider should be, and when, every N km/mi."""
from __future__ import annotations

import logging
from bisect import bisect_left
from typing import Dict, List, Optional, Sequence

from course_pacer.contracts.course_contract import Checkpoint
from course_pacer.core.models import PacingPlan, PacingSegment, RoutePoint, UnitSystem

log = logging.getLogger(__name__)

METERS_PER_KM = 1000.0
METERS_PER_MILE = 1609.344


def checkpoint_interval_m(plan: PacingPlan) -> float:
    """Plan's checkpoint interval (in its own unit) converted to metres."""
    if plan.units == UnitSystem.IMPERIAL:
        return plan.time_checkpoint_interval * METERS_PER_MILE
    return plan.time_checkpoint_interval * METERS_PER_KM


def elapsed_time_at(distance: float, segments: Sequence[PacingSegment]) -> float:
    """
    Expected elapsed seconds on reaching ``distance``.

    Whole segments behind the rider contribute their full estimated time;
    the segment containing ``distance`` contributes pro rata by distance
    (pace assumed uniform within a segment).  Past the end of the plan the
    total plan time is returned.
    """
    elapsed = 0.0
    seg_start = 0.0
    for seg in segments:
        if distance <= seg_start:
            break
        seg_end = seg_start + seg.distance_meters
        if distance >= seg_end:
            elapsed += seg.estimated_time_seconds
        else:
            elapsed += seg.estimated_time_seconds * (distance - seg_start) / seg.distance_meters
            break
        seg_start = seg_end
    return elapsed


def generate_checkpoints(
    plan: Optional[PacingPlan],
    total_distance: float,
    interval_m: Optional[float] = None,
) -> List[Checkpoint]:
    """
    Checkpoints at ``I, 2I, 3I, ...`` strictly below ``total_distance``.

    Empty when there is no plan or the plan has checkpoints switched off.
    ``interval_m`` overrides the plan's own interval.
    """
    if plan is None or not plan.enable_time_checkpoints:
        return []

    step = interval_m if interval_m is not None else checkpoint_interval_m(plan)
    if step <= 0:
        raise ValueError("checkpoint interval must be > 0")

    out: List[Checkpoint] = []
    d = step
    while d < total_distance:
        out.append(Checkpoint(d, elapsed_time_at(d, plan.segments)))
        d += step

    log.info("Generated %d time checkpoints", len(out))
    return out


def _nearest_position(distances: Sequence[float], target: float) -> int:
    """Position in sorted ``distances`` closest to ``target``; lowest position on ties."""
    pos = bisect_left(distances, target)
    if pos == 0:
        return 0
    if pos == len(distances):
        return bisect_left(distances, distances[-1])
    before = bisect_left(distances, distances[pos - 1])
    if abs(distances[pos] - target) < abs(distances[before] - target):
        return pos
    return before


def assign_checkpoints(
    checkpoints: Sequence[Checkpoint],
    points: Sequence[RoutePoint],
    indices: Optional[Sequence[int]] = None,
) -> Dict[int, Checkpoint]:
    """
    Map each checkpoint to the single retained point nearest to it.

    ``indices`` are the route indices of ``points`` (defaults to their list
    positions) and are the keys of the result.  When two checkpoints land
    on the same point the later one wins.
    """
    if not points:
        return {}
    keys = list(indices) if indices is not None else list(range(len(points)))
    distances = [p.distance for p in points]

    assignments: Dict[int, Checkpoint] = {}
    for cp in checkpoints:
        key = keys[_nearest_position(distances, cp.distance_meters)]
        if key in assignments:
            log.debug(
                "Checkpoint at %.0f m replaces %.0f m on point %d",
                cp.distance_meters, assignments[key].distance_meters, key,
            )
        assignments[key] = cp

    log.info("Assigned %d checkpoints to specific points", len(assignments))
    return assignments
