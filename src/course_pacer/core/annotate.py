"""Course-point labels: one per point at most, checkpoint before power target."""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Set

from course_pacer.contracts.course_contract import (
    AnnotatedPoint,
    Checkpoint,
    CheckpointLabel,
    Label,
    PowerTargetLabel,
    SegmentBoundary,
)
from course_pacer.core.models import RoutePoint, UnitSystem

log = logging.getLogger(__name__)

KM_TO_MI = 0.621371


def format_elapsed(seconds: float) -> str:
    """``HH:MM:SS``; hours are not wrapped at 24."""
    total = int(seconds)
    return f"{total // 3600:02d}:{(total % 3600) // 60:02d}:{total % 60:02d}"


def format_checkpoint_label(cp: Checkpoint, units: UnitSystem = UnitSystem.METRIC) -> str:
    """e.g. ``"10.0km 00:25:00"`` or ``"6.2mi 00:25:00"``."""
    km = cp.distance_meters / 1000.0
    if units == UnitSystem.IMPERIAL:
        shown, symbol = km * KM_TO_MI, "mi"
    else:
        shown, symbol = km, "km"
    return f"{shown:.1f}{symbol} {format_elapsed(cp.elapsed_time_seconds)}"


def format_power_label(watts: float) -> str:
    return f"Power {int(watts)}W"


def power_boundary_position(
    distance: float,
    boundaries: Sequence[SegmentBoundary],
    radius_m: float = 50.0,
) -> Optional[int]:
    """
    Position of the boundary whose power target belongs on a point at
    ``distance``: the first boundary holding it, if the point is within
    ``radius_m`` of that boundary's start.
    """
    for pos, b in enumerate(boundaries):
        if b.contains(distance):
            if abs(distance - b.start_distance) < radius_m:
                return pos
            return None
    return None


def resolve_label(
    point: RoutePoint,
    checkpoint: Optional[Checkpoint],
    boundaries: Sequence[SegmentBoundary],
    units: UnitSystem = UnitSystem.METRIC,
    radius_m: float = 50.0,
) -> Label:
    if checkpoint is not None:
        return CheckpointLabel(format_checkpoint_label(checkpoint, units))

    pos = power_boundary_position(point.distance, boundaries, radius_m)
    if pos is not None:
        return PowerTargetLabel(format_power_label(boundaries[pos].target_power_watts))
    return None


def annotate_points(
    points: Sequence[RoutePoint],
    indices: Sequence[int],
    assignments: Dict[int, Checkpoint],
    boundaries: Sequence[SegmentBoundary],
    units: UnitSystem = UnitSystem.METRIC,
    radius_m: float = 50.0,
    once_per_boundary: bool = True,
) -> List[AnnotatedPoint]:
    """
    Attach labels to the retained points, keeping their route order.

    With ``once_per_boundary`` only the first retained point near a segment
    start carries its power target; the others near the same start stay
    unlabelled.  Checkpoint labels are never suppressed.
    """
    out: List[AnnotatedPoint] = []
    powered: Set[int] = set()

    for idx, point in zip(indices, points):
        label = resolve_label(point, assignments.get(idx), boundaries, units, radius_m)
        if isinstance(label, CheckpointLabel):
            log.debug("Time checkpoint at point %d: %s", idx, label.text)
        elif isinstance(label, PowerTargetLabel) and once_per_boundary:
            pos = power_boundary_position(point.distance, boundaries, radius_m)
            if pos in powered:
                label = None
            else:
                powered.add(pos)
        out.append(AnnotatedPoint(route_point=point, label=label, source_index=idx))

    return out
