from __future__ import annotations

import logging
from typing import Optional, Sequence

from course_pacer.config import Settings, settings as default_settings
from course_pacer.contracts.course_contract import CoursePayload
from course_pacer.core.annotate import annotate_points
from course_pacer.core.boundaries import build_segment_boundaries
from course_pacer.core.checkpoints import assign_checkpoints, generate_checkpoints
from course_pacer.core.downsample import retained_indices
from course_pacer.core.models import PacingPlan, RoutePoint, UnitSystem
from course_pacer.core.payload import build_payload
from course_pacer.core.route import accumulate_elevation

log = logging.getLogger(__name__)


def build_course(
    route_points: Sequence[RoutePoint],
    pacing_plan: Optional[PacingPlan] = None,
    course_name: str = "",
    activity_type: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> CoursePayload:
    """
    Dense route + optional pacing plan -> bounded, annotated course.

    Pure and deterministic; raises ``InvalidRoute`` / ``PayloadTooLarge``
    and never returns a partial payload.  Without a plan (or with an empty
    one) the result is a plain uniform downsample with no labels.
    """
    cfg = settings or default_settings

    # Statistics on the full dataset, before any points are dropped
    stats = accumulate_elevation(route_points)
    boundaries = build_segment_boundaries(pacing_plan.segments if pacing_plan else None)

    indices = retained_indices(
        route_points,
        boundaries,
        target_count=cfg.max_course_points,
        window=cfg.boundary_search_window,
        warn_radius_m=cfg.power_label_radius_m,
    )
    kept = [route_points[i] for i in indices]
    log.info("Optimized route from %d to %d points", len(route_points), len(kept))

    checkpoints = generate_checkpoints(pacing_plan, stats.total_distance)
    assignments = assign_checkpoints(checkpoints, kept, indices)

    units = pacing_plan.units if pacing_plan else UnitSystem.METRIC
    annotated = annotate_points(
        kept, indices, assignments, boundaries,
        units=units,
        radius_m=cfg.power_label_radius_m,
        once_per_boundary=cfg.one_power_label_per_boundary,
    )

    return build_payload(
        annotated,
        stats,
        course_name,
        activity_type=activity_type,
        settings=cfg,
        meta={
            "source_point_count": len(route_points),
            "boundary_count": len(boundaries),
            "checkpoint_count": len(checkpoints),
        },
    )
