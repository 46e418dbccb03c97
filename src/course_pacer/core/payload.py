from __future__ import annotations

import logging
import re
from typing import Any, Dict, Optional, Sequence

from course_pacer.config import Settings, settings as default_settings
from course_pacer.contracts.course_contract import AnnotatedPoint, CoursePayload, CourseStats
from course_pacer.errors import PayloadTooLarge

log = logging.getLogger(__name__)

_DISALLOWED = re.compile(r"[^\w\s\-]")
_EDGE_SEPARATORS = "-._ \t\r\n"


def sanitize_course_name(name: str, max_length: int = 100) -> str:
    """
    Keep letters, digits, whitespace, ``-`` and ``_``; collapse newlines to
    spaces, strip separator characters off both ends and truncate.
    """
    cleaned = _DISALLOWED.sub("", name or "")
    cleaned = cleaned.replace("\r", " ").replace("\n", " ")
    cleaned = cleaned.strip(_EDGE_SEPARATORS)
    return cleaned[:max_length].rstrip(_EDGE_SEPARATORS)


def build_payload(
    points: Sequence[AnnotatedPoint],
    stats: CourseStats,
    course_name: str,
    activity_type: Optional[str] = None,
    settings: Optional[Settings] = None,
    meta: Optional[Dict[str, Any]] = None,
) -> CoursePayload:
    """Assemble the export structure; refuses to hand off more points than the vendor accepts."""
    cfg = settings or default_settings

    if len(points) > cfg.vendor_point_limit:
        raise PayloadTooLarge(len(points), cfg.vendor_point_limit)

    name = sanitize_course_name(course_name, cfg.course_name_max_length) or cfg.default_course_name

    payload = CoursePayload(
        name=name,
        description=cfg.course_description,
        total_distance=stats.total_distance,
        elevation_gain=stats.elevation_gain,
        elevation_loss=stats.elevation_loss,
        points=list(points),
        activity_type=activity_type or cfg.default_activity_type,
        coordinate_system=cfg.coordinate_system,
        meta=dict(meta or {}),
    )

    log.info(
        "Course %r: %.2f km, +%.0f m / -%.0f m, %d points (%d checkpoints, %d power targets)",
        payload.name,
        payload.total_distance / 1000.0,
        payload.elevation_gain,
        payload.elevation_loss,
        payload.point_count,
        payload.checkpoint_count,
        payload.power_label_count,
    )
    return payload
