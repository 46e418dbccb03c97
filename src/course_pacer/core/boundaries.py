from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from course_pacer.contracts.course_contract import SegmentBoundary
from course_pacer.core.models import PacingSegment

log = logging.getLogger(__name__)


def build_segment_boundaries(segments: Optional[Sequence[PacingSegment]]) -> List[SegmentBoundary]:
    """
    Turn ordered pacing segments into absolute ``[start, end)`` intervals.

    Boundaries tile the plan: each start equals the previous end.  Output
    order matches plan order (the annotation step relies on it).
    """
    if not segments:
        return []

    out: List[SegmentBoundary] = []
    cursor = 0.0
    for seg in segments:
        end = cursor + seg.distance_meters
        out.append(SegmentBoundary(cursor, end, seg.target_power_watts))
        cursor = end

    log.info("Built %d segment boundaries", len(out))
    return out
