from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from course_pacer.core.models import RoutePoint


@dataclass(frozen=True)
class SegmentBoundary:
    start_distance: float
    end_distance: float
    target_power_watts: float

    def contains(self, distance: float) -> bool:
        """Half-open membership: ``[start, end)``."""
        return self.start_distance <= distance < self.end_distance


@dataclass(frozen=True)
class Checkpoint:
    distance_meters: float
    elapsed_time_seconds: float


@dataclass(frozen=True)
class CheckpointLabel:
    text: str
    course_point_type: str = "GENERIC"


@dataclass(frozen=True)
class PowerTargetLabel:
    text: str
    course_point_type: str = "INFO"


# At most one label per point; both-at-once is not representable
Label = Union[CheckpointLabel, PowerTargetLabel, None]


@dataclass(frozen=True)
class AnnotatedPoint:
    route_point: RoutePoint
    label: Label = None
    # Position in the original (dense) route
    source_index: Optional[int] = None

    def to_geo_point(self) -> Dict[str, Any]:
        p = self.route_point
        out: Dict[str, Any] = {"latitude": p.latitude, "longitude": p.longitude}
        if p.elevation is not None:
            out["elevation"] = p.elevation
        if self.label is not None:
            out["information"] = {
                "name": self.label.text,
                "coursePointType": self.label.course_point_type,
            }
        return out


@dataclass(frozen=True)
class CourseStats:
    total_distance: float
    elevation_gain: float
    elevation_loss: float


@dataclass(frozen=True)
class CoursePayload:
    name: str
    description: str
    total_distance: float
    elevation_gain: float
    elevation_loss: float
    points: List[AnnotatedPoint]
    activity_type: str
    coordinate_system: str = "WGS84"
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def point_count(self) -> int:
        return len(self.points)

    @property
    def checkpoint_count(self) -> int:
        return sum(1 for p in self.points if isinstance(p.label, CheckpointLabel))

    @property
    def power_label_count(self) -> int:
        return sum(1 for p in self.points if isinstance(p.label, PowerTargetLabel))

    def to_vendor_json(self) -> Dict[str, Any]:
        """Course-creation body in the vendor's JSON schema."""
        return {
            "courseName": self.name,
            "description": self.description,
            "distance": self.total_distance,
            "elevationGain": self.elevation_gain,
            "elevationLoss": self.elevation_loss,
            "geoPoints": [p.to_geo_point() for p in self.points],
            "activityType": self.activity_type,
            "coordinateSystem": self.coordinate_system,
        }
