from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UnitSystem(str, Enum):
    METRIC = "metric"
    IMPERIAL = "imperial"


class RoutePoint(BaseModel):
    """One parsed GPS sample.  ``distance`` is cumulative metres from the start."""

    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float
    elevation: Optional[float] = None
    distance: float = Field(..., ge=0.0)


class PacingSegment(BaseModel):
    """One homogeneous stretch of the planned ride, in plan order."""

    model_config = ConfigDict(frozen=True)

    distance_meters: float = Field(..., gt=0.0)
    target_power_watts: float = Field(..., ge=0.0)
    estimated_time_seconds: float = Field(..., ge=0.0)


class PacingPlan(BaseModel):
    segments: List[PacingSegment] = Field(default_factory=list)

    units: UnitSystem = UnitSystem.METRIC

    # Periodic "expected elapsed time" course points
    enable_time_checkpoints: bool = False
    # Interval in the active unit (km for metric, mi for imperial)
    time_checkpoint_interval: float = 10.0

    @field_validator("time_checkpoint_interval")
    @classmethod
    def _positive_interval(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("time_checkpoint_interval must be > 0")
        return v

    @property
    def total_distance_m(self) -> float:
        return sum(s.distance_meters for s in self.segments)

    @property
    def total_time_s(self) -> float:
        return sum(s.estimated_time_seconds for s in self.segments)
