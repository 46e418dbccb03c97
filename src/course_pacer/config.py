"""Centralized settings for the course-pacer engine."""
from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "COURSE_PACER_"}

    # Downsampling target K (uniform stride size)
    max_course_points: int = 3500
    # Hard ceiling on geoPoints the vendor accepts; checked before handoff
    vendor_point_limit: int = 5000

    # Half-width (in indices) of the local search around a boundary estimate
    boundary_search_window: int = 500

    # Power labels only go on points this close to a segment start
    power_label_radius_m: float = 50.0
    # Only the first retained point near a segment start gets its power label
    one_power_label_per_boundary: bool = True

    # Course metadata
    course_name_max_length: int = 100
    default_course_name: str = "Course"
    course_description: str = "Created by RideWeatherPro with power guidance"
    default_activity_type: str = "ROAD_CYCLING"
    coordinate_system: str = "WGS84"

    # Vendor transport
    garmin_courses_url: str = "https://apis.garmin.com/training-api/courses/v1/course"
    user_agent: str = "RideWeatherPro/1.0"
    http_timeout_s: int = 25
    http_tries: int = 3
    http_backoff_s: float = 0.8


settings = Settings()
