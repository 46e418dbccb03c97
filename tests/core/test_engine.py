"""End-to-end build_course."""

from __future__ import annotations

import pytest

from conftest import make_plan, make_route
from course_pacer.config import Settings
from course_pacer.contracts.course_contract import CheckpointLabel, PowerTargetLabel
from course_pacer.core.engine import build_course
from course_pacer.core.models import PacingPlan
from course_pacer.errors import InvalidRoute


def _labels(payload, kind):
    return [ap for ap in payload.points if isinstance(ap.label, kind)]


class TestBuildCourse:
    def test_reference_ride(self, long_route, five_segment_plan):
        payload = build_course(long_route, five_segment_plan, course_name="Five Blocks")

        assert 3500 <= payload.point_count <= 3510
        assert payload.points[0].source_index == 0
        assert payload.points[-1].source_index == len(long_route) - 1

        power = [ap.label.text for ap in _labels(payload, PowerTargetLabel)]
        assert power == ["Power 150W", "Power 200W", "Power 250W", "Power 200W", "Power 150W"]

        checkpoints = _labels(payload, CheckpointLabel)
        assert [ap.label.text for ap in checkpoints] == [
            "10.0km 00:25:00",
            "20.0km 00:50:00",
            "30.0km 01:15:00",
            "40.0km 01:40:00",
        ]
        assert [ap.route_point.distance for ap in checkpoints] == [10_000, 20_000, 30_000, 40_000]

    def test_no_plan_is_plain_downsample(self, long_route):
        payload = build_course(long_route, None, course_name="Plain")
        assert all(ap.label is None for ap in payload.points)
        assert 3500 <= payload.point_count <= 3501

    def test_empty_plan_with_checkpoints_off(self, long_route):
        payload = build_course(long_route, PacingPlan(), course_name="Empty")
        assert payload.checkpoint_count == 0
        assert payload.power_label_count == 0

    def test_small_route_kept_whole(self):
        route = make_route(200)
        payload = build_course(route, make_plan([500.0, 495.0], [210, 190]), course_name="Short")
        assert [ap.route_point for ap in payload.points] == route
        assert payload.power_label_count == 2

    def test_statistics_use_full_route(self):
        route = make_route(8000, elevation=lambda i: 100.0 + (i % 2))
        payload = build_course(route, None, course_name="Bumpy")
        # Every 1 m bump counts even though most points are dropped
        assert payload.elevation_gain == pytest.approx(4000.0)
        assert payload.elevation_loss == pytest.approx(3999.0)
        assert payload.total_distance == route[-1].distance

    def test_settings_override(self, long_route):
        cfg = Settings(max_course_points=1000)
        payload = build_course(long_route, None, course_name="Small", settings=cfg)
        assert 1000 <= payload.point_count <= 1001

    def test_invalid_route(self):
        with pytest.raises(InvalidRoute):
            build_course(make_route(1), None, course_name="Dot")

    def test_deterministic(self, long_route, five_segment_plan):
        a = build_course(long_route, five_segment_plan, course_name="Same").to_vendor_json()
        b = build_course(long_route, five_segment_plan, course_name="Same").to_vendor_json()
        assert a == b
