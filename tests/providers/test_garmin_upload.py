"""Garmin course upload: status mapping and retry behaviour."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import requests
from urllib3.exceptions import NewConnectionError

from conftest import make_route
from course_pacer.config import Settings
from course_pacer.core.engine import build_course
from course_pacer.errors import (
    UpstreamAPIError,
    UpstreamAuthError,
    UpstreamNetworkError,
    UpstreamPermissionError,
    UpstreamRateLimited,
)
from course_pacer.providers.garmin import GarminCourseClient
from course_pacer.providers.http import HTTPClient

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _response(status: int, body=None, text: str = "") -> MagicMock:
    r = MagicMock()
    r.status_code = status
    r.text = text
    if body is None:
        r.json.side_effect = ValueError("no json")
    else:
        r.json.return_value = body
    return r


def _client(response) -> tuple[GarminCourseClient, MagicMock]:
    http = MagicMock(spec=HTTPClient)
    if isinstance(response, Exception):
        http.post_json.side_effect = response
    else:
        http.post_json.return_value = response
    return GarminCourseClient("tok-123", settings=Settings(), http=http), http


@pytest.fixture
def payload():
    return build_course(make_route(50), None, course_name="Upload Me")


# ---------------------------------------------------------------------------
# GarminCourseClient
# ---------------------------------------------------------------------------


class TestUploadCourse:
    def test_success_returns_course_id(self, payload):
        client, http = _client(_response(200, {"courseId": 98765}))
        result = client.upload_course(payload)
        assert result.course_id == 98765
        assert result.point_count == 50

        url, body = http.post_json.call_args.args
        headers = http.post_json.call_args.kwargs["headers"]
        assert url == Settings().garmin_courses_url
        assert body["courseName"] == "Upload Me"
        assert len(body["geoPoints"]) == 50
        assert headers["Authorization"] == "Bearer tok-123"
        assert headers["Content-Type"] == "application/json"

    def test_success_without_course_id(self, payload):
        client, _ = _client(_response(200))
        assert client.upload_course(payload).course_id is None

    @pytest.mark.parametrize(
        "status, exc",
        [
            (401, UpstreamAuthError),
            (412, UpstreamPermissionError),
            (429, UpstreamRateLimited),
        ],
    )
    def test_known_statuses(self, payload, status, exc):
        client, http = _client(_response(status))
        with pytest.raises(exc):
            client.upload_course(payload)
        assert http.post_json.call_count == 1

    def test_other_status_is_api_error(self, payload):
        client, _ = _client(_response(400, text="geoPoints limit exceeded"))
        with pytest.raises(UpstreamAPIError) as e:
            client.upload_course(payload)
        assert e.value.status_code == 400
        assert "geoPoints limit exceeded" in e.value.user_message

    def test_network_error(self, payload):
        client, _ = _client(requests.ConnectionError("boom"))
        with pytest.raises(UpstreamNetworkError):
            client.upload_course(payload)


# ---------------------------------------------------------------------------
# HTTPClient
# ---------------------------------------------------------------------------


class TestHTTPClient:
    def test_retries_connect_timeouts_then_raises(self):
        client = HTTPClient(user_agent="test", tries=3, backoff_s=0.0)
        with patch.object(client.s, "post", side_effect=requests.ConnectTimeout("no route")) as post:
            with pytest.raises(requests.ConnectTimeout):
                client.post_json("https://example.test/course", {"a": 1})
        assert post.call_count == 3

    def test_retries_refused_connection(self):
        client = HTTPClient(user_agent="test", tries=2, backoff_s=0.0)
        refused = requests.ConnectionError(NewConnectionError(None, "connection refused"))
        resp = _response(200, {"courseId": 1})
        with patch.object(client.s, "post", side_effect=[refused, resp]) as post:
            assert client.post_json("https://example.test/course", {}) is resp
        assert post.call_count == 2

    def test_read_timeout_not_retried(self):
        client = HTTPClient(user_agent="test", tries=3, backoff_s=0.0)
        resp = _response(200, {"courseId": 1})
        with patch.object(client.s, "post", side_effect=[requests.ReadTimeout("slow"), resp]) as post:
            with pytest.raises(requests.ReadTimeout):
                client.post_json("https://example.test/course", {})
        assert post.call_count == 1

    def test_connection_dropped_after_send_not_retried(self):
        client = HTTPClient(user_agent="test", tries=3, backoff_s=0.0)
        with patch.object(client.s, "post", side_effect=requests.ConnectionError("reset by peer")) as post:
            with pytest.raises(requests.ConnectionError):
                client.post_json("https://example.test/course", {})
        assert post.call_count == 1

    def test_http_error_status_not_retried(self):
        client = HTTPClient(user_agent="test", tries=3, backoff_s=0.0)
        resp = _response(500)
        with patch.object(client.s, "post", return_value=resp) as post:
            assert client.post_json("https://example.test/course", {}) is resp
        assert post.call_count == 1
        assert client.s.headers["User-Agent"] == "test"


def test_read_timeout_surfaces_as_network_error(payload):
    http = HTTPClient(user_agent="test", tries=3, backoff_s=0.0)
    client = GarminCourseClient("tok-123", settings=Settings(), http=http)
    resp = _response(200, {"courseId": 7})
    with patch.object(http.s, "post", side_effect=[requests.ReadTimeout("slow"), resp]) as post:
        with pytest.raises(UpstreamNetworkError):
            client.upload_course(payload)
    assert post.call_count == 1
