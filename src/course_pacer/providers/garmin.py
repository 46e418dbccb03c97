"""Garmin Courses API upload.

Token acquisition and refresh happen elsewhere; callers pass a valid access
token.  Status codes map one-to-one onto ``Upstream*`` errors and are never
retried here.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import requests

from course_pacer.config import Settings, settings as default_settings
from course_pacer.contracts.course_contract import CoursePayload
from course_pacer.errors import (
    UpstreamAPIError,
    UpstreamAuthError,
    UpstreamNetworkError,
    UpstreamPermissionError,
    UpstreamRateLimited,
)
from course_pacer.providers.http import HTTPClient

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadResult:
    course_id: Optional[int]
    point_count: int


class GarminCourseClient:
    def __init__(
        self,
        access_token: str,
        settings: Optional[Settings] = None,
        http: Optional[HTTPClient] = None,
    ) -> None:
        self.access_token = access_token
        self.settings = settings or default_settings
        self.http = http or HTTPClient(
            user_agent=self.settings.user_agent,
            timeout_s=self.settings.http_timeout_s,
            tries=self.settings.http_tries,
            backoff_s=self.settings.http_backoff_s,
        )

    def upload_course(self, payload: CoursePayload) -> UploadResult:
        url = self.settings.garmin_courses_url
        headers = {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
        }
        log.info(
            "Uploading course %r to %s (%d geoPoints)",
            payload.name, url, payload.point_count,
        )

        try:
            r = self.http.post_json(url, payload.to_vendor_json(), headers=headers)
        except requests.RequestException as e:
            log.warning("Network error uploading course: %s", e)
            raise UpstreamNetworkError(str(e)) from e

        log.info("Response status: %s", r.status_code)

        if r.status_code == 200:
            course_id = _course_id(r)
            log.info("Course created, id=%s", course_id)
            return UploadResult(course_id=course_id, point_count=payload.point_count)
        if r.status_code == 401:
            raise UpstreamAuthError("user access token doesn't exist")
        if r.status_code == 412:
            raise UpstreamPermissionError("user permission error")
        if r.status_code == 429:
            raise UpstreamRateLimited("rate limit exceeded")

        body = r.text or "Unknown error"
        log.warning("Unexpected status %s: %s", r.status_code, body[:500])
        raise UpstreamAPIError(r.status_code, body)


def _course_id(r: requests.Response) -> Optional[int]:
    try:
        data = r.json()
    except ValueError:
        return None
    if isinstance(data, dict) and isinstance(data.get("courseId"), int):
        return data["courseId"]
    return None
