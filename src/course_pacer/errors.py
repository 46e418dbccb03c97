"""Error taxonomy for course building and upload.

Core errors (``InvalidRoute``, ``PayloadTooLarge``) are raised synchronously
by the engine.  ``Upstream*`` errors are raised by the transport client and
passed through untouched; nothing here retries.
"""
from __future__ import annotations

from typing import Optional


class CoursePacerError(Exception):
    """Base class.  ``user_message`` is safe to show to the rider."""

    user_message = "Something went wrong while preparing the course."

    def __init__(self, detail: Optional[str] = None) -> None:
        self.detail = detail
        super().__init__(detail or self.user_message)


class InvalidRoute(CoursePacerError):
    user_message = "The route is invalid and cannot be exported as a course."


class PayloadTooLarge(CoursePacerError):
    user_message = "The course has too many points for the device."

    def __init__(self, point_count: int, limit: int) -> None:
        self.point_count = point_count
        self.limit = limit
        super().__init__(f"{point_count} points exceeds the limit of {limit}")


# ── Transport pass-through ───────────────────────────────────────────────

class UpstreamError(CoursePacerError):
    user_message = "The course upload failed."


class UpstreamAuthError(UpstreamError):
    user_message = "Not authenticated with Garmin. Please reconnect your account."


class UpstreamPermissionError(UpstreamError):
    user_message = (
        "Your app does not have permission to upload courses. "
        "Please verify your Courses API access in the Garmin Developer Portal."
    )


class UpstreamRateLimited(UpstreamError):
    user_message = "Rate limit exceeded. Please try again later."


class UpstreamAPIError(UpstreamError):
    def __init__(self, status_code: int, message: str = "") -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"Garmin API error ({status_code}): {message}")

    @property
    def user_message(self) -> str:  # type: ignore[override]
        return f"Garmin API error ({self.status_code}): {self.message or 'Unknown error'}"


class UpstreamNetworkError(UpstreamError):
    user_message = "Network error while contacting Garmin."
