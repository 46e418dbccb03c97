"""FastAPI REST backend for the course-pacer engine."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from course_pacer.core.engine import build_course
from course_pacer.core.models import PacingPlan, RoutePoint
from course_pacer.errors import (
    InvalidRoute,
    PayloadTooLarge,
    UpstreamAuthError,
    UpstreamError,
    UpstreamPermissionError,
    UpstreamRateLimited,
)
from course_pacer.providers.garmin import GarminCourseClient

log = logging.getLogger(__name__)

VERSION = "0.1.0"

app = FastAPI(title="Course Pacer", version=VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Request / Response models
# ---------------------------------------------------------------------------

class BuildCourseRequest(BaseModel):
    route: List[RoutePoint] = Field(..., min_length=1)
    pacing_plan: Optional[PacingPlan] = None
    course_name: str = ""
    activity_type: Optional[str] = None


class BuildCourseResponse(BaseModel):
    course: Dict[str, Any]
    point_count: int
    checkpoint_count: int
    power_label_count: int


class UploadCourseResponse(BaseModel):
    course_id: Optional[int] = None
    point_count: int


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _extract_token(request: Request) -> Optional[str]:
    """Pull the vendor Bearer token from the Authorization header."""
    auth = request.headers.get("authorization", "")
    if auth.lower().startswith("bearer "):
        return auth[7:].strip() or None
    return None


def _build(req: BuildCourseRequest):
    try:
        return build_course(
            req.route,
            pacing_plan=req.pacing_plan,
            course_name=req.course_name,
            activity_type=req.activity_type,
        )
    except InvalidRoute as e:
        raise HTTPException(status_code=422, detail=f"{e.user_message} ({e})")
    except PayloadTooLarge as e:
        raise HTTPException(status_code=413, detail=e.user_message)


_UPSTREAM_STATUS = {
    UpstreamAuthError: 401,
    UpstreamPermissionError: 403,
    UpstreamRateLimited: 429,
}


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@app.get("/health")
def health():
    return {"status": "ok", "version": VERSION}


@app.post("/courses/build", response_model=BuildCourseResponse)
def build_course_endpoint(req: BuildCourseRequest):
    payload = _build(req)
    return BuildCourseResponse(
        course=payload.to_vendor_json(),
        point_count=payload.point_count,
        checkpoint_count=payload.checkpoint_count,
        power_label_count=payload.power_label_count,
    )


@app.post("/courses/upload", response_model=UploadCourseResponse)
def upload_course_endpoint(req: BuildCourseRequest, request: Request):
    token = _extract_token(request)
    if not token:
        raise HTTPException(status_code=401, detail="Missing authorization header")

    payload = _build(req)
    try:
        result = GarminCourseClient(token).upload_course(payload)
    except UpstreamError as e:
        status = _UPSTREAM_STATUS.get(type(e), 502)
        log.warning("Upload failed (%s): %s", type(e).__name__, e)
        raise HTTPException(status_code=status, detail=e.user_message)

    return UploadCourseResponse(course_id=result.course_id, point_count=result.point_count)
