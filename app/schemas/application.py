"""
Pydantic schemas for applications and matches.
"""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from app.models.application import ApplicationStatus
from app.schemas.job import JobResponse


class ApplicationCreateRequest(BaseModel):
    post_id: int


class ApplicationStatusUpdateRequest(BaseModel):
    """Shop decision on a pending application (accepted or rejected)."""
    status: ApplicationStatus


class ApplicationResponse(BaseModel):
    id: int
    seeker_id: int
    post_id: int
    status: ApplicationStatus
    application_date: datetime
    post: Optional[JobResponse] = None

    class Config:
        from_attributes = True


class MatchResponse(BaseModel):
    """Precomputed match score for a posting."""
    id: int
    seeker_id: int
    post_id: int
    overall_score: float
    post: Optional[JobResponse] = None

    class Config:
        from_attributes = True
