from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from app.models.job import JobStatus


class JobCreateRequest(BaseModel):
    """Schema for creating a new job posting"""
    category_id: int
    job_name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    contact_phone: Optional[str] = None
    address: Optional[str] = None
    work_date: datetime
    required_people: int = Field(..., ge=1)
    wage: float = Field(..., gt=0)


class JobStatusUpdateRequest(BaseModel):
    """Schema for an owner-initiated status transition"""
    status: JobStatus


class JobResponse(BaseModel):
    """Schema for job posting response"""
    id: int
    shop_id: int
    category_id: int
    job_name: str
    description: Optional[str] = None
    contact_phone: Optional[str] = None
    address: Optional[str] = None
    work_date: datetime
    required_people: int
    wage: float
    status: JobStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True  # Allows conversion from SQLAlchemy models


class JobListResponse(BaseModel):
    """Paginated job listing"""
    jobs: List[JobResponse]
    total: int
    limit: int
    offset: int
