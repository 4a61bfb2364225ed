"""
Pydantic schemas for shop and job seeker profiles.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import List, Optional
from datetime import datetime

from app.schemas.job import JobResponse


class ShopCreateRequest(BaseModel):
    shop_name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    address: Optional[str] = None


class ShopUpdateRequest(BaseModel):
    """Partial update; only fields present in the body are changed."""
    shop_name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    address: Optional[str] = None

    @field_validator('shop_name')
    @classmethod
    def shop_name_not_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError('shop_name cannot be null')
        return v


class ShopResponse(BaseModel):
    id: int
    user_id: int
    shop_name: str
    description: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class JobSeekerProfileCreateRequest(BaseModel):
    full_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    skills: Optional[str] = None
    experience: Optional[str] = None


class JobSeekerProfileUpdateRequest(JobSeekerProfileCreateRequest):
    """Partial update; only fields present in the body are changed."""


class JobSeekerProfileResponse(BaseModel):
    id: int
    user_id: int
    full_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    skills: Optional[str] = None
    experience: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ShopSummary(BaseModel):
    """Public shop listing entry."""
    id: int
    shop_name: str
    description: Optional[str] = None
    address: Optional[str] = None
    job_post_count: int = 0


class ShopDetailResponse(ShopResponse):
    """Public shop page with its open postings."""
    open_job_posts: List[JobResponse] = []
