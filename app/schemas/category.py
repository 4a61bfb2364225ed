"""
Pydantic schemas for job categories.
"""

from pydantic import BaseModel


class CategoryResponse(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class CategoryDetailResponse(CategoryResponse):
    """Category with the number of postings filed under it."""
    job_post_count: int = 0
