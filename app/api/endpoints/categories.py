"""
Category endpoints (read-only).

Clients use these to find a valid ``category_id`` before publishing a job.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.exceptions import NotFound
from app.crud import category as category_crud
from app.schemas.category import CategoryDetailResponse, CategoryResponse

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=list[CategoryResponse])
def list_categories(db: Session = Depends(get_db)):
    """All categories, ordered by name."""
    return category_crud.get_multi(db)


@router.get("/{category_id}", response_model=CategoryDetailResponse)
def get_category(category_id: int, db: Session = Depends(get_db)):
    category = category_crud.get_by_id(db, category_id)
    if not category:
        raise NotFound("Category not found")

    return CategoryDetailResponse(
        id=category.id,
        name=category.name,
        job_post_count=category_crud.count_job_posts(db, category.id),
    )
