"""
CRUD operations for Category model.

Categories are read-only over the API; ``seed_defaults`` is the only writer.
"""

from typing import Iterable, List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from app.models.job import Category, JobPost


def get_by_id(db: Session, category_id: int) -> Optional[Category]:
    return db.query(Category).filter(Category.id == category_id).first()


def get_multi(db: Session) -> List[Category]:
    """All categories ordered by name."""
    return db.query(Category).order_by(Category.name.asc()).all()


def count_job_posts(db: Session, category_id: int) -> int:
    return db.query(func.count(JobPost.id)).filter(JobPost.category_id == category_id).scalar()


def seed_defaults(db: Session, names: Iterable[str]) -> List[Category]:
    """
    Insert any of ``names`` that do not exist yet.

    Existing categories are left untouched, so this is safe to run on every
    startup.

    Returns:
        The newly created categories
    """
    existing = {name for (name,) in db.query(Category.name).all()}
    created = []
    for name in names:
        if name in existing:
            continue
        category = Category(name=name)
        db.add(category)
        created.append(category)
        existing.add(name)

    if created:
        db.commit()
    return created
