"""
CRUD operations for Shop and JobSeekerProfile models.
"""

from typing import List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session
from app.models.job import JobPost
from app.models.profile import Shop, JobSeekerProfile


def get_shop(db: Session, shop_id: int) -> Optional[Shop]:
    return db.query(Shop).filter(Shop.id == shop_id).first()


def get_shop_by_user(db: Session, user_id: int) -> Optional[Shop]:
    return db.query(Shop).filter(Shop.user_id == user_id).first()


def get_seeker_by_user(db: Session, user_id: int) -> Optional[JobSeekerProfile]:
    return db.query(JobSeekerProfile).filter(JobSeekerProfile.user_id == user_id).first()


def get_shops_with_post_counts(db: Session) -> List[Tuple[Shop, int]]:
    """
    All shops, newest first, each paired with its number of postings.

    Shops without postings are included with a count of 0.
    """
    return db.query(Shop, func.count(JobPost.id)).outerjoin(
        JobPost, JobPost.shop_id == Shop.id
    ).group_by(Shop.id).order_by(Shop.created_at.desc(), Shop.id.desc()).all()


def create_shop(db: Session, user_id: int, **fields) -> Shop:
    shop = Shop(user_id=user_id, **fields)
    db.add(shop)
    db.commit()
    db.refresh(shop)
    return shop


def create_seeker(db: Session, user_id: int, **fields) -> JobSeekerProfile:
    profile = JobSeekerProfile(user_id=user_id, **fields)
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


def update_fields(db: Session, profile, **fields):
    """
    Apply a partial update to a Shop or JobSeekerProfile.

    Only the given fields are written; ownership is checked by the caller.
    """
    for name, value in fields.items():
        setattr(profile, name, value)
    db.commit()
    db.refresh(profile)
    return profile
