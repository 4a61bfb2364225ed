"""
Shop and job seeker profile endpoints.

Each identity owns at most one profile matching its role. Workflow
operations use these profiles to decide ownership.
"""

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_caller_seeker_profile, get_caller_shop, require_role
from app.core.exceptions import NotFound, ProfileAlreadyExists
from app.core.security import TokenIdentity
from app.crud import job as job_crud
from app.crud import profile as profile_crud
from app.models.job import JobStatus
from app.models.user import Role
from app.schemas.job import JobResponse
from app.schemas.profile import (
    ShopCreateRequest,
    ShopDetailResponse,
    ShopResponse,
    ShopSummary,
    ShopUpdateRequest,
    JobSeekerProfileCreateRequest,
    JobSeekerProfileResponse,
    JobSeekerProfileUpdateRequest,
)

router = APIRouter(tags=["Profiles"])
logger = logging.getLogger(__name__)


@router.post("/shops", status_code=201, response_model=ShopResponse)
def create_shop(
    request: ShopCreateRequest,
    identity: TokenIdentity = Depends(require_role(Role.SHOP_OWNER)),
    db: Session = Depends(get_db)
):
    if profile_crud.get_shop_by_user(db, identity.identity_id):
        raise ProfileAlreadyExists("Shop profile already exists")

    shop = profile_crud.create_shop(db, identity.identity_id, **request.model_dump())
    logger.info(f"Created shop {shop.id} for user {identity.identity_id}")
    return shop


@router.get("/shops/my/profile", response_model=ShopResponse)
def get_my_shop(
    identity: TokenIdentity = Depends(require_role(Role.SHOP_OWNER)),
    db: Session = Depends(get_db)
):
    return get_caller_shop(db, identity)


@router.patch("/shops/my/profile", response_model=ShopResponse)
def update_my_shop(
    request: ShopUpdateRequest,
    identity: TokenIdentity = Depends(require_role(Role.SHOP_OWNER)),
    db: Session = Depends(get_db)
):
    """Update the caller's shop. Fields left out of the body keep their value."""
    shop = get_caller_shop(db, identity)
    shop = profile_crud.update_fields(db, shop, **request.model_dump(exclude_unset=True))
    logger.info(f"Updated shop {shop.id}", extra={"identity_id": identity.identity_id})
    return shop


@router.get("/shops", response_model=list[ShopSummary])
def list_shops(db: Session = Depends(get_db)):
    """Public list of shops, newest first."""
    return [
        ShopSummary(
            id=shop.id,
            shop_name=shop.shop_name,
            description=shop.description,
            address=shop.address,
            job_post_count=count,
        )
        for shop, count in profile_crud.get_shops_with_post_counts(db)
    ]


@router.get("/shops/{shop_id}", response_model=ShopDetailResponse)
def get_shop(shop_id: int, db: Session = Depends(get_db)):
    """Public shop page with the postings it currently has open."""
    shop = profile_crud.get_shop(db, shop_id)
    if not shop:
        raise NotFound("Shop not found")

    detail = ShopDetailResponse.model_validate(shop)
    detail.open_job_posts = [
        JobResponse.model_validate(post)
        for post in job_crud.get_by_shop(db, shop.id, status=JobStatus.OPEN)
    ]
    return detail


@router.post("/job-seekers", status_code=201, response_model=JobSeekerProfileResponse)
def create_job_seeker_profile(
    request: JobSeekerProfileCreateRequest,
    identity: TokenIdentity = Depends(require_role(Role.JOB_SEEKER)),
    db: Session = Depends(get_db)
):
    if profile_crud.get_seeker_by_user(db, identity.identity_id):
        raise ProfileAlreadyExists()

    profile = profile_crud.create_seeker(db, identity.identity_id, **request.model_dump())
    logger.info(f"Created job seeker profile {profile.id} for user {identity.identity_id}")
    return profile


@router.get("/job-seekers/my/profile", response_model=JobSeekerProfileResponse)
def get_my_job_seeker_profile(
    identity: TokenIdentity = Depends(require_role(Role.JOB_SEEKER)),
    db: Session = Depends(get_db)
):
    return get_caller_seeker_profile(db, identity)


@router.patch("/job-seekers/my/profile", response_model=JobSeekerProfileResponse)
def update_my_job_seeker_profile(
    request: JobSeekerProfileUpdateRequest,
    identity: TokenIdentity = Depends(require_role(Role.JOB_SEEKER)),
    db: Session = Depends(get_db)
):
    """Update the caller's profile. Fields left out of the body keep their value."""
    profile = get_caller_seeker_profile(db, identity)
    profile = profile_crud.update_fields(db, profile, **request.model_dump(exclude_unset=True))
    logger.info(f"Updated job seeker profile {profile.id}", extra={"identity_id": identity.identity_id})
    return profile
