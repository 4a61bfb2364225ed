"""
Job posting lifecycle.

Allowed transitions (all explicit, all by the owning shop):

    open   -> closed
    open   -> completed
    closed -> completed

``completed`` is terminal. Nothing transitions automatically.
"""

import logging
from typing import Dict, FrozenSet, List, Optional, Tuple
from sqlalchemy.orm import Session

from app.core.deps import get_caller_shop
from app.core.exceptions import InvalidStatusTransition, JobClosed, NotFound, NotFoundOrUnauthorized
from app.core.security import TokenIdentity
from app.crud import category as category_crud
from app.crud import job as job_crud
from app.models.job import JobPost, JobStatus
from app.schemas.job import JobCreateRequest

logger = logging.getLogger(__name__)

JOB_TRANSITIONS: Dict[JobStatus, FrozenSet[JobStatus]] = {
    JobStatus.OPEN: frozenset({JobStatus.CLOSED, JobStatus.COMPLETED}),
    JobStatus.CLOSED: frozenset({JobStatus.COMPLETED}),
    JobStatus.COMPLETED: frozenset(),
}


def can_transition(current: JobStatus, target: JobStatus) -> bool:
    return target in JOB_TRANSITIONS[current]


def ensure_accepting_applications(post: JobPost) -> None:
    """Raise JobClosed unless the posting is open."""
    if post.status != JobStatus.OPEN:
        raise JobClosed()


def create_job_post(db: Session, identity: TokenIdentity, data: JobCreateRequest) -> JobPost:
    """
    Publish a new posting for the caller's shop.

    Raises:
        ProfileRequired: Caller has no shop
        NotFound: Category does not exist
    """
    shop = get_caller_shop(db, identity)

    if not category_crud.get_by_id(db, data.category_id):
        raise NotFound("Category not found")

    post = job_crud.create(db, shop.id, data)
    logger.info(f"Created job post {post.id} for shop {shop.id}")
    return post


def get_job_post(db: Session, post_id: int) -> JobPost:
    post = job_crud.get_by_id(db, post_id)
    if not post:
        raise NotFound("Job not found")
    return post


def get_owned_job_post(db: Session, identity: TokenIdentity, post_id: int) -> JobPost:
    """
    Fetch a posting owned by the caller's shop.

    A posting owned by another shop is reported exactly like a missing one.
    """
    shop = get_caller_shop(db, identity)
    post = job_crud.get_owned(db, post_id, shop.id)
    if not post:
        raise NotFoundOrUnauthorized("Job not found or unauthorized")
    return post


def transition_job_post(db: Session, identity: TokenIdentity, post_id: int, new_status: JobStatus) -> JobPost:
    """
    Apply an owner-initiated status change.

    Raises:
        ProfileRequired: Caller has no shop
        NotFoundOrUnauthorized: Posting missing or owned by another shop
        InvalidStatusTransition: Transition not in JOB_TRANSITIONS
    """
    post = get_owned_job_post(db, identity, post_id)

    if not can_transition(post.status, new_status):
        raise InvalidStatusTransition(
            f"Cannot change job status from {post.status.value} to {new_status.value}"
        )

    previous = post.status
    post = job_crud.update_status(db, post, new_status)
    logger.info(
        f"Job post {post.id} status {previous.value} -> {new_status.value}",
        extra={"identity_id": identity.identity_id}
    )
    return post


def list_job_posts(
    db: Session,
    status: Optional[JobStatus] = None,
    category_id: Optional[int] = None,
    include_all_statuses: bool = False,
    limit: int = 50,
    offset: int = 0
) -> Tuple[List[JobPost], int]:
    """
    Public listing. Shows only open postings unless a status is requested
    explicitly or ``include_all_statuses`` is set.
    """
    if status is None and not include_all_statuses:
        status = JobStatus.OPEN
    return job_crud.get_multi(db, skip=offset, limit=limit, status=status, category_id=category_id)


def list_shop_job_posts(db: Session, identity: TokenIdentity) -> List[JobPost]:
    shop = get_caller_shop(db, identity)
    return job_crud.get_by_shop(db, shop.id)
