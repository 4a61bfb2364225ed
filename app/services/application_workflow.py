"""
Application lifecycle.

    pending -> accepted   (owning shop)
    pending -> rejected   (owning shop)
    any     -> removed    (applying seeker, withdrawal deletes the row)

At most one application exists per (seeker, posting). The pre-insert lookup
only produces a friendly error; the unique constraint on the table decides
when two requests race.
"""

import logging
from typing import Dict, FrozenSet, List
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.deps import get_caller_seeker_profile, get_caller_shop
from app.core.exceptions import (
    DuplicateApplication,
    InternalError,
    InvalidStatusTransition,
    NotFound,
    NotFoundOrUnauthorized,
)
from app.core.security import TokenIdentity
from app.crud import application as application_crud
from app.crud import job as job_crud
from app.models.application import Application, ApplicationStatus, Match
from app.services.job_workflow import ensure_accepting_applications, get_owned_job_post

logger = logging.getLogger(__name__)

APPLICATION_TRANSITIONS: Dict[ApplicationStatus, FrozenSet[ApplicationStatus]] = {
    ApplicationStatus.PENDING: frozenset({ApplicationStatus.ACCEPTED, ApplicationStatus.REJECTED}),
    ApplicationStatus.ACCEPTED: frozenset(),
    ApplicationStatus.REJECTED: frozenset(),
    ApplicationStatus.WITHDRAWN: frozenset(),
}


def apply_to_job(db: Session, identity: TokenIdentity, post_id: int) -> Application:
    """
    Submit an application for the caller.

    Preconditions, checked in order (first failure wins, nothing is written):
    1. Caller has a seeker profile      -> ProfileRequired
    2. Posting exists                   -> NotFound
    3. Posting is open                  -> JobClosed
    4. No application for (seeker, post) -> DuplicateApplication
    """
    profile = get_caller_seeker_profile(db, identity)

    post = job_crud.get_by_id(db, post_id)
    if not post:
        raise NotFound("Job not found")

    ensure_accepting_applications(post)

    if application_crud.get_by_seeker_and_post(db, profile.id, post.id):
        raise DuplicateApplication()

    try:
        application = application_crud.create(db, profile.id, post.id)
    except IntegrityError:
        # Lost a race against an identical request
        db.rollback()
        logger.info(f"Duplicate application blocked by constraint (seeker {profile.id}, post {post.id})")
        raise DuplicateApplication()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error creating application for seeker {profile.id}: {e}")
        raise InternalError("Failed to submit application")

    logger.info(
        f"Application {application.id} submitted (seeker {profile.id}, post {post.id})",
        extra={"identity_id": identity.identity_id}
    )
    return application


def decide_application(
    db: Session,
    identity: TokenIdentity,
    application_id: int,
    new_status: ApplicationStatus
) -> Application:
    """
    Accept or reject an application on one of the caller's postings.

    Raises:
        ProfileRequired: Caller has no shop
        NotFoundOrUnauthorized: Application missing or on another shop's posting
        InvalidStatusTransition: Not pending, or target is not accepted/rejected
    """
    shop = get_caller_shop(db, identity)

    application = application_crud.get_owned_by_shop(db, application_id, shop.id)
    if not application:
        raise NotFoundOrUnauthorized("Application not found or unauthorized")

    if new_status not in APPLICATION_TRANSITIONS[application.status]:
        raise InvalidStatusTransition(
            f"Cannot change application status from {application.status.value} to {new_status.value}"
        )

    application = application_crud.update_status(db, application, new_status)
    logger.info(
        f"Application {application.id} {new_status.value} by shop {shop.id}",
        extra={"identity_id": identity.identity_id}
    )
    return application


def withdraw_application(db: Session, identity: TokenIdentity, application_id: int) -> None:
    """Delete the caller's own application, whatever its status."""
    profile = get_caller_seeker_profile(db, identity)

    application = application_crud.get_owned_by_seeker(db, application_id, profile.id)
    if not application:
        raise NotFoundOrUnauthorized("Application not found or unauthorized")

    application_crud.delete(db, application)
    logger.info(f"Application {application_id} withdrawn by seeker {profile.id}")


def list_my_applications(db: Session, identity: TokenIdentity) -> List[Application]:
    profile = get_caller_seeker_profile(db, identity)
    return application_crud.get_by_seeker(db, profile.id)


def list_job_applications(db: Session, identity: TokenIdentity, post_id: int) -> List[Application]:
    post = get_owned_job_post(db, identity, post_id)
    return application_crud.get_by_post(db, post.id)


def list_my_matches(db: Session, identity: TokenIdentity) -> List[Match]:
    """Matches addressed to the caller, highest score first."""
    profile = get_caller_seeker_profile(db, identity)
    return application_crud.get_matches_by_seeker(db, profile.id)
