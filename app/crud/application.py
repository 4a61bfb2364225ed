"""
CRUD operations for Application and Match models.
"""

from typing import List, Optional
from sqlalchemy.orm import Session
from app.models.application import Application, ApplicationStatus, Match
from app.models.job import JobPost


def get_by_id(db: Session, application_id: int) -> Optional[Application]:
    return db.query(Application).filter(Application.id == application_id).first()


def get_by_seeker_and_post(db: Session, seeker_id: int, post_id: int) -> Optional[Application]:
    """Look up the (seeker, posting) pair guarded by the unique constraint."""
    return db.query(Application).filter(
        Application.seeker_id == seeker_id,
        Application.post_id == post_id
    ).first()


def get_owned_by_seeker(db: Session, application_id: int, seeker_id: int) -> Optional[Application]:
    return db.query(Application).filter(
        Application.id == application_id,
        Application.seeker_id == seeker_id
    ).first()


def get_owned_by_shop(db: Session, application_id: int, shop_id: int) -> Optional[Application]:
    """Retrieve an application only if its posting belongs to the given shop."""
    return db.query(Application).join(JobPost, Application.post_id == JobPost.id).filter(
        Application.id == application_id,
        JobPost.shop_id == shop_id
    ).first()


def create(db: Session, seeker_id: int, post_id: int) -> Application:
    """
    Insert a pending application.

    Raises sqlalchemy.exc.IntegrityError if the (seeker, post) pair already
    exists; the caller is responsible for rolling back.
    """
    application = Application(
        seeker_id=seeker_id,
        post_id=post_id,
        status=ApplicationStatus.PENDING,
    )

    db.add(application)
    db.commit()
    db.refresh(application)

    return application


def update_status(db: Session, application: Application, status: ApplicationStatus) -> Application:
    application.status = status
    db.commit()
    db.refresh(application)
    return application


def delete(db: Session, application: Application) -> None:
    db.delete(application)
    db.commit()


def get_by_seeker(db: Session, seeker_id: int) -> List[Application]:
    return db.query(Application).filter(
        Application.seeker_id == seeker_id
    ).order_by(Application.application_date.desc(), Application.id.desc()).all()


def get_by_post(db: Session, post_id: int) -> List[Application]:
    return db.query(Application).filter(
        Application.post_id == post_id
    ).order_by(Application.application_date.desc(), Application.id.desc()).all()


def get_matches_by_seeker(db: Session, seeker_id: int) -> List[Match]:
    """Matches addressed to a seeker, best score first."""
    return db.query(Match).filter(
        Match.seeker_id == seeker_id
    ).order_by(Match.overall_score.desc()).all()
