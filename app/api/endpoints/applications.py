"""
Application endpoints.

- POST /applications: Job seeker applies to an open posting
- GET /applications/my: Job seeker's own applications
- GET /applications/job/{job_id}: Shop owner lists applications on an owned posting
- PATCH /applications/{id}/status: Shop owner accepts or rejects
- DELETE /applications/{id}: Job seeker withdraws
"""

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import require_role
from app.core.security import TokenIdentity
from app.models.user import Role
from app.schemas.application import ApplicationCreateRequest, ApplicationResponse, ApplicationStatusUpdateRequest
from app.schemas.user import MessageResponse
from app.services import application_workflow

router = APIRouter(prefix="/applications", tags=["Applications"])
logger = logging.getLogger(__name__)


@router.post("", status_code=201, response_model=ApplicationResponse)
def create_application(
    request: ApplicationCreateRequest,
    identity: TokenIdentity = Depends(require_role(Role.JOB_SEEKER)),
    db: Session = Depends(get_db)
):
    """Apply to an open job posting (once per posting)."""
    return application_workflow.apply_to_job(db, identity, request.post_id)


@router.get("/my", response_model=list[ApplicationResponse])
def list_my_applications(
    identity: TokenIdentity = Depends(require_role(Role.JOB_SEEKER)),
    db: Session = Depends(get_db)
):
    return application_workflow.list_my_applications(db, identity)


@router.get("/job/{job_id}", response_model=list[ApplicationResponse])
def list_job_applications(
    job_id: int,
    identity: TokenIdentity = Depends(require_role(Role.SHOP_OWNER)),
    db: Session = Depends(get_db)
):
    """Applications received on one of the caller's postings, newest first."""
    return application_workflow.list_job_applications(db, identity, job_id)


@router.patch("/{application_id}/status", response_model=ApplicationResponse)
def update_application_status(
    application_id: int,
    request: ApplicationStatusUpdateRequest,
    identity: TokenIdentity = Depends(require_role(Role.SHOP_OWNER)),
    db: Session = Depends(get_db)
):
    """Accept or reject a pending application."""
    return application_workflow.decide_application(db, identity, application_id, request.status)


@router.delete("/{application_id}", response_model=MessageResponse)
def withdraw_application(
    application_id: int,
    identity: TokenIdentity = Depends(require_role(Role.JOB_SEEKER)),
    db: Session = Depends(get_db)
):
    application_workflow.withdraw_application(db, identity, application_id)
    return MessageResponse(message="Application withdrawn successfully")
