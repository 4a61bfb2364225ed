import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import require_role
from app.core.security import TokenIdentity
from app.models.job import JobStatus
from app.models.user import Role
from app.schemas.job import JobCreateRequest, JobResponse, JobListResponse, JobStatusUpdateRequest
from app.services import job_workflow

router = APIRouter(prefix="/jobs", tags=["Jobs"])
logger = logging.getLogger(__name__)


@router.get("", response_model=JobListResponse)
def list_jobs(
    status: Optional[JobStatus] = None,
    category_id: Optional[int] = None,
    include_all: bool = False,
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db)
):
    """
    List job postings with pagination and optional filtering.

    Only open postings are listed unless `status` is given or
    `include_all=true` is passed.
    """
    jobs, total = job_workflow.list_job_posts(
        db,
        status=status,
        category_id=category_id,
        include_all_statuses=include_all,
        limit=limit,
        offset=offset,
    )
    return JobListResponse(jobs=jobs, total=total, limit=limit, offset=offset)


@router.post("", status_code=201, response_model=JobResponse)
def create_job(
    request: JobCreateRequest,
    identity: TokenIdentity = Depends(require_role(Role.SHOP_OWNER)),
    db: Session = Depends(get_db)
):
    """
    Publish a new job posting for the caller's shop.

    New postings start in status `open`.
    """
    return job_workflow.create_job_post(db, identity, request)


@router.get("/my/posts", response_model=list[JobResponse])
def list_my_jobs(
    identity: TokenIdentity = Depends(require_role(Role.SHOP_OWNER)),
    db: Session = Depends(get_db)
):
    """All postings of the caller's shop, in every status."""
    return job_workflow.list_shop_job_posts(db, identity)


@router.get("/{job_id}", response_model=JobResponse)
def get_job(job_id: int, db: Session = Depends(get_db)):
    """Retrieve a job posting by ID."""
    return job_workflow.get_job_post(db, job_id)


@router.patch("/{job_id}/status", response_model=JobResponse)
def update_job_status(
    job_id: int,
    request: JobStatusUpdateRequest,
    identity: TokenIdentity = Depends(require_role(Role.SHOP_OWNER)),
    db: Session = Depends(get_db)
):
    """
    Change a posting's status.

    Allowed: open -> closed, open -> completed, closed -> completed.
    Only the owning shop may do this.
    """
    return job_workflow.transition_job_post(db, identity, job_id, request.status)
