"""
CRUD operations for JobPost model.

Implements the Repository pattern to encapsulate all database operations
for job postings, providing a clean interface for the workflow layer.
"""

from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from app.models.job import JobPost, JobStatus
from app.schemas.job import JobCreateRequest


def create(db: Session, shop_id: int, job_data: JobCreateRequest) -> JobPost:
    """
    Create a new job posting in the database.

    Args:
        db: Database session
        shop_id: Owning shop
        job_data: Validated job creation data

    Returns:
        Created JobPost instance with id, status OPEN
    """
    db_job = JobPost(
        shop_id=shop_id,
        category_id=job_data.category_id,
        job_name=job_data.job_name,
        description=job_data.description,
        contact_phone=job_data.contact_phone,
        address=job_data.address,
        work_date=job_data.work_date,
        required_people=job_data.required_people,
        wage=job_data.wage,
        status=JobStatus.OPEN
    )

    db.add(db_job)
    db.commit()
    db.refresh(db_job)

    return db_job


def get_by_id(db: Session, job_id: int) -> Optional[JobPost]:
    """
    Retrieve a job posting by its ID.

    Args:
        db: Database session
        job_id: Job ID to retrieve

    Returns:
        JobPost instance if found, None otherwise
    """
    return db.query(JobPost).filter(JobPost.id == job_id).first()


def get_owned(db: Session, job_id: int, shop_id: int) -> Optional[JobPost]:
    """Retrieve a posting only if it belongs to the given shop."""
    return db.query(JobPost).filter(JobPost.id == job_id, JobPost.shop_id == shop_id).first()


def get_multi(
    db: Session,
    skip: int = 0,
    limit: int = 50,
    status: Optional[JobStatus] = JobStatus.OPEN,
    category_id: Optional[int] = None
) -> Tuple[List[JobPost], int]:
    """
    Retrieve job postings with pagination and filtering.

    Args:
        db: Database session
        skip: Number of records to skip (offset)
        limit: Maximum number of records to return
        status: Status filter (None lists every status)
        category_id: Optional category filter

    Returns:
        Tuple of (page of JobPost instances newest first, total matching count)
    """
    query = db.query(JobPost)

    if status is not None:
        query = query.filter(JobPost.status == status)
    if category_id is not None:
        query = query.filter(JobPost.category_id == category_id)

    total = query.count()
    jobs = query.order_by(JobPost.created_at.desc(), JobPost.id.desc()).offset(skip).limit(limit).all()
    return jobs, total


def get_by_shop(db: Session, shop_id: int, status: Optional[JobStatus] = None) -> List[JobPost]:
    query = db.query(JobPost).filter(JobPost.shop_id == shop_id)
    if status is not None:
        query = query.filter(JobPost.status == status)
    return query.order_by(JobPost.created_at.desc(), JobPost.id.desc()).all()


def update_status(db: Session, job: JobPost, status: JobStatus) -> JobPost:
    job.status = status
    db.commit()
    db.refresh(job)
    return job

