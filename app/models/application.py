import enum
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, Float, DateTime, Enum, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import relationship
from app.core.database import Base


class ApplicationStatus(str, enum.Enum):
    """
    Application status enum.

    - PENDING: submitted, awaiting the shop's decision
    - ACCEPTED: accepted by the owning shop
    - REJECTED: rejected by the owning shop
    - WITHDRAWN: kept for compatibility; withdrawal deletes the row
    """
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class Application(Base):
    """
    A job seeker's application to a job posting.

    At most one application exists per (seeker, posting) pair; the unique
    constraint is the final guard against concurrent duplicate submissions.
    """
    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("seeker_id", "post_id", name="uq_applications_seeker_post"),
    )

    id = Column(Integer, primary_key=True, index=True)
    seeker_id = Column(Integer, ForeignKey("job_seeker_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    post_id = Column(Integer, ForeignKey("job_posts.id", ondelete="CASCADE"), nullable=False, index=True)

    status = Column(
        Enum(ApplicationStatus, values_callable=lambda e: [m.value for m in e]),
        default=ApplicationStatus.PENDING,
        nullable=False,
        index=True,
    )
    application_date = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    seeker = relationship("JobSeekerProfile", back_populates="applications")
    post = relationship("JobPost", back_populates="applications")

    def __repr__(self):
        return f"<Application(id={self.id}, seeker_id={self.seeker_id}, post_id={self.post_id}, status={self.status.value})>"


class Match(Base):
    """
    Precomputed seeker-to-posting compatibility score.

    Produced by an external scoring process; this service only reads it.
    """
    __tablename__ = "matches"

    id = Column(Integer, primary_key=True, index=True)
    seeker_id = Column(Integer, ForeignKey("job_seeker_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    post_id = Column(Integer, ForeignKey("job_posts.id", ondelete="CASCADE"), nullable=False, index=True)
    overall_score = Column(Float, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    seeker = relationship("JobSeekerProfile", back_populates="matches")
    post = relationship("JobPost")

    def __repr__(self):
        return f"<Match(seeker_id={self.seeker_id}, post_id={self.post_id}, overall_score={self.overall_score})>"
