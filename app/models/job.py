import enum
from sqlalchemy import Column, Integer, String, Text, Float, DateTime, Enum, ForeignKey, func
from sqlalchemy.orm import relationship
from app.core.database import Base


class JobStatus(str, enum.Enum):
    """
    Job posting lifecycle status.

    - OPEN: accepting applications
    - CLOSED: no longer accepting applications
    - COMPLETED: work finished (terminal)

    Transitions are always explicit owner actions, see app.services.job_workflow.
    """
    OPEN = "open"
    CLOSED = "closed"
    COMPLETED = "completed"


class Category(Base):
    """Job category. Read-only from this service's point of view."""
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)

    def __repr__(self):
        return f"<Category(id={self.id}, name='{self.name}')>"


class JobPost(Base):
    """
    Job posting published by a shop.
    """
    __tablename__ = "job_posts"

    id = Column(Integer, primary_key=True, index=True)
    shop_id = Column(Integer, ForeignKey("shops.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)

    job_name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    contact_phone = Column(String, nullable=True)
    address = Column(String, nullable=True)
    work_date = Column(DateTime(timezone=True), nullable=False)
    required_people = Column(Integer, nullable=False, default=1)
    wage = Column(Float, nullable=False)

    status = Column(
        Enum(JobStatus, values_callable=lambda e: [m.value for m in e]),
        default=JobStatus.OPEN,
        nullable=False,
        index=True,
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    shop = relationship("Shop", back_populates="job_posts")
    category = relationship("Category")
    applications = relationship("Application", back_populates="post", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<JobPost(id={self.id}, job_name='{self.job_name}', status={self.status.value})>"
