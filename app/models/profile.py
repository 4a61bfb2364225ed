"""
Role-specific profiles.

A shop owner acts through their Shop and a job seeker through their
JobSeekerProfile. Ownership checks compare a resource's foreign key against
the caller's profile id, never against the user id directly.
"""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from app.core.database import Base


class Shop(Base):
    __tablename__ = "shops"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)

    shop_name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    phone = Column(String, nullable=True)
    email = Column(String, nullable=True)
    address = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User", back_populates="shop")
    job_posts = relationship("JobPost", back_populates="shop", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Shop(id={self.id}, shop_name='{self.shop_name}', user_id={self.user_id})>"


class JobSeekerProfile(Base):
    __tablename__ = "job_seeker_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)

    full_name = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    address = Column(String, nullable=True)
    skills = Column(Text, nullable=True)
    experience = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User", back_populates="job_seeker_profile")
    applications = relationship("Application", back_populates="seeker", cascade="all, delete-orphan")
    matches = relationship("Match", back_populates="seeker", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<JobSeekerProfile(id={self.id}, user_id={self.user_id})>"
