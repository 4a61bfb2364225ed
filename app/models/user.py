"""
User model for authentication and role-based access.

Each User is an identity with exactly one role, fixed at registration.
The role decides which workflow operations the identity may invoke.
"""

import enum
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum, func
from sqlalchemy.orm import relationship
from app.core.database import Base


class Role(str, enum.Enum):
    """
    Capability class of an identity.

    - JOB_SEEKER: applies to job postings, reads own matches
    - SHOP_OWNER: owns a shop, publishes postings, decides applications
    """
    JOB_SEEKER = "job_seeker"
    SHOP_OWNER = "shop_owner"


class User(Base):
    """
    User account (identity).

    Never deleted in normal flow; deactivation clears is_active.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    # Authentication credentials
    email = Column(String, unique=True, nullable=False, index=True)
    hashed_password = Column(String, nullable=False)

    role = Column(Enum(Role, values_callable=lambda e: [m.value for m in e]), nullable=False)

    # Account status
    is_active = Column(Boolean, default=True, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    last_login_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    shop = relationship("Shop", back_populates="user", uselist=False)
    job_seeker_profile = relationship("JobSeekerProfile", back_populates="user", uselist=False)
    password_resets = relationship("PasswordReset", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role={self.role.value})>"
