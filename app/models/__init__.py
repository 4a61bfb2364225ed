"""
Database models package.
"""

from app.models.user import User, Role
from app.models.password_reset import PasswordReset
from app.models.profile import Shop, JobSeekerProfile
from app.models.job import Category, JobPost, JobStatus
from app.models.application import Application, ApplicationStatus, Match

__all__ = [
    "User", "Role", "PasswordReset", "Shop", "JobSeekerProfile",
    "Category", "JobPost", "JobStatus", "Application", "ApplicationStatus", "Match",
]
