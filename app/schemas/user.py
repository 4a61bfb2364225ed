"""
Pydantic schemas for User authentication and registration.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime
import re

from app.models.user import Role
from app.schemas.profile import JobSeekerProfileResponse, ShopResponse

PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 72  # bcrypt limit


def reject_nul(v: str) -> str:
    """bcrypt cannot hash secrets containing NUL bytes"""
    if "\x00" in v:
        raise ValueError("Password must not contain NUL characters")
    return v


class UserRegisterRequest(BaseModel):
    """Request schema for user registration."""
    email: EmailStr
    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LENGTH,
        max_length=PASSWORD_MAX_LENGTH,
        description="Password must be 6-72 characters"
    )
    role: Role

    @field_validator('password')
    @classmethod
    def validate_password(cls, v: str) -> str:
        return reject_nul(v)


class UserLoginRequest(BaseModel):
    """Request schema for user login."""
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    """User profile response (no sensitive data)."""
    id: int
    email: str
    role: Role
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    """JWT token response."""
    access_token: str
    token_type: str = "bearer"
    user: Optional[UserResponse] = None


class ForgotPasswordRequest(BaseModel):
    """Request schema for starting password recovery."""
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    """Request schema for completing password recovery with a one-time code."""
    email: EmailStr
    otp_code: str = Field(..., min_length=6, max_length=6, description="6-digit recovery code")
    new_password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)

    @field_validator('otp_code')
    @classmethod
    def validate_code_format(cls, v: str) -> str:
        """Ensure code is exactly 6 digits"""
        if not re.match(r'^\d{6}$', v):
            raise ValueError('Code must be exactly 6 digits')
        return v

    @field_validator('new_password')
    @classmethod
    def validate_new_password(cls, v: str) -> str:
        return reject_nul(v)


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)

    @field_validator('new_password')
    @classmethod
    def validate_new_password(cls, v: str) -> str:
        return reject_nul(v)


class MessageResponse(BaseModel):
    message: str


class LogoutResponse(BaseModel):
    message: str
    revoked: bool


class PublicUserResponse(BaseModel):
    """Basic account info visible to anyone."""
    id: int
    email: str
    role: Role
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserFullResponse(UserResponse):
    """Caller's account together with the profile matching its role."""
    last_login_at: Optional[datetime] = None
    shop: Optional[ShopResponse] = None
    job_seeker_profile: Optional[JobSeekerProfileResponse] = None
