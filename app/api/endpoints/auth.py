"""
Authentication endpoints for registration, login and password recovery.

Implements JWT-based stateless authentication:
- POST /register: Create new user account
- POST /login: Authenticate and receive a JWT
- POST /forgot-password: Issue a one-time recovery code
- POST /reset-password: Redeem a recovery code
- GET /me: Get current user profile
- POST /change-password: Change password while logged in
- POST /logout: Revoke the current token (when revocation is enabled)
- DELETE /me: Deactivate current user account
"""

import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.database import get_db
from app.core.deps import get_current_identity, get_password_hasher, get_settings, get_token_service
from app.core.exceptions import EmailAlreadyRegistered, Forbidden, NotFound, Unauthenticated, ValidationError
from app.core.otp import consume_password_reset, request_password_reset
from app.core.security import PasswordHasher, TokenIdentity, TokenService
from app.crud import user as user_crud
from app.schemas.user import (
    UserRegisterRequest,
    UserLoginRequest,
    TokenResponse,
    UserResponse,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    ChangePasswordRequest,
    MessageResponse,
    LogoutResponse,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = logging.getLogger(__name__)

FORGOT_PASSWORD_MESSAGE = "If an account with that email exists, a password reset code has been sent."


@router.post("/register", status_code=201, response_model=TokenResponse)
def register(
    request: UserRegisterRequest,
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    token_service: TokenService = Depends(get_token_service)
):
    """
    Register a new user account.

    The role chosen here is fixed for the lifetime of the account.
    Returns a JWT for immediate login.
    """
    # Check if email already exists
    if user_crud.get_by_email(db, request.email):
        raise EmailAlreadyRegistered()

    try:
        new_user = user_crud.create(
            db,
            email=request.email,
            hashed_password=hasher.hash(request.password),
            role=request.role,
        )
    except IntegrityError:
        # A concurrent registration took the email after the check above
        db.rollback()
        raise EmailAlreadyRegistered()

    logger.info(f"New user registered: {new_user.id} (role: {new_user.role.value})")

    access_token = token_service.issue(new_user.id, new_user.email, new_user.role)

    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        user=UserResponse.model_validate(new_user)
    )


@router.post("/login", response_model=TokenResponse)
def login(
    request: UserLoginRequest,
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    token_service: TokenService = Depends(get_token_service)
):
    """
    Authenticate user and return a JWT.

    Validates email/password and updates last_login_at timestamp.
    """
    user = user_crud.get_by_email(db, request.email)
    if not user:
        hasher.dummy_verify(request.password)
        raise Unauthenticated("Invalid email or password")
    if not hasher.verify(request.password, user.hashed_password):
        raise Unauthenticated("Invalid email or password")

    if not user.is_active:
        raise Forbidden("Account is deactivated")

    user_crud.touch_last_login(db, user)

    logger.info(f"User logged in: {user.id}")

    access_token = token_service.issue(user.id, user.email, user.role)

    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        user=UserResponse.model_validate(user)
    )


@router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(
    request: ForgotPasswordRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """
    Issue a 6-digit password recovery code.

    The code expires after OTP_EXPIRE_MINUTES. Delivery to the user's inbox
    happens outside this service.

    Always returns the same message to prevent email enumeration.
    """
    request_password_reset(db, request.email, expire_minutes=settings.OTP_EXPIRE_MINUTES)
    return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(
    request: ResetPasswordRequest,
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher)
):
    """
    Reset password using a recovery code.

    The code must be unused and unexpired. It is consumed in the same
    transaction as the password update.
    """
    consume_password_reset(db, request.email, request.otp_code, request.new_password, hasher)
    return MessageResponse(
        message="Password has been reset successfully. You can now login with your new password."
    )


@router.get("/me", response_model=UserResponse)
def get_current_user_profile(
    identity: TokenIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """
    Get current authenticated user's profile.

    Requires valid JWT token in Authorization header.
    """
    user = user_crud.get_by_id(db, identity.identity_id)
    if not user:
        raise NotFound("User not found")
    return user


@router.post("/change-password", response_model=MessageResponse)
def change_password(
    request: ChangePasswordRequest,
    identity: TokenIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher)
):
    """Change the password of the logged-in user after re-checking the current one."""
    user = user_crud.get_by_id(db, identity.identity_id)
    if not user:
        raise NotFound("User not found")
    if not hasher.verify(request.current_password, user.hashed_password):
        raise ValidationError(
            [{"field": "current_password", "message": "Current password is incorrect", "type": "value_error"}],
            message="Current password is incorrect"
        )

    user_crud.update_password(db, user, hasher.hash(request.new_password))
    logger.info(f"Password changed for user {user.id}")
    return MessageResponse(message="Password changed successfully")


@router.post("/logout", response_model=LogoutResponse)
def logout(
    identity: TokenIdentity = Depends(get_current_identity),
    token_service: TokenService = Depends(get_token_service)
):
    """
    Log out the current session.

    With TOKEN_REVOCATION_ENABLED the token is rejected from now on;
    otherwise the client must discard it and it stays valid until expiry.
    """
    revoked = token_service.revoke(identity)
    if revoked:
        logger.info(f"Token revoked for user {identity.identity_id}")
        return LogoutResponse(message="Logged out. Token revoked.", revoked=True)
    return LogoutResponse(message="Logged out. Discard the token on the client.", revoked=False)


@router.delete("/me", response_model=UserResponse)
def deactivate_current_user(
    identity: TokenIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    token_service: TokenService = Depends(get_token_service)
):
    """
    Deactivate the current user's account.

    The account is kept but can no longer log in. The calling token is
    revoked when revocation is enabled.
    """
    user = user_crud.get_by_id(db, identity.identity_id)
    if not user:
        raise NotFound("User not found")

    user = user_crud.deactivate(db, user)
    token_service.revoke(identity)
    logger.info(f"User account deactivated: {user.id}")
    return user
