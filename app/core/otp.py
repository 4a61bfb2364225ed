"""
Password recovery with one-time codes.

Handles generation, validation, and single-use consumption of 6-digit
recovery codes.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import InternalError, InvalidOrExpiredOTP
from app.core.security import PasswordHasher
from app.crud import password_reset as reset_crud
from app.crud import user as user_crud
from app.models.password_reset import PasswordReset
from app.models.user import User

logger = logging.getLogger(__name__)

# Security constants
CODE_EXPIRATION_MINUTES = 10
CODE_MIN = 100000
CODE_MAX = 999999


def generate_otp_code() -> str:
    """
    Generate a 6-digit recovery code.

    Uses the secrets module for cryptographic randomness to prevent
    prediction attacks.

    Returns:
        str: code uniformly drawn from 100000-999999 (e.g., "482910")
    """
    return str(CODE_MIN + secrets.randbelow(CODE_MAX - CODE_MIN + 1))


def otp_expiry(now: Optional[datetime] = None, minutes: int = CODE_EXPIRATION_MINUTES) -> datetime:
    """Expiry timestamp for a code generated at ``now``."""
    return (now or datetime.now(timezone.utc)) + timedelta(minutes=minutes)


def request_password_reset(
    db: Session,
    email: str,
    expire_minutes: int = CODE_EXPIRATION_MINUTES,
    now: Optional[datetime] = None
) -> Optional[PasswordReset]:
    """
    Create a recovery code for the account registered under ``email``.

    - Unknown emails produce no record and no error, so callers can return
      the same response either way
    - Earlier unused codes stay valid until they expire

    Args:
        db: Database session
        email: Email address supplied by the caller
        expire_minutes: Validity window of the new code
        now: Reference time (defaults to current UTC time)

    Returns:
        PasswordReset: The new record, or None if no such account exists
    """
    user = user_crud.get_by_email(db, email)
    if not user:
        logger.info("Password reset requested for unknown email")
        return None

    record = reset_crud.create(
        db,
        user_id=user.id,
        otp_code=generate_otp_code(),
        expires_at=otp_expiry(now, expire_minutes),
    )
    logger.info(f"Password reset code issued for user {user.id} (reset_id: {record.id})")
    return record


def consume_password_reset(
    db: Session,
    email: str,
    code: str,
    new_password: str,
    hasher: PasswordHasher,
    now: Optional[datetime] = None
) -> User:
    """
    Redeem a recovery code and set a new password.

    Security checks:
    - Code must belong to the account, be unused and not expired
    - Unknown email, wrong code, reused code and expired code all raise the
      same InvalidOrExpiredOTP
    - The password update and the mark-used write commit together; a
      concurrent redemption of the same code loses and changes nothing

    Raises:
        InvalidOrExpiredOTP: No matching active code
        InternalError: The store rejected the transaction (fully rolled back)
    """
    now = now or datetime.now(timezone.utc)

    user = user_crud.get_by_email(db, email)
    if not user:
        raise InvalidOrExpiredOTP()

    record = reset_crud.find_active(db, user.id, code, now)
    if not record:
        logger.info(f"Rejected password reset code for user {user.id}")
        raise InvalidOrExpiredOTP()

    new_hash = hasher.hash(new_password)

    try:
        if not reset_crud.mark_used(db, record.id):
            db.rollback()
            logger.warning(f"Password reset code {record.id} consumed concurrently")
            raise InvalidOrExpiredOTP()

        user.hashed_password = new_hash
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error resetting password for user {user.id}: {e}")
        raise InternalError("Failed to reset password. Please try again.") from e

    db.refresh(user)
    logger.info(f"Password successfully reset for user {user.id}")
    return user
