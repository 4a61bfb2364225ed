"""
CRUD operations for PasswordReset model.

``find_active`` and ``mark_used`` do not commit; the caller owns the
transaction so the password update and the mark-used write land together.
"""

from datetime import datetime
from typing import List, Optional
from sqlalchemy import update
from sqlalchemy.orm import Session
from app.models.password_reset import PasswordReset


def create(db: Session, user_id: int, otp_code: str, expires_at: datetime) -> PasswordReset:
    """
    Store a new recovery code for a user.

    Earlier unused codes are left untouched.
    """
    record = PasswordReset(
        user_id=user_id,
        otp_code=otp_code,
        expires_at=expires_at,
        is_used=False,
    )

    db.add(record)
    db.commit()
    db.refresh(record)

    return record


def find_active(db: Session, user_id: int, otp_code: str, now: datetime) -> Optional[PasswordReset]:
    """
    Find an unused, unexpired record matching the user and code.

    Args:
        db: Database session
        user_id: Owner of the code
        otp_code: Code supplied by the caller
        now: Reference time; records expiring before it are ignored

    Returns:
        Matching PasswordReset, newest first, or None
    """
    return db.query(PasswordReset).filter(
        PasswordReset.user_id == user_id,
        PasswordReset.otp_code == otp_code,
        PasswordReset.is_used == False,  # noqa: E712
        PasswordReset.expires_at >= now,
    ).order_by(PasswordReset.id.desc()).first()


def mark_used(db: Session, reset_id: int) -> bool:
    """
    Conditionally flag a record as used.

    Returns False when the record was already used, which means a concurrent
    request consumed it first.
    """
    result = db.execute(
        update(PasswordReset)
        .where(PasswordReset.id == reset_id, PasswordReset.is_used == False)  # noqa: E712
        .values(is_used=True)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def list_for_user(db: Session, user_id: int) -> List[PasswordReset]:
    return db.query(PasswordReset).filter(
        PasswordReset.user_id == user_id
    ).order_by(PasswordReset.id).all()
