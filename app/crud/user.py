"""
CRUD operations for User model.
"""

from datetime import datetime, timezone
from typing import Optional
from sqlalchemy.orm import Session
from app.models.user import User, Role


def get_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_by_email(db: Session, email: str) -> Optional[User]:
    """
    Retrieve a user by email address.

    Emails are compared case-insensitively by normalising to lowercase on
    write and on lookup.
    """
    return db.query(User).filter(User.email == email.lower()).first()


def create(db: Session, email: str, hashed_password: str, role: Role) -> User:
    """
    Create a new active user.

    Args:
        db: Database session
        email: Unique email address
        hashed_password: Digest produced by PasswordHasher.hash
        role: Role fixed for the lifetime of the account

    Returns:
        Created User instance with id
    """
    db_user = User(
        email=email.lower(),
        hashed_password=hashed_password,
        role=role,
        is_active=True,
    )

    db.add(db_user)
    db.commit()
    db.refresh(db_user)

    return db_user


def update_password(db: Session, user: User, hashed_password: str) -> User:
    user.hashed_password = hashed_password
    db.commit()
    db.refresh(user)
    return user


def touch_last_login(db: Session, user: User) -> None:
    user.last_login_at = datetime.now(timezone.utc)
    db.commit()


def deactivate(db: Session, user: User) -> User:
    user.is_active = False
    db.commit()
    db.refresh(user)
    return user
