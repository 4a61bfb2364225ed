"""
User lookup endpoints.

- GET /users/me/full: Caller's account with the profile matching its role
- GET /users/{id}: Public account info
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_current_identity
from app.core.exceptions import NotFound
from app.core.security import TokenIdentity
from app.crud import user as user_crud
from app.schemas.user import PublicUserResponse, UserFullResponse

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me/full", response_model=UserFullResponse)
def get_my_full_account(
    identity: TokenIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """
    Get the caller's account including its shop or job seeker profile.

    The profile that does not match the caller's role is always null.
    """
    user = user_crud.get_by_id(db, identity.identity_id)
    if not user:
        raise NotFound("User not found")
    return user


@router.get("/{user_id}", response_model=PublicUserResponse)
def get_user(user_id: int, db: Session = Depends(get_db)):
    user = user_crud.get_by_id(db, user_id)
    if not user:
        raise NotFound("User not found")
    return user
