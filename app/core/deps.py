"""
FastAPI dependencies for authentication and authorization.

These dependencies are used to protect endpoints and extract the caller's
identity. Identity comes from the bearer token alone; no store round trip
is made to authenticate a request.
"""

import logging
from typing import Callable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.exceptions import Forbidden, ProfileRequired, Unauthenticated
from app.core.security import ExpiredToken, InvalidToken, PasswordHasher, TokenIdentity, TokenService
from app.crud import profile as profile_crud
from app.models.profile import JobSeekerProfile, Shop
from app.models.user import Role

logger = logging.getLogger(__name__)

# HTTP Bearer token scheme (Authorization: Bearer <token>)
# auto_error=False so a missing header yields our own 401 payload
security = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


async def get_current_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    token_service: TokenService = Depends(get_token_service),
) -> TokenIdentity:
    """
    Extract and validate the caller's identity from the JWT.

    This dependency:
    1. Requires an ``Authorization: Bearer <token>`` header
    2. Verifies signature and expiry
    3. Attaches the identity to ``request.state.identity``

    Raises:
        Unauthenticated: Missing header, wrong scheme, invalid or expired token
    """
    if credentials is None:
        raise Unauthenticated("No token provided")

    try:
        identity = token_service.verify(credentials.credentials)
    except ExpiredToken as e:
        logger.info(f"Rejected expired token: {e}")
        raise Unauthenticated("Invalid or expired token")
    except InvalidToken as e:
        logger.warning(f"Rejected invalid token: {e}")
        raise Unauthenticated("Invalid or expired token")

    request.state.identity = identity
    return identity


def require_role(*allowed_roles: Role) -> Callable[..., TokenIdentity]:
    """
    Build a dependency that admits only identities holding one of ``allowed_roles``.

    Usage:
        @router.post("/jobs")
        def create_job(identity: TokenIdentity = Depends(require_role(Role.SHOP_OWNER))):
            ...

    Raises:
        Unauthenticated: No identity attached
        Forbidden: Identity's role is not allowed
    """
    allowed = frozenset(allowed_roles)

    def role_checker(identity: Optional[TokenIdentity] = Depends(get_current_identity)) -> TokenIdentity:
        if identity is None:
            raise Unauthenticated("Not authenticated")
        if identity.role not in allowed:
            raise Forbidden()
        return identity

    return role_checker


def get_caller_shop(db: Session, identity: TokenIdentity) -> Shop:
    """
    Resolve the shop owned by the caller.

    Raises:
        ProfileRequired: The caller has not created a shop yet
    """
    shop = profile_crud.get_shop_by_user(db, identity.identity_id)
    if not shop:
        raise ProfileRequired("Shop profile not found. Please create a shop profile first.")
    return shop


def get_caller_seeker_profile(db: Session, identity: TokenIdentity) -> JobSeekerProfile:
    """
    Resolve the job seeker profile of the caller.

    Raises:
        ProfileRequired: The caller has not created a seeker profile yet
    """
    profile = profile_crud.get_seeker_by_user(db, identity.identity_id)
    if not profile:
        raise ProfileRequired("Job seeker profile not found. Please complete your profile first.")
    return profile
