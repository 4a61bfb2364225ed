"""
Health check endpoints.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import get_db

router = APIRouter(tags=["Health"])
logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> Dict[str, str]:
    """
    Basic health check endpoint.

    Returns 200 OK if the service is running.
    """
    return {
        "status": "healthy",
        "timestamp": _timestamp()
    }


@router.get("/health/detailed", status_code=status.HTTP_200_OK)
def detailed_health_check(request: Request, db: Session = Depends(get_db)) -> Dict[str, Any]:
    """
    Detailed health check.

    Reports database connectivity and the token service configuration
    (lifetime, whether revocation is on and how many ids are revoked).
    """
    health_status = {
        "status": "healthy",
        "timestamp": _timestamp(),
        "checks": {}
    }

    try:
        db.execute(text("SELECT 1"))
        health_status["checks"]["database"] = {
            "status": "healthy",
            "message": "Database connection successful"
        }
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        health_status["status"] = "unhealthy"
        health_status["checks"]["database"] = {
            "status": "unhealthy",
            "message": "Database connection failed"
        }

    token_service = request.app.state.token_service
    health_status["checks"]["auth"] = {
        "status": "healthy",
        "token_ttl_days": token_service.ttl.days,
        "revocation_enabled": token_service.revocation_enabled,
    }
    if token_service.revocation_enabled:
        health_status["checks"]["auth"]["revoked_tokens"] = len(token_service.denylist)

    return health_status
