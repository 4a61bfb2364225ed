from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import require_role
from app.core.security import TokenIdentity
from app.models.user import Role
from app.schemas.application import MatchResponse
from app.services import application_workflow

router = APIRouter(prefix="/matches", tags=["Matches"])


@router.get("/my", response_model=list[MatchResponse])
def list_my_matches(
    identity: TokenIdentity = Depends(require_role(Role.JOB_SEEKER)),
    db: Session = Depends(get_db)
):
    """Precomputed matches for the caller, highest score first."""
    return application_workflow.list_my_matches(db, identity)
