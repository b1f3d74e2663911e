from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from linkfolio.api.v1.dependencies import get_usage_service
from linkfolio.db.session import get_db
from linkfolio.repositories.team_repository import TeamRepository
from linkfolio.repositories.user_repository import UserRepository
from linkfolio.schemas.team import InviteAccept, InviteInfo
from linkfolio.schemas.user import TokenWithUser
from linkfolio.services.plan_limits import UsageService
from linkfolio.services.team_service import TeamService

router = APIRouter(tags=["invites"])


def _service(db: Session, usage: UsageService) -> TeamService:
    return TeamService(TeamRepository(db), UserRepository(db), usage)


@router.get("/{token}", response_model=InviteInfo)
def get_invite(
    token: str,
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return _service(db, usage).get_invite(token)


@router.post("/{token}/accept", response_model=TokenWithUser)
def accept_invite(
    token: str,
    payload: InviteAccept,
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return _service(db, usage).accept_invite(token, payload)
