from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from linkfolio.api.v1.dependencies import get_usage_service
from linkfolio.db.session import get_db
from linkfolio.repositories.team_repository import TeamRepository
from linkfolio.repositories.user_repository import UserRepository
from linkfolio.schemas.menu import PublicMenuResponse
from linkfolio.schemas.profile import PublicProfileResponse
from linkfolio.schemas.team import PublicMemberResponse
from linkfolio.services.plan_limits import UsageService
from linkfolio.services.public_service import PublicProfileService
from linkfolio.services.team_service import TeamService

router = APIRouter(tags=["public"])


@router.get("/profile/{username}", response_model=PublicProfileResponse)
def public_profile(username: str, db: Session = Depends(get_db)):
    return PublicProfileService(db).profile(username)


@router.get("/menu/{username}", response_model=PublicMenuResponse)
def public_menu(username: str, db: Session = Depends(get_db)):
    return PublicProfileService(db).menu(username)


@router.get("/team-member/{member_id}", response_model=PublicMemberResponse)
def public_team_member(
    member_id: str,
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return TeamService(TeamRepository(db), UserRepository(db), usage).public_member(member_id)
