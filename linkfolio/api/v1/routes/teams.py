from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from linkfolio.api.v1.dependencies import get_current_user, get_usage_service
from linkfolio.db.session import get_db
from linkfolio.models.user import User
from linkfolio.repositories.team_repository import TeamRepository
from linkfolio.repositories.user_repository import UserRepository
from linkfolio.schemas.team import (
    InviteCreate,
    MemberCreate,
    MemberResponse,
    TeamCreate,
    TeamResponse,
    TeamUpdate,
)
from linkfolio.services.plan_limits import UsageService
from linkfolio.services.team_service import TeamService

router = APIRouter(tags=["teams"])


def _service(db: Session, usage: UsageService) -> TeamService:
    return TeamService(TeamRepository(db), UserRepository(db), usage)


@router.post("", response_model=TeamResponse, status_code=status.HTTP_201_CREATED)
def create_team(
    payload: TeamCreate,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return _service(db, usage).create_team(current_user, payload)


@router.get("/me", response_model=TeamResponse)
def get_my_team(
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return _service(db, usage).get_team_for(current_user)


@router.patch("/me", response_model=TeamResponse)
def update_my_team(
    payload: TeamUpdate,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return _service(db, usage).update_team(current_user, payload)


@router.get("/members", response_model=List[MemberResponse])
def list_members(
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return _service(db, usage).list_members(current_user)


@router.post("/members", response_model=MemberResponse, status_code=status.HTTP_201_CREATED)
def add_member(
    payload: MemberCreate,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return _service(db, usage).add_member(current_user, payload)


@router.post("/invites", response_model=MemberResponse, status_code=status.HTTP_201_CREATED)
def invite_member(
    payload: InviteCreate,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return _service(db, usage).invite_member(current_user, payload)


@router.delete("/members/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_member(
    member_id: str,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    _service(db, usage).remove_member(current_user, member_id)
