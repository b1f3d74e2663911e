from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from linkfolio.api.v1.dependencies import get_current_user, get_usage_service
from linkfolio.db.session import get_db
from linkfolio.models.user import User
from linkfolio.schemas.link import ReorderRequest
from linkfolio.schemas.social import SocialCreate, SocialResponse, SocialUpdate
from linkfolio.services.plan_limits import UsageService
from linkfolio.services.social_service import profile_socials

router = APIRouter(tags=["socials"])


@router.get("", response_model=List[SocialResponse])
def list_socials(
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return profile_socials(db, usage).list(current_user.id)


@router.post("", response_model=SocialResponse, status_code=status.HTTP_201_CREATED)
def create_social(
    payload: SocialCreate,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return profile_socials(db, usage).create(current_user.id, payload)


@router.post("/reorder", response_model=List[SocialResponse])
def reorder_socials(
    payload: ReorderRequest,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return profile_socials(db, usage).reorder(current_user.id, payload.ids)


@router.patch("/{social_id}", response_model=SocialResponse)
def update_social(
    social_id: str,
    payload: SocialUpdate,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return profile_socials(db, usage).update(current_user.id, social_id, payload)


@router.delete("/{social_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_social(
    social_id: str,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    profile_socials(db, usage).delete(current_user.id, social_id)
