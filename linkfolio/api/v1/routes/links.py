from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from linkfolio.api.v1.dependencies import get_current_user, get_usage_service
from linkfolio.db.session import get_db
from linkfolio.models.user import User
from linkfolio.repositories.link_repository import LinkRepository
from linkfolio.schemas.link import LinkCreate, LinkResponse, LinkUpdate, ReorderRequest
from linkfolio.services.link_service import LinkService
from linkfolio.services.plan_limits import UsageService

router = APIRouter(tags=["links"])


def _service(db: Session, usage: UsageService) -> LinkService:
    return LinkService(LinkRepository(db), usage)


@router.get("", response_model=List[LinkResponse])
def list_links(
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return _service(db, usage).list(current_user.id)


@router.post("", response_model=LinkResponse, status_code=status.HTTP_201_CREATED)
def create_link(
    payload: LinkCreate,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return _service(db, usage).create(current_user.id, payload)


@router.post("/reorder", response_model=List[LinkResponse])
def reorder_links(
    payload: ReorderRequest,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return _service(db, usage).reorder(current_user.id, payload.ids)


@router.patch("/{link_id}", response_model=LinkResponse)
def update_link(
    link_id: str,
    payload: LinkUpdate,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return _service(db, usage).update(current_user.id, link_id, payload)


@router.delete("/{link_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_link(
    link_id: str,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    _service(db, usage).delete(current_user.id, link_id)
