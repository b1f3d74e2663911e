from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from linkfolio.api.v1.dependencies import get_current_user, get_usage_service
from linkfolio.db.session import get_db
from linkfolio.models.user import User
from linkfolio.repositories.page_repository import BlockRepository, PageRepository
from linkfolio.schemas.link import ReorderRequest
from linkfolio.schemas.page import (
    BlockCreate,
    BlockResponse,
    BlockUpdate,
    PageCreate,
    PageResponse,
    PageUpdate,
)
from linkfolio.services.page_service import BlockService, PageService
from linkfolio.services.plan_limits import UsageService

router = APIRouter(tags=["pages"])


def _pages(db: Session, usage: UsageService) -> PageService:
    return PageService(PageRepository(db), usage)


def _blocks(db: Session, usage: UsageService) -> BlockService:
    return BlockService(BlockRepository(db), PageRepository(db), usage)


@router.get("", response_model=List[PageResponse])
def list_pages(
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return _pages(db, usage).list(current_user.id)


@router.post("", response_model=PageResponse, status_code=status.HTTP_201_CREATED)
def create_page(
    payload: PageCreate,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return _pages(db, usage).create(current_user.id, payload)


@router.post("/reorder", response_model=List[PageResponse])
def reorder_pages(
    payload: ReorderRequest,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return _pages(db, usage).reorder(current_user.id, payload.ids)


@router.patch("/blocks/{block_id}", response_model=BlockResponse)
def update_block(
    block_id: str,
    payload: BlockUpdate,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return _blocks(db, usage).update(current_user.id, block_id, payload)


@router.delete("/blocks/{block_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_block(
    block_id: str,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    _blocks(db, usage).delete(current_user.id, block_id)


@router.patch("/{page_id}", response_model=PageResponse)
def update_page(
    page_id: str,
    payload: PageUpdate,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return _pages(db, usage).update(current_user.id, page_id, payload)


@router.delete("/{page_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_page(
    page_id: str,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    _pages(db, usage).delete(current_user.id, page_id)


@router.get("/{page_id}/blocks", response_model=List[BlockResponse])
def list_blocks(
    page_id: str,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return _blocks(db, usage).list(current_user.id, page_id)


@router.post("/{page_id}/blocks", response_model=BlockResponse, status_code=status.HTTP_201_CREATED)
def create_block(
    page_id: str,
    payload: BlockCreate,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return _blocks(db, usage).create(current_user.id, page_id, payload)


@router.post("/{page_id}/blocks/reorder", response_model=List[BlockResponse])
def reorder_blocks(
    page_id: str,
    payload: ReorderRequest,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return _blocks(db, usage).reorder(current_user.id, page_id, payload.ids)
