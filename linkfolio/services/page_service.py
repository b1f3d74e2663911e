import logging
import re
from typing import List

from fastapi import HTTPException, status

from linkfolio.models.page import Page, Block
from linkfolio.repositories.page_repository import PageRepository, BlockRepository
from linkfolio.repositories.position_repository import PositionRepository
from linkfolio.services.plan_limits import Action, UsageService

logger = logging.getLogger(__name__)


def slugify(value: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", value.strip().lower()).strip("-")
    return slug or "page"


class PageService:
    def __init__(self, repo: PageRepository, usage: UsageService):
        self.repo = repo
        self.usage = usage
        self.positions = PositionRepository(repo.db, Page)

    def list(self, user_id: str) -> List[Page]:
        return self.repo.list_by_user(user_id)

    def get_owned(self, user_id: str, page_id: str) -> Page:
        page = self.repo.get_by_id(page_id, user_id)
        if not page:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page not found")
        return page

    def _unique_slug(self, user_id: str, base: str, exclude_id: str = None) -> str:
        slug = base
        suffix = 2
        while True:
            existing = self.repo.get_by_slug(user_id, slug)
            if existing is None or existing.id == exclude_id:
                return slug
            slug = f"{base}-{suffix}"
            suffix += 1

    def create(self, user_id: str, payload) -> Page:
        self.usage.ensure_allowed(user_id, Action.ADD_PAGE)
        page = Page(
            user_id=user_id,
            title=payload.title,
            slug=self._unique_slug(user_id, payload.slug or slugify(payload.title)),
            position=self.positions.next_position(user_id=user_id),
            is_published=payload.is_published,
        )
        created = self.repo.create(page)
        self.usage.invalidate(user_id)
        return created

    def update(self, user_id: str, page_id: str, payload) -> Page:
        page = self.get_owned(user_id, page_id)
        if payload.title is not None:
            page.title = payload.title
        if payload.slug is not None and payload.slug != page.slug:
            if self.repo.get_by_slug(user_id, payload.slug):
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Slug already in use")
            page.slug = payload.slug
        if payload.is_published is not None:
            page.is_published = payload.is_published
        return self.repo.update(page)

    def delete(self, user_id: str, page_id: str) -> None:
        page = self.get_owned(user_id, page_id)
        # blocks go with the page (delete-orphan cascade)
        self.repo.delete(page)
        self.usage.invalidate(user_id)

    def reorder(self, user_id: str, ordered_ids: List[str]) -> List[Page]:
        self.positions.reorder(ordered_ids, user_id=user_id)
        return self.repo.list_by_user(user_id)


class BlockService:
    def __init__(self, repo: BlockRepository, pages: PageRepository, usage: UsageService):
        self.repo = repo
        self.pages = pages
        self.usage = usage
        self.positions = PositionRepository(repo.db, Block)

    def _page(self, user_id: str, page_id: str) -> Page:
        page = self.pages.get_by_id(page_id, user_id)
        if not page:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page not found")
        return page

    def _get_owned(self, user_id: str, block_id: str) -> Block:
        block = self.repo.get_by_id(block_id, user_id)
        if not block:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Block not found")
        return block

    def list(self, user_id: str, page_id: str) -> List[Block]:
        self._page(user_id, page_id)
        return self.repo.list_by_page(page_id, user_id)

    def create(self, user_id: str, page_id: str, payload) -> Block:
        self._page(user_id, page_id)
        self.usage.ensure_allowed(user_id, Action.ADD_BLOCK)
        block = Block(
            page_id=page_id,
            user_id=user_id,
            type=payload.type,
            content=payload.content,
            position=self.positions.next_position(page_id=page_id),
        )
        created = self.repo.create(block)
        self.usage.invalidate(user_id)
        return created

    def update(self, user_id: str, block_id: str, payload) -> Block:
        block = self._get_owned(user_id, block_id)
        if payload.type is not None:
            block.type = payload.type
        if payload.content is not None:
            block.content = payload.content
        return self.repo.update(block)

    def delete(self, user_id: str, block_id: str) -> None:
        block = self._get_owned(user_id, block_id)
        self.repo.delete(block)
        self.usage.invalidate(user_id)

    def reorder(self, user_id: str, page_id: str, ordered_ids: List[str]) -> List[Block]:
        self._page(user_id, page_id)
        self.positions.reorder(ordered_ids, page_id=page_id, user_id=user_id)
        return self.repo.list_by_page(page_id, user_id)
