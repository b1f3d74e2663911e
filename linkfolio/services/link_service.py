import logging
from typing import List

from fastapi import HTTPException, status

from linkfolio.models.link import Link
from linkfolio.repositories.link_repository import LinkRepository
from linkfolio.repositories.position_repository import PositionRepository
from linkfolio.services.plan_limits import Action, UsageService

logger = logging.getLogger(__name__)


class LinkService:
    def __init__(self, repo: LinkRepository, usage: UsageService):
        self.repo = repo
        self.usage = usage
        self.positions = PositionRepository(repo.db, Link)

    def list(self, user_id: str) -> List[Link]:
        return self.repo.list_by_user(user_id)

    def _get_owned(self, user_id: str, link_id: str) -> Link:
        link = self.repo.get_by_id(link_id, user_id)
        if not link:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Link not found")
        return link

    def create(self, user_id: str, payload) -> Link:
        self.usage.ensure_allowed(user_id, Action.ADD_LINK)
        link = Link(
            user_id=user_id,
            title=payload.title,
            url=str(payload.url),
            position=self.positions.next_position(user_id=user_id),
            active=True,
        )
        created = self.repo.create(link)
        self.usage.invalidate(user_id)
        return created

    def update(self, user_id: str, link_id: str, payload) -> Link:
        link = self._get_owned(user_id, link_id)
        if payload.title is not None:
            link.title = payload.title
        if payload.url is not None:
            link.url = str(payload.url)
        if payload.active is not None:
            link.active = payload.active
        if payload.position is not None:
            link.position = payload.position
        return self.repo.update(link)

    def delete(self, user_id: str, link_id: str) -> None:
        link = self._get_owned(user_id, link_id)
        self.repo.delete(link)
        self.usage.invalidate(user_id)

    def reorder(self, user_id: str, ordered_ids: List[str]) -> List[Link]:
        self.positions.reorder(ordered_ids, user_id=user_id)
        return self.repo.list_by_user(user_id)
