from typing import List

from fastapi import HTTPException, status

from linkfolio.models.social import Social, MenuSocial
from linkfolio.repositories.position_repository import PositionRepository
from linkfolio.repositories.social_repository import SocialRepository
from linkfolio.services.plan_limits import Action, UsageService


class SocialService:
    """Profile socials and menu socials. Both draw from the one socials quota."""

    def __init__(self, repo: SocialRepository, usage: UsageService):
        self.repo = repo
        self.usage = usage
        self.positions = PositionRepository(repo.db, repo.model)

    def list(self, user_id: str) -> List:
        return self.repo.list_by_user(user_id)

    def _get_owned(self, user_id: str, social_id: str):
        social = self.repo.get_by_id(social_id, user_id)
        if not social:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Social link not found")
        return social

    def create(self, user_id: str, payload):
        self.usage.ensure_allowed(user_id, Action.ADD_SOCIAL)
        social = self.repo.model(
            user_id=user_id,
            platform=payload.platform,
            url=payload.url,
            position=self.positions.next_position(user_id=user_id),
        )
        created = self.repo.create(social)
        self.usage.invalidate(user_id)
        return created

    def update(self, user_id: str, social_id: str, payload):
        social = self._get_owned(user_id, social_id)
        if payload.url is not None:
            social.url = payload.url
        if payload.position is not None:
            social.position = payload.position
        return self.repo.update(social)

    def delete(self, user_id: str, social_id: str) -> None:
        social = self._get_owned(user_id, social_id)
        self.repo.delete(social)
        self.usage.invalidate(user_id)

    def reorder(self, user_id: str, ordered_ids: List[str]) -> List:
        self.positions.reorder(ordered_ids, user_id=user_id)
        return self.repo.list_by_user(user_id)


def profile_socials(db, usage: UsageService) -> SocialService:
    return SocialService(SocialRepository(db, Social), usage)


def menu_socials(db, usage: UsageService) -> SocialService:
    return SocialService(SocialRepository(db, MenuSocial), usage)
