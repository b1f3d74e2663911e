from fastapi import HTTPException, status

from linkfolio.repositories.link_repository import LinkRepository
from linkfolio.repositories.menu_repository import MenuRepository
from linkfolio.repositories.page_repository import PageRepository
from linkfolio.repositories.social_repository import SocialRepository
from linkfolio.repositories.user_repository import UserRepository
from linkfolio.models.social import Social, MenuSocial


class PublicProfileService:
    """Anonymous views of a user's profile and menu, looked up by username."""

    def __init__(self, db):
        self.db = db
        self.users = UserRepository(db)

    def _user(self, username: str):
        user = self.users.get_by_username(username)
        if not user or user.is_disabled:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
        return user

    def profile(self, username: str) -> dict:
        user = self._user(username)
        return {
            "user": user,
            "links": LinkRepository(self.db).list_by_user(user.id, only_active=True),
            "socials": SocialRepository(self.db, Social).list_by_user(user.id),
            "pages": PageRepository(self.db).list_by_user(user.id, with_blocks=True, only_published=True),
        }

    def menu(self, username: str) -> dict:
        user = self._user(username)
        return {
            "user": user,
            "business_name": user.business_name,
            "sections": MenuRepository(self.db).list_sections(user.id, with_products=True),
            "socials": SocialRepository(self.db, MenuSocial).list_by_user(user.id),
        }
