import logging
from typing import Optional

from fastapi import HTTPException, status

from linkfolio.core.security import verify_password, get_password_hash, create_access_token
from linkfolio.models.user import User
from linkfolio.repositories.user_repository import UserRepository
from linkfolio.services.affiliate_service import AffiliateService
from linkfolio.services.plan_limits import UsageService

logger = logging.getLogger(__name__)

FREE_TEMPLATES = {"minimal"}


class AuthService:
    def __init__(self, user_repo: UserRepository, affiliates: Optional[AffiliateService] = None):
        self.user_repo = user_repo
        self.affiliates = affiliates

    def register(self, user_data) -> User:
        email = user_data.email.strip().lower()
        if self.user_repo.get_by_email(email):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")
        if self.user_repo.get_by_username(user_data.username):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already taken")

        new_user = User(
            username=user_data.username,
            email=email,
            hashed_password=get_password_hash(user_data.password),
            display_name=user_data.username,
        )
        created = self.user_repo.create(new_user)
        logger.info(f"User {created.id} registered")

        if self.affiliates is not None and getattr(user_data, "referral_code", None):
            self.affiliates.track_referral(user_data.referral_code, created.id)
        return created

    def authenticate(self, email: str, password: str) -> User:
        user = self.user_repo.get_by_email(email)
        if not user or not verify_password(password, user.hashed_password):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password",
                headers={"WWW-Authenticate": "Bearer"},
            )
        if user.is_disabled:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is disabled")
        return user

    def login(self, email: str, password: str) -> dict:
        user = self.authenticate(email, password)
        access_token = create_access_token({"sub": user.id})
        return {"access_token": access_token, "token_type": "bearer", "user": user}

    def update_profile(self, user: User, payload, usage: UsageService) -> User:
        data = payload.model_dump(exclude_unset=True)

        username = data.pop("username", None)
        if username and username != user.username:
            if self.user_repo.get_by_username(username):
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already taken")
            user.username = username

        template = data.pop("template", None)
        if template and template != user.template:
            if template not in FREE_TEMPLATES and not usage.get_limits(user.id).custom_templates_enabled:
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail="Custom templates are not available on your plan. Upgrade your plan to use them.",
                )
            user.template = template

        for field, value in data.items():
            if value is not None:
                setattr(user, field, value)
        return self.user_repo.update(user)

    def change_password(self, user: User, current_password: str, new_password: str) -> None:
        if not verify_password(current_password, user.hashed_password):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Current password is incorrect")
        user.hashed_password = get_password_hash(new_password)
        user.must_change_password = False
        self.user_repo.update(user)
        logger.info(f"Password changed for user {user.id}")

    def update_business_profile(self, user: User, payload) -> User:
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(user, field, value)
        return self.user_repo.update(user)
