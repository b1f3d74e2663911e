"""
Teams (business accounts).

The owner's own row in ``team_members`` is created with the team, so the
team-member quota counts the owner too. Only the owner and members with role
``admin`` may change the team or its membership.
"""
import logging
import secrets
from datetime import timedelta
from typing import List, Optional

from fastapi import HTTPException, status

from linkfolio.core.clock import as_aware, utcnow
from linkfolio.core.config import settings
from linkfolio.core.security import create_access_token, generate_token, get_password_hash
from linkfolio.models.team import (
    Team,
    TeamInvite,
    TeamMember,
    MANAGER_ROLES,
    MEMBER_ACTIVE,
    MEMBER_INVITED,
    ROLE_OWNER,
)
from linkfolio.models.user import User, ACCOUNT_BUSINESS
from linkfolio.repositories.team_repository import TeamRepository
from linkfolio.repositories.user_repository import UserRepository
from linkfolio.services.email_service import EmailService
from linkfolio.services.plan_limits import Action, UsageService

logger = logging.getLogger(__name__)


def generate_temporary_password() -> str:
    return secrets.token_urlsafe(9)


class TeamService:
    def __init__(
        self,
        repo: TeamRepository,
        users: UserRepository,
        usage: UsageService,
        email_service: Optional[EmailService] = None,
    ):
        self.repo = repo
        self.users = users
        self.usage = usage
        self.email_service = email_service or EmailService()

    def _invalidate_team(self, team_id: str, *extra_user_ids: str) -> None:
        for user in self.users.list_by_team(team_id):
            self.usage.invalidate(user.id)
        for user_id in extra_user_ids:
            self.usage.invalidate(user_id)

    def get_team_for(self, user: User) -> Team:
        team = self.repo.get_by_id(user.team_id) if user.team_id else None
        if team is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="You are not part of a team")
        return team

    def is_manager(self, user: User, team: Team) -> bool:
        if team.owner_id == user.id:
            return True
        member = self.repo.get_member_by_user(user.id, team.id)
        return member is not None and member.role in MANAGER_ROLES

    def _managed_team(self, user: User) -> Team:
        team = self.get_team_for(user)
        if not self.is_manager(user, team):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only the team owner or an admin can manage the team",
            )
        return team

    def create_team(self, user: User, payload) -> Team:
        if user.team_id:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You already belong to a team")

        team = self.repo.add(
            Team(
                owner_id=user.id,
                name=payload.name,
                logo_url=payload.logo_url,
                primary_color=payload.primary_color,
                card_template=payload.card_template,
            )
        )
        self.repo.add(
            TeamMember(
                team_id=team.id,
                user_id=user.id,
                email=user.email,
                name=user.display_name or user.username,
                role=ROLE_OWNER,
                status=MEMBER_ACTIVE,
            )
        )
        user.team_id = team.id
        user.account_type = ACCOUNT_BUSINESS
        self.repo.commit()
        self.repo.db.refresh(team)
        self.usage.invalidate(user.id)
        logger.info(f"Team {team.id} created by user {user.id}")
        return team

    def update_team(self, user: User, payload) -> Team:
        team = self._managed_team(user)
        for field, value in payload.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(team, field, value)
        self.repo.commit()
        self.repo.db.refresh(team)
        return team

    def list_members(self, user: User) -> List[TeamMember]:
        team = self.get_team_for(user)
        return self.repo.list_members(team.id)

    def _ensure_new_member_email(self, team: Team, email: str) -> None:
        if self.repo.get_member_by_email(email, team.id):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="This email is already on the team")

    def add_member(self, user: User, payload) -> TeamMember:
        """Create the member's account with a temporary password and email the credentials."""
        team = self._managed_team(user)
        self.usage.ensure_allowed(team.owner_id, Action.ADD_TEAM_MEMBER)

        email = payload.email.strip().lower()
        self._ensure_new_member_email(team, email)
        if self.users.get_by_email(email):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")
        if self.users.get_by_username(payload.username):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already taken")

        temporary_password = generate_temporary_password()
        account = self.repo.add(
            User(
                username=payload.username,
                email=email,
                hashed_password=get_password_hash(temporary_password),
                display_name=payload.name or payload.username,
                account_type=ACCOUNT_BUSINESS,
                must_change_password=True,
                onboarding_completed=True,
                team_id=team.id,
            )
        )
        member = self.repo.add(
            TeamMember(
                team_id=team.id,
                user_id=account.id,
                email=email,
                name=payload.name,
                job_title=payload.job_title,
                phone=payload.phone,
                role=payload.role,
                status=MEMBER_ACTIVE,
            )
        )
        self.repo.commit()
        self.repo.db.refresh(member)
        self._invalidate_team(team.id)
        logger.info(f"Member {member.id} added to team {team.id}")

        sent = self.email_service.send_member_credentials_email(
            to_email=email,
            member_name=payload.name,
            team_name=team.name,
            username=payload.username,
            temporary_password=temporary_password,
        )
        if not sent:
            logger.warning(f"Credentials email for member {member.id} was not sent")
        return member

    def invite_member(self, user: User, payload) -> TeamMember:
        team = self._managed_team(user)
        self.usage.ensure_allowed(team.owner_id, Action.ADD_TEAM_MEMBER)

        email = payload.email.strip().lower()
        self._ensure_new_member_email(team, email)

        member = self.repo.add(
            TeamMember(
                team_id=team.id,
                email=email,
                name=payload.name,
                role=payload.role,
                status=MEMBER_INVITED,
            )
        )
        invite = self.repo.add(
            TeamInvite(
                team_id=team.id,
                member_id=member.id,
                email=email,
                role=payload.role,
                token=generate_token(48),
                invited_by=user.id,
                expires_at=utcnow() + timedelta(days=settings.INVITE_EXPIRATION_DAYS),
            )
        )
        self.repo.commit()
        self.repo.db.refresh(member)
        self._invalidate_team(team.id)

        sent = self.email_service.send_team_invite_email(
            to_email=email,
            team_name=team.name,
            inviter_name=user.display_name or user.username,
            token=invite.token,
        )
        if not sent:
            logger.warning(f"Invite email for member {member.id} was not sent")
        return member

    def remove_member(self, user: User, member_id: str) -> None:
        team = self._managed_team(user)
        member = self.repo.get_member(member_id, team.id)
        if not member:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Member not found")
        if member.role == ROLE_OWNER or member.user_id == team.owner_id:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="The team owner cannot be removed")

        removed_user_id = member.user_id
        if removed_user_id:
            account = self.users.get_by_id(removed_user_id)
            if account is not None and account.team_id == team.id:
                account.team_id = None
        self.repo.delete_invites_for_member(member.id)
        self.repo.remove(member)
        self.repo.commit()

        extra = (removed_user_id,) if removed_user_id else ()
        self._invalidate_team(team.id, *extra)
        logger.info(f"Member {member_id} removed from team {team.id}")

    # Invites
    def _open_invite(self, token: str) -> TeamInvite:
        invite = self.repo.get_invite_by_token(token)
        if invite is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invite not found")
        if invite.accepted_at is not None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invite already accepted")
        if as_aware(invite.expires_at) < utcnow():
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invite has expired")
        return invite

    def get_invite(self, token: str) -> dict:
        invite = self._open_invite(token)
        team = self.repo.get_by_id(invite.team_id)
        return {
            "team_name": team.name if team else "",
            "email": invite.email,
            "role": invite.role,
            "expires_at": invite.expires_at,
        }

    def accept_invite(self, token: str, payload) -> dict:
        invite = self._open_invite(token)
        if self.users.get_by_email(invite.email):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")
        if self.users.get_by_username(payload.username):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already taken")

        member = self.repo.get_member(invite.member_id, invite.team_id)
        if member is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invite not found")

        account = self.repo.add(
            User(
                username=payload.username,
                email=invite.email,
                hashed_password=get_password_hash(payload.password),
                display_name=member.name or payload.username,
                account_type=ACCOUNT_BUSINESS,
                onboarding_completed=True,
                team_id=invite.team_id,
            )
        )
        member.user_id = account.id
        member.status = MEMBER_ACTIVE
        invite.accepted_at = utcnow()
        self.repo.commit()
        self.repo.db.refresh(account)
        self._invalidate_team(invite.team_id)
        logger.info(f"Invite {invite.id} accepted by user {account.id}")

        return {
            "access_token": create_access_token({"sub": account.id}),
            "token_type": "bearer",
            "user": account,
        }

    # Public business card
    def public_member(self, member_id: str) -> dict:
        member = self.repo.find_member(member_id)
        if member is None or member.status != MEMBER_ACTIVE:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Team member not found")
        team = self.repo.get_by_id(member.team_id)
        if team is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Team member not found")
        return {
            "id": member.id,
            "name": member.name,
            "job_title": member.job_title,
            "phone": member.phone,
            "team": team,
        }
