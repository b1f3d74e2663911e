from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from linkfolio.db.base import Base
from linkfolio.models.user import new_id

ROLE_OWNER = "owner"
ROLE_ADMIN = "admin"
ROLE_MEMBER = "member"
MANAGER_ROLES = {ROLE_OWNER, ROLE_ADMIN}

MEMBER_ACTIVE = "active"
MEMBER_INVITED = "invited"


class Team(Base):
    __tablename__ = "teams"

    id = Column(String(36), primary_key=True, default=new_id)
    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(150), nullable=False)
    logo_url = Column(String, nullable=True)
    primary_color = Column(String(20), nullable=True)
    card_template = Column(String(50), nullable=False, default="classic")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class TeamMember(Base):
    __tablename__ = "team_members"

    id = Column(String(36), primary_key=True, default=new_id)
    team_id = Column(String(36), ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)
    email = Column(String(255), nullable=False)
    name = Column(String(100), nullable=True)
    job_title = Column(String(100), nullable=True)
    phone = Column(String(50), nullable=True)
    role = Column(String(20), nullable=False, default=ROLE_MEMBER)  # owner, admin, member
    status = Column(String(20), nullable=False, default=MEMBER_ACTIVE)  # active, invited
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("team_id", "email", name="uq_team_members_team_email"),
    )


class TeamInvite(Base):
    __tablename__ = "team_invites"

    id = Column(String(36), primary_key=True, default=new_id)
    team_id = Column(String(36), ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)
    member_id = Column(String(36), ForeignKey("team_members.id", ondelete="CASCADE"), nullable=False)
    email = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=ROLE_MEMBER)
    token = Column(String(64), unique=True, index=True, nullable=False)
    invited_by = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    accepted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
