import uuid

from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Text
from sqlalchemy.sql import func
from linkfolio.db.base import Base


def new_id() -> str:
    return str(uuid.uuid4())


ACCOUNT_INDIVIDUAL = "individual"
ACCOUNT_BUSINESS = "business"


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    username = Column(String(30), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    display_name = Column(String(100), nullable=True)
    bio = Column(Text, nullable=True)
    profile_image = Column(String, nullable=True)
    onboarding_completed = Column(Boolean, nullable=False, default=False)
    template = Column(String(50), default="minimal")
    account_type = Column(String(20), nullable=False, default=ACCOUNT_INDIVIDUAL, index=True)
    is_disabled = Column(Boolean, nullable=False, default=False)
    must_change_password = Column(Boolean, nullable=False, default=False)
    team_id = Column(
        String(36),
        ForeignKey("teams.id", ondelete="SET NULL", use_alter=True, name="fk_users_team_id"),
        nullable=True,
        index=True,
    )

    # Business profile
    business_name = Column(String(150), nullable=True)
    business_phone = Column(String(50), nullable=True)
    business_address = Column(Text, nullable=True)
    business_website = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
