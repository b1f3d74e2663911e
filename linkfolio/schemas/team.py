from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from typing import Literal, Optional

from linkfolio.schemas.user import USERNAME_PATTERN

MemberRole = Literal["admin", "member"]


class TeamCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    logo_url: Optional[str] = None
    primary_color: Optional[str] = Field(None, max_length=20)
    card_template: str = "classic"


class TeamUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    logo_url: Optional[str] = None
    primary_color: Optional[str] = Field(None, max_length=20)
    card_template: Optional[str] = None


class TeamResponse(BaseModel):
    id: str
    owner_id: str
    name: str
    logo_url: Optional[str] = None
    primary_color: Optional[str] = None
    card_template: str

    class Config:
        from_attributes = True


class MemberCreate(BaseModel):
    """Create the member's account directly; credentials are emailed."""
    email: EmailStr
    username: str = Field(..., min_length=3, max_length=30, pattern=USERNAME_PATTERN)
    name: Optional[str] = Field(None, max_length=100)
    job_title: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=50)
    role: MemberRole = "member"


class InviteCreate(BaseModel):
    email: EmailStr
    name: Optional[str] = Field(None, max_length=100)
    role: MemberRole = "member"


class MemberResponse(BaseModel):
    id: str
    user_id: Optional[str] = None
    email: str
    name: Optional[str] = None
    job_title: Optional[str] = None
    phone: Optional[str] = None
    role: str
    status: str

    class Config:
        from_attributes = True


class TeamBranding(BaseModel):
    name: str
    logo_url: Optional[str] = None
    primary_color: Optional[str] = None
    card_template: str

    class Config:
        from_attributes = True


class PublicMemberResponse(BaseModel):
    """Business card: no email, no account ids."""
    id: str
    name: Optional[str] = None
    job_title: Optional[str] = None
    phone: Optional[str] = None
    team: TeamBranding


class InviteInfo(BaseModel):
    team_name: str
    email: str
    role: str
    expires_at: datetime


class InviteAccept(BaseModel):
    username: str = Field(..., min_length=3, max_length=30, pattern=USERNAME_PATTERN)
    password: str = Field(..., min_length=6)
