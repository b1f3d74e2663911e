from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from typing import Optional

USERNAME_PATTERN = r"^[a-zA-Z0-9_-]+$"


class UserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=30, pattern=USERNAME_PATTERN)
    email: EmailStr
    password: str = Field(..., min_length=6)
    referral_code: Optional[str] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    id: str
    username: str
    email: EmailStr
    display_name: Optional[str] = None
    bio: Optional[str] = None
    profile_image: Optional[str] = None
    onboarding_completed: bool
    template: Optional[str] = None
    account_type: str
    team_id: Optional[str] = None
    must_change_password: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PublicUserResponse(BaseModel):
    """User as seen on the public profile (no email)."""
    id: str
    username: str
    display_name: Optional[str] = None
    bio: Optional[str] = None
    profile_image: Optional[str] = None
    template: Optional[str] = None

    class Config:
        from_attributes = True


class Token(BaseModel):
    access_token: str
    token_type: str


class TokenWithUser(Token):
    user: UserResponse


class ProfileUpdate(BaseModel):
    display_name: Optional[str] = Field(None, max_length=100)
    bio: Optional[str] = Field(None, max_length=500)
    profile_image: Optional[str] = None
    username: Optional[str] = Field(None, min_length=3, max_length=30, pattern=USERNAME_PATTERN)
    onboarding_completed: Optional[bool] = None
    template: Optional[str] = None


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=6)


class BusinessProfile(BaseModel):
    business_name: Optional[str] = Field(None, max_length=150)
    business_phone: Optional[str] = Field(None, max_length=50)
    business_address: Optional[str] = None
    business_website: Optional[str] = None

    class Config:
        from_attributes = True


class MessageResponse(BaseModel):
    message: str
