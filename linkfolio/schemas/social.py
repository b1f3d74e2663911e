from pydantic import BaseModel, Field
from typing import Optional


class SocialCreate(BaseModel):
    platform: str = Field(..., min_length=1, max_length=50)
    url: str = ""


class SocialUpdate(BaseModel):
    url: Optional[str] = Field(None, min_length=1)
    position: Optional[int] = Field(None, ge=0)


class SocialResponse(BaseModel):
    id: str
    platform: str
    url: str
    position: int

    class Config:
        from_attributes = True
