from pydantic import BaseModel, Field, HttpUrl
from typing import List, Optional


class LinkCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    url: HttpUrl


class LinkUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    url: Optional[HttpUrl] = None
    active: Optional[bool] = None
    position: Optional[int] = Field(None, ge=0)


class LinkResponse(BaseModel):
    id: str
    title: str
    url: str
    position: int
    active: bool

    class Config:
        from_attributes = True


class ReorderRequest(BaseModel):
    ids: List[str]
