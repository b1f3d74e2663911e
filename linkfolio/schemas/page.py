from pydantic import BaseModel, Field
from typing import Any, Dict, List, Literal, Optional

BlockType = Literal["link", "text", "media"]
SLUG_PATTERN = r"^[a-z0-9-]+$"


class PageCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    slug: Optional[str] = Field(None, min_length=1, max_length=100, pattern=SLUG_PATTERN)
    is_published: bool = True


class PageUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = Field(None, min_length=1, max_length=100, pattern=SLUG_PATTERN)
    is_published: Optional[bool] = None


class BlockCreate(BaseModel):
    type: BlockType
    content: Dict[str, Any] = Field(default_factory=dict)


class BlockUpdate(BaseModel):
    type: Optional[BlockType] = None
    content: Optional[Dict[str, Any]] = None


class BlockResponse(BaseModel):
    id: str
    page_id: str
    type: str
    content: Dict[str, Any]
    position: int

    class Config:
        from_attributes = True


class PageResponse(BaseModel):
    id: str
    title: str
    slug: str
    position: int
    is_published: bool

    class Config:
        from_attributes = True


class PageWithBlocks(PageResponse):
    blocks: List[BlockResponse] = []
