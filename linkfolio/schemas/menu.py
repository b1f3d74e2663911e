from pydantic import BaseModel, Field
from typing import List, Optional

from linkfolio.schemas.social import SocialResponse
from linkfolio.schemas.user import PublicUserResponse


class SectionCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None


class SectionUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None


class ProductCreate(BaseModel):
    section_id: str
    name: str = Field(..., min_length=1, max_length=150)
    description: Optional[str] = None
    price: float = Field(0, ge=0)
    image_url: Optional[str] = None
    is_available: bool = True


class ProductUpdate(BaseModel):
    section_id: Optional[str] = None
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    image_url: Optional[str] = None
    is_available: Optional[bool] = None


class ProductResponse(BaseModel):
    id: str
    section_id: str
    name: str
    description: Optional[str] = None
    price: float
    image_url: Optional[str] = None
    is_available: bool
    position: int

    class Config:
        from_attributes = True


class SectionResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    position: int

    class Config:
        from_attributes = True


class SectionWithProducts(SectionResponse):
    products: List[ProductResponse] = []


class PublicMenuResponse(BaseModel):
    user: PublicUserResponse
    business_name: Optional[str] = None
    sections: List[SectionWithProducts]
    socials: List[SocialResponse]
