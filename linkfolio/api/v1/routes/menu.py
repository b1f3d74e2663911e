from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from linkfolio.api.v1.dependencies import get_current_user, get_usage_service
from linkfolio.db.session import get_db
from linkfolio.models.user import User
from linkfolio.repositories.menu_repository import MenuRepository
from linkfolio.schemas.link import ReorderRequest
from linkfolio.schemas.menu import (
    ProductCreate,
    ProductResponse,
    ProductUpdate,
    SectionCreate,
    SectionResponse,
    SectionUpdate,
)
from linkfolio.schemas.social import SocialCreate, SocialResponse, SocialUpdate
from linkfolio.services.menu_service import MenuService
from linkfolio.services.plan_limits import UsageService
from linkfolio.services.social_service import menu_socials

router = APIRouter(tags=["menu"])


def _service(db: Session, usage: UsageService) -> MenuService:
    return MenuService(MenuRepository(db), usage)


# Sections
@router.get("/sections", response_model=List[SectionResponse])
def list_sections(
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return _service(db, usage).list_sections(current_user.id)


@router.post("/sections", response_model=SectionResponse, status_code=status.HTTP_201_CREATED)
def create_section(
    payload: SectionCreate,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return _service(db, usage).create_section(current_user.id, payload)


@router.post("/sections/reorder", response_model=List[SectionResponse])
def reorder_sections(
    payload: ReorderRequest,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return _service(db, usage).reorder_sections(current_user.id, payload.ids)


@router.patch("/sections/{section_id}", response_model=SectionResponse)
def update_section(
    section_id: str,
    payload: SectionUpdate,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return _service(db, usage).update_section(current_user.id, section_id, payload)


@router.delete("/sections/{section_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_section(
    section_id: str,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    _service(db, usage).delete_section(current_user.id, section_id)


@router.post("/sections/{section_id}/products/reorder", response_model=List[ProductResponse])
def reorder_products(
    section_id: str,
    payload: ReorderRequest,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return _service(db, usage).reorder_products(current_user.id, section_id, payload.ids)


# Products
@router.get("/products", response_model=List[ProductResponse])
def list_products(
    section_id: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return _service(db, usage).list_products(current_user.id, section_id)


@router.post("/products", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductCreate,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return _service(db, usage).create_product(current_user.id, payload)


@router.patch("/products/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: str,
    payload: ProductUpdate,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return _service(db, usage).update_product(current_user.id, product_id, payload)


@router.delete("/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: str,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    _service(db, usage).delete_product(current_user.id, product_id)


# Menu socials share the socials quota with profile socials
@router.get("/socials", response_model=List[SocialResponse])
def list_menu_socials(
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return menu_socials(db, usage).list(current_user.id)


@router.post("/socials", response_model=SocialResponse, status_code=status.HTTP_201_CREATED)
def create_menu_social(
    payload: SocialCreate,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return menu_socials(db, usage).create(current_user.id, payload)


@router.post("/socials/reorder", response_model=List[SocialResponse])
def reorder_menu_socials(
    payload: ReorderRequest,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return menu_socials(db, usage).reorder(current_user.id, payload.ids)


@router.patch("/socials/{social_id}", response_model=SocialResponse)
def update_menu_social(
    social_id: str,
    payload: SocialUpdate,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return menu_socials(db, usage).update(current_user.id, social_id, payload)


@router.delete("/socials/{social_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_menu_social(
    social_id: str,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    menu_socials(db, usage).delete(current_user.id, social_id)
