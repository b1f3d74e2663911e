from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from linkfolio.api.v1.dependencies import get_current_admin
from linkfolio.db.session import get_db
from linkfolio.repositories.affiliate_repository import AffiliateRepository
from linkfolio.schemas.affiliate import (
    PromoCodeCreate,
    PromoCodeResponse,
    PromoCodeUpdate,
    PromoCodeValidate,
    PromoCodeValidation,
)
from linkfolio.services.affiliate_service import PromoCodeService

router = APIRouter(tags=["promo-codes"])
admin_router = APIRouter(tags=["admin"], dependencies=[Depends(get_current_admin)])


def _service(db: Session) -> PromoCodeService:
    return PromoCodeService(AffiliateRepository(db))


@router.post("/validate", response_model=PromoCodeValidation)
def validate_promo_code(payload: PromoCodeValidate, db: Session = Depends(get_db)):
    return _service(db).validate(payload.code)


@admin_router.get("", response_model=List[PromoCodeResponse])
def list_promo_codes(db: Session = Depends(get_db)):
    return _service(db).list()


@admin_router.post("", response_model=PromoCodeResponse, status_code=status.HTTP_201_CREATED)
def create_promo_code(payload: PromoCodeCreate, db: Session = Depends(get_db)):
    return _service(db).create(payload)


@admin_router.patch("/{promo_id}", response_model=PromoCodeResponse)
def update_promo_code(promo_id: str, payload: PromoCodeUpdate, db: Session = Depends(get_db)):
    return _service(db).update(promo_id, payload)


@admin_router.delete("/{promo_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_promo_code(promo_id: str, db: Session = Depends(get_db)):
    _service(db).delete(promo_id)
