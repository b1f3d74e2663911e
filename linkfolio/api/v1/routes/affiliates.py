from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from linkfolio.api.v1.dependencies import get_current_admin, get_current_user
from linkfolio.db.session import get_db
from linkfolio.models.user import User
from linkfolio.repositories.affiliate_repository import AffiliateRepository
from linkfolio.repositories.user_repository import UserRepository
from linkfolio.schemas.affiliate import (
    AffiliateCreate,
    AffiliateDashboard,
    AffiliateResponse,
    AffiliateUpdate,
    PayoutResponse,
    ReferralResponse,
)
from linkfolio.services.affiliate_service import AffiliateService

router = APIRouter(tags=["affiliates"])
admin_router = APIRouter(tags=["admin"], dependencies=[Depends(get_current_admin)])


def _service(db: Session) -> AffiliateService:
    return AffiliateService(AffiliateRepository(db), UserRepository(db))


@router.get("/dashboard", response_model=AffiliateDashboard)
def affiliate_dashboard(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return _service(db).dashboard(current_user.id)


@admin_router.get("", response_model=List[AffiliateResponse])
def list_affiliates(db: Session = Depends(get_db)):
    return _service(db).list()


@admin_router.post("", response_model=AffiliateResponse, status_code=status.HTTP_201_CREATED)
def create_affiliate(payload: AffiliateCreate, db: Session = Depends(get_db)):
    return _service(db).create(payload.user_id, payload.commission_rate)


@admin_router.patch("/{affiliate_id}", response_model=AffiliateResponse)
def update_affiliate(affiliate_id: str, payload: AffiliateUpdate, db: Session = Depends(get_db)):
    return _service(db).update(affiliate_id, payload)


@admin_router.delete("/{affiliate_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_affiliate(affiliate_id: str, db: Session = Depends(get_db)):
    _service(db).delete(affiliate_id)


@admin_router.get("/{affiliate_id}/referrals", response_model=List[ReferralResponse])
def list_referrals(affiliate_id: str, db: Session = Depends(get_db)):
    return _service(db).list_referrals(affiliate_id)


@admin_router.post("/{affiliate_id}/payout", response_model=PayoutResponse)
def payout(affiliate_id: str, db: Session = Depends(get_db)):
    return _service(db).payout(affiliate_id)
