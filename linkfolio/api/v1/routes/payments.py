from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from linkfolio.api.v1.dependencies import get_current_user, get_usage_service
from linkfolio.db.session import get_db
from linkfolio.models.user import User
from linkfolio.repositories.affiliate_repository import AffiliateRepository
from linkfolio.repositories.payment_repository import PaymentRepository
from linkfolio.repositories.plan_repository import PlanRepository
from linkfolio.repositories.subscription_repository import SubscriptionRepository
from linkfolio.repositories.user_repository import UserRepository
from linkfolio.schemas.billing import (
    CreateOrderRequest,
    CreateOrderResponse,
    PaymentHistoryItem,
    PlanResponse,
    SubscriptionResponse,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)
from linkfolio.services.affiliate_service import AffiliateService, PromoCodeService
from linkfolio.services.payment_service import PaymentService
from linkfolio.services.plan_limits import UsageService
from linkfolio.services.plan_service import PlanService
from linkfolio.services.subscription_service import SubscriptionService

router = APIRouter(tags=["payments"])


def _payment_service(db: Session, usage: UsageService) -> PaymentService:
    affiliate_repo = AffiliateRepository(db)
    return PaymentService(
        payments=PaymentRepository(db),
        plans=PlanRepository(db),
        subscriptions=SubscriptionService(SubscriptionRepository(db)),
        affiliates=AffiliateService(affiliate_repo, UserRepository(db)),
        promo_codes=PromoCodeService(affiliate_repo),
        usage=usage,
    )


@router.get("/plans", response_model=List[PlanResponse])
def list_plans(db: Session = Depends(get_db)):
    return PlanService(PlanRepository(db)).list_public()


@router.get("/subscription", response_model=Optional[SubscriptionResponse])
def get_subscription(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return SubscriptionService(SubscriptionRepository(db)).get_current(current_user.id)


@router.get("/history", response_model=List[PaymentHistoryItem])
def payment_history(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return SubscriptionService.payment_history(PaymentRepository(db), current_user.id)


@router.post("/create-order", response_model=CreateOrderResponse)
def create_order(
    payload: CreateOrderRequest,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return _payment_service(db, usage).create_order(current_user, payload)


@router.post("/verify", response_model=VerifyPaymentResponse)
def verify_payment(
    payload: VerifyPaymentRequest,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return _payment_service(db, usage).verify(current_user, payload)
