"""
Checkout: Razorpay orders, signature verification and plan activation.

Activation touches the payment, the subscription, the user's account type,
the promo code counter and any pending affiliate referral. All of it is
committed together or not at all.
"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from fastapi import HTTPException, status

from linkfolio.core.config import settings
from linkfolio.core.security import verify_payment_signature
from linkfolio.models.affiliate import PromoCode
from linkfolio.models.payment import Payment, PAYMENT_PENDING, PAYMENT_SUCCESS
from linkfolio.models.plan import PricingPlan
from linkfolio.models.user import User
from linkfolio.repositories.payment_repository import PaymentRepository
from linkfolio.repositories.plan_repository import PlanRepository
from linkfolio.services import razorpay_service
from linkfolio.services.affiliate_service import AffiliateService, PromoCodeService
from linkfolio.services.plan_limits import UsageService
from linkfolio.services.subscription_service import SubscriptionService

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def plan_price(plan: PricingPlan, billing_cycle: str) -> Decimal:
    price = plan.yearly_price if billing_cycle == "yearly" else plan.monthly_price
    return Decimal(str(price or 0))


def apply_discount(amount: Decimal, discount_percent) -> Decimal:
    discounted = amount * (Decimal(100) - Decimal(str(discount_percent))) / Decimal(100)
    return max(discounted, Decimal(0)).quantize(CENTS, rounding=ROUND_HALF_UP)


def to_minor_units(amount: Decimal) -> int:
    """Rupees to paise."""
    return int((amount * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP))


class PaymentService:
    def __init__(
        self,
        payments: PaymentRepository,
        plans: PlanRepository,
        subscriptions: SubscriptionService,
        affiliates: AffiliateService,
        promo_codes: PromoCodeService,
        usage: UsageService,
    ):
        self.payments = payments
        self.plans = plans
        self.subscriptions = subscriptions
        self.affiliates = affiliates
        self.promo_codes = promo_codes
        self.usage = usage

    @property
    def db(self):
        return self.payments.db

    def _active_plan(self, plan_id: str) -> PricingPlan:
        plan = self.plans.get_by_id(plan_id)
        if not plan or not plan.is_active:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Plan not found")
        return plan

    def activate_subscription(
        self,
        user: User,
        plan: PricingPlan,
        billing_cycle: str,
        payment: Optional[Payment] = None,
        promo: Optional[PromoCode] = None,
    ) -> None:
        try:
            if payment is not None:
                payment.status = PAYMENT_SUCCESS
            self.subscriptions.stage_activation(user.id, plan, billing_cycle)
            user.account_type = plan.account_type
            if promo is not None:
                promo.current_uses = (promo.current_uses or 0) + 1
            if payment is not None:
                self.affiliates.convert_referral(user.id, payment)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.error(f"Activation of plan {plan.id} for user {user.id} rolled back", exc_info=True)
            raise
        self.usage.invalidate(user.id)
        logger.info(f"User {user.id} activated plan {plan.id} ({billing_cycle})")

    def create_order(self, user: User, payload) -> dict:
        plan = self._active_plan(payload.plan_id)
        amount = plan_price(plan, payload.billing_cycle)

        promo = None
        if payload.promo_code:
            promo = self.promo_codes.get_usable(payload.promo_code)
            amount = apply_discount(amount, promo.discount_percent)

        if amount <= 0:
            self.activate_subscription(user, plan, payload.billing_cycle, promo=promo)
            return {"free": True, "message": f"{plan.name} plan activated", "plan_name": plan.name}

        if not settings.payment_gateway_configured:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Payment gateway is not configured",
            )

        currency = settings.PAYMENT_CURRENCY
        minor_amount = to_minor_units(amount)
        order = razorpay_service.create_order(
            amount=minor_amount,
            currency=currency,
            receipt=f"rcpt_{user.id[:8]}_{plan.id[:8]}",
            notes={"user_id": user.id, "plan_id": plan.id, "billing_cycle": payload.billing_cycle},
        )
        self.payments.create(
            Payment(
                user_id=user.id,
                plan_id=plan.id,
                promo_code_id=promo.id if promo else None,
                amount=amount,
                currency=currency,
                status=PAYMENT_PENDING,
                billing_cycle=payload.billing_cycle,
                razorpay_order_id=order["id"],
            )
        )
        return {
            "free": False,
            "order_id": order["id"],
            "amount": minor_amount,
            "currency": currency,
            "key_id": settings.RAZORPAY_KEY_ID,
            "plan_name": plan.name,
        }

    def verify(self, user: User, payload) -> dict:
        if not settings.payment_gateway_configured:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Payment gateway is not configured",
            )
        valid = verify_payment_signature(
            payload.razorpay_order_id,
            payload.razorpay_payment_id,
            payload.razorpay_signature,
            settings.RAZORPAY_KEY_SECRET,
        )
        if not valid:
            logger.warning(f"Invalid payment signature for order {payload.razorpay_order_id}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid payment signature")

        payment = self.payments.get_by_order_id(payload.razorpay_order_id)
        if payment is None or payment.user_id != user.id:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payment not found")
        if payment.status == PAYMENT_SUCCESS:
            return {"success": True, "message": "Payment already verified"}

        plan = self._active_plan(payment.plan_id or payload.plan_id)
        promo = self.affiliates.repo.get_promo_code(payment.promo_code_id) if payment.promo_code_id else None

        payment.razorpay_payment_id = payload.razorpay_payment_id
        payment.razorpay_signature = payload.razorpay_signature
        self.activate_subscription(user, plan, payment.billing_cycle, payment=payment, promo=promo)
        return {"success": True, "message": f"{plan.name} plan activated"}
