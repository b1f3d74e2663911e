import logging
from datetime import timedelta
from typing import List, Optional

from linkfolio.core.clock import utcnow
from linkfolio.models.plan import PricingPlan
from linkfolio.models.subscription import UserSubscription, STATUS_ACTIVE
from linkfolio.repositories.payment_repository import PaymentRepository
from linkfolio.repositories.subscription_repository import SubscriptionRepository

logger = logging.getLogger(__name__)

BILLING_PERIOD_DAYS = {"monthly": 30, "yearly": 365}


class SubscriptionService:
    def __init__(self, repo: SubscriptionRepository):
        self.repo = repo

    def stage_activation(self, user_id: str, plan: PricingPlan, billing_cycle: str) -> UserSubscription:
        """Upsert the user's subscription as active for a fresh period. Does not commit."""
        start = utcnow()
        end = start + timedelta(days=BILLING_PERIOD_DAYS.get(billing_cycle, 30))
        subscription = self.repo.get_by_user_id(user_id)
        if subscription is None:
            subscription = UserSubscription(user_id=user_id)
        subscription.plan_id = plan.id
        subscription.status = STATUS_ACTIVE
        subscription.billing_cycle = billing_cycle
        subscription.current_period_start = start
        subscription.current_period_end = end
        return self.repo.stage(subscription)

    def get_current(self, user_id: str) -> Optional[dict]:
        row = self.repo.get_latest_with_plan(user_id)
        if row is None:
            return None
        subscription, plan = row
        return {
            "id": subscription.id,
            "status": subscription.status,
            "billing_cycle": subscription.billing_cycle,
            "current_period_end": subscription.current_period_end,
            "plan_id": subscription.plan_id,
            "plan_name": plan.name if plan else None,
            "plan_monthly_price": float(plan.monthly_price) if plan else None,
            "plan_yearly_price": float(plan.yearly_price) if plan else None,
        }

    @staticmethod
    def payment_history(payments: PaymentRepository, user_id: str) -> List[dict]:
        return [
            {
                "id": payment.id,
                "amount": float(payment.amount),
                "currency": payment.currency,
                "status": payment.status,
                "billing_cycle": payment.billing_cycle,
                "plan_name": plan_name,
                "razorpay_order_id": payment.razorpay_order_id,
                "created_at": payment.created_at,
            }
            for payment, plan_name in payments.list_by_user(user_id)
        ]
