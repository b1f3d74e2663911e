from typing import Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from linkfolio.models.plan import PricingPlan
from linkfolio.models.subscription import UserSubscription, STATUS_ACTIVE


class SubscriptionRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_user_id(self, user_id: str) -> Optional[UserSubscription]:
        return (
            self.db.query(UserSubscription)
            .filter(UserSubscription.user_id == user_id)
            .order_by(UserSubscription.created_at.desc())
            .first()
        )

    def get_latest_with_plan(self, user_id: str) -> Optional[Tuple[UserSubscription, Optional[PricingPlan]]]:
        row = (
            self.db.query(UserSubscription, PricingPlan)
            .outerjoin(PricingPlan, UserSubscription.plan_id == PricingPlan.id)
            .filter(UserSubscription.user_id == user_id)
            .order_by(UserSubscription.created_at.desc())
            .first()
        )
        return (row[0], row[1]) if row else None

    def count_active(self) -> int:
        return (
            self.db.query(func.count(UserSubscription.id))
            .filter(UserSubscription.status == STATUS_ACTIVE)
            .scalar()
            or 0
        )

    def stage(self, subscription: UserSubscription) -> UserSubscription:
        self.db.add(subscription)
        self.db.flush()
        return subscription
