from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from linkfolio.models.payment import Payment, PAYMENT_SUCCESS
from linkfolio.models.plan import PricingPlan
from linkfolio.models.user import User


class PaymentRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(self, payment: Payment) -> Payment:
        self.db.add(payment)
        self.db.commit()
        self.db.refresh(payment)
        return payment

    def get_by_order_id(self, order_id: str) -> Optional[Payment]:
        return self.db.query(Payment).filter(Payment.razorpay_order_id == order_id).first()

    def list_by_user(self, user_id: str) -> List[tuple]:
        return (
            self.db.query(Payment, PricingPlan.name)
            .outerjoin(PricingPlan, Payment.plan_id == PricingPlan.id)
            .filter(Payment.user_id == user_id)
            .order_by(Payment.created_at.desc())
            .all()
        )

    def list_paginated(self, limit: int, offset: int) -> List[tuple]:
        return (
            self.db.query(Payment, User.email, User.username, PricingPlan.name)
            .outerjoin(User, Payment.user_id == User.id)
            .outerjoin(PricingPlan, Payment.plan_id == PricingPlan.id)
            .order_by(Payment.created_at.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )

    def count(self, status: Optional[str] = None) -> int:
        query = self.db.query(func.count(Payment.id))
        if status:
            query = query.filter(Payment.status == status)
        return query.scalar() or 0

    def total_revenue(self) -> Decimal:
        total = (
            self.db.query(func.coalesce(func.sum(Payment.amount), 0))
            .filter(Payment.status == PAYMENT_SUCCESS)
            .scalar()
        )
        return Decimal(str(total or 0))
