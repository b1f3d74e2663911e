from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from linkfolio.models.plan import PricingPlan


class PlanRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_active(self) -> List[PricingPlan]:
        return (
            self.db.query(PricingPlan)
            .filter(PricingPlan.is_active.is_(True))
            .order_by(PricingPlan.sort_order.asc())
            .all()
        )

    def list_all(self) -> List[PricingPlan]:
        return self.db.query(PricingPlan).order_by(PricingPlan.sort_order.asc()).all()

    def get_by_id(self, plan_id: str) -> Optional[PricingPlan]:
        return self.db.query(PricingPlan).filter(PricingPlan.id == plan_id).first()

    def count(self) -> int:
        return self.db.query(func.count(PricingPlan.id)).scalar() or 0

    def create(self, plan: PricingPlan) -> PricingPlan:
        self.db.add(plan)
        self.db.commit()
        self.db.refresh(plan)
        return plan

    def update(self, plan: PricingPlan) -> PricingPlan:
        self.db.commit()
        self.db.refresh(plan)
        return plan

    def delete(self, plan: PricingPlan) -> None:
        try:
            self.db.delete(plan)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
