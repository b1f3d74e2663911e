from typing import List

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError

from linkfolio.models.plan import PricingPlan
from linkfolio.repositories.plan_repository import PlanRepository


class PlanService:
    def __init__(self, repo: PlanRepository):
        self.repo = repo

    def list_public(self) -> List[PricingPlan]:
        return self.repo.list_active()

    def list_all(self) -> List[PricingPlan]:
        return self.repo.list_all()

    def get(self, plan_id: str) -> PricingPlan:
        plan = self.repo.get_by_id(plan_id)
        if not plan:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Plan not found")
        return plan

    def create(self, payload) -> PricingPlan:
        return self.repo.create(PricingPlan(**payload.model_dump()))

    def update(self, plan_id: str, payload) -> PricingPlan:
        plan = self.get(plan_id)
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(plan, field, value)
        return self.repo.update(plan)

    def delete(self, plan_id: str) -> None:
        plan = self.get(plan_id)
        try:
            self.repo.delete(plan)
        except IntegrityError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Plan has subscriptions; deactivate it instead",
            )
