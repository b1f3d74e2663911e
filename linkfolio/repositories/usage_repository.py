from typing import Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from linkfolio.models.link import Link
from linkfolio.models.page import Page, Block
from linkfolio.models.plan import PricingPlan
from linkfolio.models.social import Social, MenuSocial
from linkfolio.models.subscription import UserSubscription, STATUS_ACTIVE
from linkfolio.models.team import TeamMember
from linkfolio.models.user import User


class UsageRepository:
    """Read-only counting queries behind the usage snapshot."""

    def __init__(self, db: Session):
        self.db = db

    def get_active_plan(self, user_id: str) -> Optional[PricingPlan]:
        row = (
            self.db.query(PricingPlan)
            .join(UserSubscription, UserSubscription.plan_id == PricingPlan.id)
            .filter(UserSubscription.user_id == user_id, UserSubscription.status == STATUS_ACTIVE)
            .order_by(UserSubscription.created_at.desc())
            .first()
        )
        return row

    def _count(self, model, user_id: str) -> int:
        return self.db.query(func.count(model.id)).filter(model.user_id == user_id).scalar() or 0

    def count_links(self, user_id: str) -> int:
        return self._count(Link, user_id)

    def count_pages(self, user_id: str) -> int:
        return self._count(Page, user_id)

    def count_blocks(self, user_id: str) -> int:
        return self._count(Block, user_id)

    def count_socials(self, user_id: str) -> Tuple[int, int]:
        """Returns (profile socials, menu socials)."""
        return self._count(Social, user_id), self._count(MenuSocial, user_id)

    def get_team_id(self, user_id: str) -> Optional[str]:
        return self.db.query(User.team_id).filter(User.id == user_id).scalar()

    def count_team_members(self, team_id: str) -> int:
        return (
            self.db.query(func.count(TeamMember.id))
            .filter(TeamMember.team_id == team_id)
            .scalar()
            or 0
        )
