from sqlalchemy import Column, String, DateTime, ForeignKey, Index
from sqlalchemy.sql import func
from linkfolio.db.base import Base
from linkfolio.models.user import new_id

STATUS_ACTIVE = "active"
STATUS_CANCELLED = "cancelled"
STATUS_EXPIRED = "expired"


class UserSubscription(Base):
    __tablename__ = "user_subscriptions"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    plan_id = Column(String(36), ForeignKey("pricing_plans.id", ondelete="RESTRICT"), nullable=False)
    status = Column(String(20), nullable=False, default=STATUS_ACTIVE)  # active, cancelled, expired
    billing_cycle = Column(String(10), nullable=False, default="monthly")  # monthly, yearly
    current_period_start = Column(DateTime(timezone=True), nullable=True)
    current_period_end = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        Index("idx_user_subscriptions_user_status", "user_id", "status"),
    )
