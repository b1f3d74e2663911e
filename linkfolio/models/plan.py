from sqlalchemy import Column, Integer, String, Boolean, Numeric, DateTime, Text
from sqlalchemy.sql import func
from linkfolio.db.base import Base
from linkfolio.models.user import new_id


class PricingPlan(Base):
    __tablename__ = "pricing_plans"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    monthly_price = Column(Numeric(10, 2), nullable=False, default=0)
    yearly_price = Column(Numeric(10, 2), nullable=False, default=0)

    # Limits
    max_links = Column(Integer, nullable=False, default=5)
    max_pages = Column(Integer, nullable=False, default=1)
    max_team_members = Column(Integer, nullable=False, default=1)
    max_blocks = Column(Integer, nullable=False, default=10)
    max_socials = Column(Integer, nullable=False, default=3)

    # Feature flags
    qr_code_enabled = Column(Boolean, nullable=False, default=False)
    analytics_enabled = Column(Boolean, nullable=False, default=False)
    custom_templates_enabled = Column(Boolean, nullable=False, default=False)
    menu_builder_enabled = Column(Boolean, nullable=False, default=False)

    # Account type granted on activation: individual, business
    account_type = Column(String(20), nullable=False, default="individual")
    is_active = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
