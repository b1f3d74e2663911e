from sqlalchemy import Column, Integer, String, Boolean, Numeric, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from linkfolio.db.base import Base
from linkfolio.models.user import new_id

REFERRAL_PENDING = "pending"
REFERRAL_CONVERTED = "converted"
REFERRAL_PAID = "paid"


class Affiliate(Base):
    __tablename__ = "affiliates"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)
    referral_code = Column(String(64), unique=True, index=True, nullable=False)
    commission_rate = Column(Numeric(5, 2), nullable=False, default=10)  # percent
    is_active = Column(Boolean, nullable=False, default=True)
    total_earnings = Column(Numeric(10, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class AffiliateReferral(Base):
    __tablename__ = "affiliate_referrals"

    id = Column(String(36), primary_key=True, default=new_id)
    affiliate_id = Column(String(36), ForeignKey("affiliates.id", ondelete="CASCADE"), nullable=False, index=True)
    referred_user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    payment_id = Column(String(36), ForeignKey("payments.id", ondelete="SET NULL"), nullable=True)
    commission_amount = Column(Numeric(10, 2), nullable=False, default=0)
    status = Column(String(20), nullable=False, default=REFERRAL_PENDING)  # pending, converted, paid
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    paid_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint("affiliate_id", "referred_user_id", name="uq_affiliate_referral"),
    )


class PromoCode(Base):
    __tablename__ = "promo_codes"

    id = Column(String(36), primary_key=True, default=new_id)
    code = Column(String(50), unique=True, index=True, nullable=False)
    discount_percent = Column(Numeric(5, 2), nullable=False)
    max_uses = Column(Integer, nullable=True)  # None or 0 = unlimited
    current_uses = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
