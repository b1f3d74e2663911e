from typing import List, Optional

from sqlalchemy.orm import Session

from linkfolio.models.affiliate import Affiliate, AffiliateReferral, PromoCode, REFERRAL_PENDING
from linkfolio.models.user import User


class AffiliateRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_with_users(self) -> List[tuple]:
        return (
            self.db.query(Affiliate, User.username, User.email, User.display_name)
            .outerjoin(User, Affiliate.user_id == User.id)
            .order_by(Affiliate.created_at.desc())
            .all()
        )

    def get_by_id(self, affiliate_id: str) -> Optional[Affiliate]:
        return self.db.query(Affiliate).filter(Affiliate.id == affiliate_id).first()

    def get_by_user(self, user_id: str) -> Optional[Affiliate]:
        return self.db.query(Affiliate).filter(Affiliate.user_id == user_id).first()

    def get_by_code(self, referral_code: str) -> Optional[Affiliate]:
        return self.db.query(Affiliate).filter(Affiliate.referral_code == referral_code).first()

    def list_referrals(self, affiliate_id: str) -> List[tuple]:
        return (
            self.db.query(AffiliateReferral, User.username, User.email)
            .outerjoin(User, AffiliateReferral.referred_user_id == User.id)
            .filter(AffiliateReferral.affiliate_id == affiliate_id)
            .order_by(AffiliateReferral.created_at.desc())
            .all()
        )

    def get_referral(self, affiliate_id: str, referred_user_id: str) -> Optional[AffiliateReferral]:
        return (
            self.db.query(AffiliateReferral)
            .filter(
                AffiliateReferral.affiliate_id == affiliate_id,
                AffiliateReferral.referred_user_id == referred_user_id,
            )
            .first()
        )

    def get_pending_referral_for_user(self, referred_user_id: str) -> Optional[AffiliateReferral]:
        return (
            self.db.query(AffiliateReferral)
            .filter(
                AffiliateReferral.referred_user_id == referred_user_id,
                AffiliateReferral.status == REFERRAL_PENDING,
            )
            .first()
        )

    def referrals_with_status(self, affiliate_id: str, status: str) -> List[AffiliateReferral]:
        return (
            self.db.query(AffiliateReferral)
            .filter(AffiliateReferral.affiliate_id == affiliate_id, AffiliateReferral.status == status)
            .all()
        )

    # Promo codes
    def list_promo_codes(self) -> List[PromoCode]:
        return self.db.query(PromoCode).order_by(PromoCode.created_at.desc()).all()

    def get_promo_code(self, promo_id: str) -> Optional[PromoCode]:
        return self.db.query(PromoCode).filter(PromoCode.id == promo_id).first()

    def get_promo_by_code(self, code: str) -> Optional[PromoCode]:
        return self.db.query(PromoCode).filter(PromoCode.code == code.strip().upper()).first()

    def add(self, item):
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        return item

    def save(self, item):
        self.db.commit()
        self.db.refresh(item)
        return item

    def delete(self, item) -> None:
        self.db.delete(item)
        self.db.commit()
