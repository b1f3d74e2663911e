import logging
import secrets
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError

from linkfolio.core.clock import as_aware, utcnow
from linkfolio.models.affiliate import (
    Affiliate,
    AffiliateReferral,
    PromoCode,
    REFERRAL_CONVERTED,
    REFERRAL_PAID,
    REFERRAL_PENDING,
)
from linkfolio.repositories.affiliate_repository import AffiliateRepository
from linkfolio.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def generate_referral_code(username: str) -> str:
    return f"REF-{username.upper()}-{secrets.token_hex(3).upper()}"


def compute_commission(amount, commission_rate) -> Decimal:
    """``amount * rate / 100`` rounded to cents."""
    value = Decimal(str(amount)) * Decimal(str(commission_rate)) / Decimal(100)
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def promo_code_rejection(promo: Optional[PromoCode], now: Optional[datetime] = None) -> Optional[str]:
    """Reason a promo code can't be used right now, or None when it can."""
    if promo is None or not promo.is_active:
        return "Invalid promo code"
    if promo.max_uses and (promo.current_uses or 0) >= promo.max_uses:
        return "Promo code usage limit reached"
    now = now or utcnow()
    if promo.expires_at is not None and as_aware(promo.expires_at) < now:
        return "Promo code has expired"
    return None


class AffiliateService:
    def __init__(self, repo: AffiliateRepository, users: UserRepository):
        self.repo = repo
        self.users = users

    @staticmethod
    def _serialize(affiliate: Affiliate, username=None, email=None, display_name=None) -> dict:
        return {
            "id": affiliate.id,
            "user_id": affiliate.user_id,
            "referral_code": affiliate.referral_code,
            "commission_rate": float(affiliate.commission_rate or 0),
            "is_active": affiliate.is_active,
            "total_earnings": float(affiliate.total_earnings or 0),
            "created_at": affiliate.created_at,
            "username": username,
            "email": email,
            "display_name": display_name,
        }

    def _get(self, affiliate_id: str) -> Affiliate:
        affiliate = self.repo.get_by_id(affiliate_id)
        if not affiliate:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Affiliate not found")
        return affiliate

    # Admin
    def list(self) -> List[dict]:
        return [self._serialize(*row) for row in self.repo.list_with_users()]

    def create(self, user_id: str, commission_rate: float) -> dict:
        user = self.users.get_by_id(user_id)
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        if self.repo.get_by_user(user_id):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User is already an affiliate")

        affiliate = Affiliate(
            user_id=user_id,
            referral_code=generate_referral_code(user.username),
            commission_rate=Decimal(str(commission_rate)),
            is_active=True,
            total_earnings=Decimal("0"),
        )
        created = self.repo.add(affiliate)
        logger.info(f"Affiliate {created.id} created for user {user_id}")
        return self._serialize(created, user.username, user.email, user.display_name)

    def update(self, affiliate_id: str, payload) -> dict:
        affiliate = self._get(affiliate_id)
        if payload.commission_rate is not None:
            affiliate.commission_rate = Decimal(str(payload.commission_rate))
        if payload.is_active is not None:
            affiliate.is_active = payload.is_active
        return self._serialize(self.repo.save(affiliate))

    def delete(self, affiliate_id: str) -> None:
        self.repo.delete(self._get(affiliate_id))

    def list_referrals(self, affiliate_id: str) -> List[dict]:
        self._get(affiliate_id)
        return [
            {
                "id": referral.id,
                "referred_user_id": referral.referred_user_id,
                "commission_amount": float(referral.commission_amount or 0),
                "status": referral.status,
                "created_at": referral.created_at,
                "paid_at": referral.paid_at,
                "username": username,
                "email": email,
            }
            for referral, username, email in self.repo.list_referrals(affiliate_id)
        ]

    def payout(self, affiliate_id: str) -> dict:
        self._get(affiliate_id)
        converted = self.repo.referrals_with_status(affiliate_id, REFERRAL_CONVERTED)
        now = utcnow()
        total = Decimal("0")
        for referral in converted:
            referral.status = REFERRAL_PAID
            referral.paid_at = now
            total += Decimal(str(referral.commission_amount or 0))
        try:
            self.repo.db.commit()
        except Exception:
            self.repo.db.rollback()
            raise
        logger.info(f"Paid out {len(converted)} referrals ({total}) for affiliate {affiliate_id}")
        return {
            "message": "Payout processed",
            "referrals_paid": len(converted),
            "amount": float(total),
        }

    # Referral tracking
    def track_referral(self, referral_code: Optional[str], referred_user_id: str) -> Optional[AffiliateReferral]:
        """Record a pending referral; unknown codes, self-referrals and repeats are ignored."""
        if not referral_code:
            return None
        affiliate = self.repo.get_by_code(referral_code.strip().upper())
        if affiliate is None or not affiliate.is_active:
            logger.info(f"Ignoring unknown or inactive referral code {referral_code}")
            return None
        if affiliate.user_id == referred_user_id:
            logger.info(f"Ignoring self-referral by user {referred_user_id}")
            return None
        if self.repo.get_referral(affiliate.id, referred_user_id):
            return None

        referral = AffiliateReferral(
            affiliate_id=affiliate.id,
            referred_user_id=referred_user_id,
            status=REFERRAL_PENDING,
            commission_amount=Decimal("0"),
        )
        try:
            return self.repo.add(referral)
        except IntegrityError:
            self.repo.db.rollback()
            return None

    def convert_referral(self, referred_user_id: str, payment) -> Optional[AffiliateReferral]:
        """Stage the conversion of a pending referral; the caller commits."""
        referral = self.repo.get_pending_referral_for_user(referred_user_id)
        if referral is None:
            return None
        affiliate = self.repo.get_by_id(referral.affiliate_id)
        if affiliate is None or not affiliate.is_active:
            return None

        commission = compute_commission(payment.amount, affiliate.commission_rate)
        referral.status = REFERRAL_CONVERTED
        referral.payment_id = payment.id
        referral.commission_amount = commission
        affiliate.total_earnings = Decimal(str(affiliate.total_earnings or 0)) + commission
        return referral

    # Dashboard
    def dashboard(self, user_id: str) -> dict:
        affiliate = self.repo.get_by_user(user_id)
        if not affiliate:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="You are not an affiliate")
        referrals = self.list_referrals(affiliate.id)
        counts = {REFERRAL_PENDING: 0, REFERRAL_CONVERTED: 0, REFERRAL_PAID: 0}
        for referral in referrals:
            counts[referral["status"]] = counts.get(referral["status"], 0) + 1
        return {
            "affiliate": self._serialize(affiliate),
            "referrals": referrals,
            "stats": {
                "total_referrals": len(referrals),
                "pending_referrals": counts[REFERRAL_PENDING],
                "converted_referrals": counts[REFERRAL_CONVERTED],
                "paid_referrals": counts[REFERRAL_PAID],
                "total_earnings": float(affiliate.total_earnings or 0),
            },
        }


class PromoCodeService:
    def __init__(self, repo: AffiliateRepository):
        self.repo = repo

    def _get(self, promo_id: str) -> PromoCode:
        promo = self.repo.get_promo_code(promo_id)
        if not promo:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Promo code not found")
        return promo

    def list(self) -> List[PromoCode]:
        return self.repo.list_promo_codes()

    def create(self, payload) -> PromoCode:
        code = payload.code.strip().upper()
        if self.repo.get_promo_by_code(code):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Promo code already exists")
        promo = PromoCode(
            code=code,
            discount_percent=Decimal(str(payload.discount_percent)),
            max_uses=payload.max_uses,
            current_uses=0,
            is_active=True,
            expires_at=payload.expires_at,
        )
        return self.repo.add(promo)

    def update(self, promo_id: str, payload) -> PromoCode:
        promo = self._get(promo_id)
        data = payload.model_dump(exclude_unset=True)
        if data.get("discount_percent") is not None:
            data["discount_percent"] = Decimal(str(data["discount_percent"]))
        for field, value in data.items():
            setattr(promo, field, value)
        return self.repo.save(promo)

    def delete(self, promo_id: str) -> None:
        self.repo.delete(self._get(promo_id))

    def get_usable(self, code: str) -> PromoCode:
        promo = self.repo.get_promo_by_code(code)
        reason = promo_code_rejection(promo)
        if reason:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=reason)
        return promo

    def validate(self, code: str) -> dict:
        promo = self.get_usable(code)
        return {
            "valid": True,
            "discount_percent": float(promo.discount_percent),
            "code": promo.code,
        }
