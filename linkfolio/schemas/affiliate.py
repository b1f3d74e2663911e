from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import List, Optional


class AffiliateCreate(BaseModel):
    user_id: str
    commission_rate: float = Field(..., ge=0, le=100)


class AffiliateUpdate(BaseModel):
    commission_rate: Optional[float] = Field(None, ge=0, le=100)
    is_active: Optional[bool] = None


class AffiliateResponse(BaseModel):
    id: str
    user_id: str
    referral_code: str
    commission_rate: float
    is_active: bool
    total_earnings: float
    created_at: Optional[datetime] = None
    username: Optional[str] = None
    email: Optional[str] = None
    display_name: Optional[str] = None

    class Config:
        from_attributes = True


class ReferralResponse(BaseModel):
    id: str
    referred_user_id: str
    commission_amount: float
    status: str
    created_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    username: Optional[str] = None
    email: Optional[str] = None


class AffiliateStats(BaseModel):
    total_referrals: int
    pending_referrals: int
    converted_referrals: int
    paid_referrals: int
    total_earnings: float


class AffiliateDashboard(BaseModel):
    affiliate: AffiliateResponse
    referrals: List[ReferralResponse]
    stats: AffiliateStats


class PayoutResponse(BaseModel):
    message: str
    referrals_paid: int
    amount: float


class PromoCodeCreate(BaseModel):
    code: str = Field(..., min_length=2, max_length=50)
    discount_percent: float = Field(..., gt=0, le=100)
    max_uses: Optional[int] = Field(None, ge=0)
    expires_at: Optional[datetime] = None

    @field_validator("code")
    @classmethod
    def normalize_code(cls, value: str) -> str:
        return value.strip().upper()


class PromoCodeUpdate(BaseModel):
    discount_percent: Optional[float] = Field(None, gt=0, le=100)
    max_uses: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None
    expires_at: Optional[datetime] = None


class PromoCodeResponse(BaseModel):
    id: str
    code: str
    discount_percent: float
    max_uses: Optional[int] = None
    current_uses: int
    is_active: bool
    expires_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PromoCodeValidate(BaseModel):
    code: str = Field(..., min_length=1)


class PromoCodeValidation(BaseModel):
    valid: bool
    discount_percent: float
    code: str
