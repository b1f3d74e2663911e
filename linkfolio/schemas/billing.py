from pydantic import BaseModel, Field
from datetime import datetime
from typing import Literal, Optional

BillingCycle = Literal["monthly", "yearly"]


class PlanBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    monthly_price: float = Field(0, ge=0)
    yearly_price: float = Field(0, ge=0)
    max_links: int = Field(5, ge=0)
    max_pages: int = Field(1, ge=0)
    max_team_members: int = Field(1, ge=0)
    max_blocks: int = Field(10, ge=0)
    max_socials: int = Field(3, ge=0)
    qr_code_enabled: bool = False
    analytics_enabled: bool = False
    custom_templates_enabled: bool = False
    menu_builder_enabled: bool = False
    account_type: Literal["individual", "business"] = "individual"
    is_active: bool = True
    sort_order: int = 0


class PlanCreate(PlanBase):
    pass


class PlanUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    monthly_price: Optional[float] = Field(None, ge=0)
    yearly_price: Optional[float] = Field(None, ge=0)
    max_links: Optional[int] = Field(None, ge=0)
    max_pages: Optional[int] = Field(None, ge=0)
    max_team_members: Optional[int] = Field(None, ge=0)
    max_blocks: Optional[int] = Field(None, ge=0)
    max_socials: Optional[int] = Field(None, ge=0)
    qr_code_enabled: Optional[bool] = None
    analytics_enabled: Optional[bool] = None
    custom_templates_enabled: Optional[bool] = None
    menu_builder_enabled: Optional[bool] = None
    account_type: Optional[Literal["individual", "business"]] = None
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None


class PlanResponse(PlanBase):
    id: str

    class Config:
        from_attributes = True


class CreateOrderRequest(BaseModel):
    plan_id: str
    billing_cycle: BillingCycle = "monthly"
    promo_code: Optional[str] = None


class CreateOrderResponse(BaseModel):
    free: bool = False
    message: Optional[str] = None
    order_id: Optional[str] = None
    amount: Optional[int] = None  # smallest currency unit (paise)
    currency: Optional[str] = None
    key_id: Optional[str] = None
    plan_name: Optional[str] = None


class VerifyPaymentRequest(BaseModel):
    razorpay_order_id: str
    razorpay_payment_id: str
    razorpay_signature: str
    plan_id: str
    billing_cycle: BillingCycle = "monthly"


class VerifyPaymentResponse(BaseModel):
    success: bool
    message: str


class SubscriptionResponse(BaseModel):
    id: str
    status: str
    billing_cycle: str
    current_period_end: Optional[datetime] = None
    plan_id: str
    plan_name: Optional[str] = None
    plan_monthly_price: Optional[float] = None
    plan_yearly_price: Optional[float] = None


class PaymentHistoryItem(BaseModel):
    id: str
    amount: float
    currency: str
    status: str
    billing_cycle: str
    plan_name: Optional[str] = None
    razorpay_order_id: Optional[str] = None
    created_at: Optional[datetime] = None
