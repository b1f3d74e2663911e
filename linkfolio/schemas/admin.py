from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from typing import List, Optional


class AdminCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    name: Optional[str] = Field(None, max_length=100)


class AdminLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class AdminResponse(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AdminToken(BaseModel):
    message: str
    access_token: str
    token_type: str
    admin: AdminResponse


class AdminStats(BaseModel):
    total_users: int
    total_revenue: float
    active_subscriptions: int
    total_plans: int
    total_payments: int
    successful_payments: int


class AdminUserSubscription(BaseModel):
    status: str
    billing_cycle: str
    plan_name: Optional[str] = None


class AdminUserItem(BaseModel):
    id: str
    username: str
    email: str
    display_name: Optional[str] = None
    account_type: str
    onboarding_completed: bool
    template: Optional[str] = None
    is_disabled: bool
    subscription: Optional[AdminUserSubscription] = None


class AdminUserList(BaseModel):
    users: List[AdminUserItem]
    total: int
    page: int
    limit: int


class AdminPaymentItem(BaseModel):
    id: str
    amount: float
    currency: str
    status: str
    billing_cycle: str
    razorpay_order_id: Optional[str] = None
    razorpay_payment_id: Optional[str] = None
    created_at: Optional[datetime] = None
    user_email: Optional[str] = None
    username: Optional[str] = None
    plan_name: Optional[str] = None


class AdminPaymentList(BaseModel):
    payments: List[AdminPaymentItem]
    total: int
    page: int
    limit: int


class ToggleStatusResponse(BaseModel):
    message: str
    is_disabled: bool
