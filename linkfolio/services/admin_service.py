import logging
from datetime import timedelta
from typing import Optional

from fastapi import HTTPException, status

from linkfolio.core.config import settings
from linkfolio.core.security import ADMIN_SCOPE, create_access_token, get_password_hash, verify_password
from linkfolio.models.admin_user import AdminUser
from linkfolio.models.payment import PAYMENT_SUCCESS
from linkfolio.repositories.admin_repository import AdminRepository
from linkfolio.repositories.payment_repository import PaymentRepository
from linkfolio.repositories.plan_repository import PlanRepository
from linkfolio.repositories.subscription_repository import SubscriptionRepository
from linkfolio.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class AdminService:
    def __init__(self, repo: AdminRepository):
        self.repo = repo

    def exists(self) -> bool:
        return self.repo.exists()

    def seed(self, payload) -> AdminUser:
        """Create the first admin. Refused once any admin exists."""
        if self.repo.exists():
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="An admin account already exists")
        admin = self.repo.create(
            AdminUser(
                email=payload.email.strip().lower(),
                hashed_password=get_password_hash(payload.password),
                name=payload.name,
            )
        )
        logger.info(f"Admin {admin.id} seeded")
        return admin

    def login(self, email: str, password: str) -> dict:
        admin = self.repo.get_by_email(email)
        if not admin or not verify_password(password, admin.hashed_password):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password",
                headers={"WWW-Authenticate": "Bearer"},
            )
        access_token = create_access_token(
            {"sub": admin.id},
            expires_delta=timedelta(hours=settings.ADMIN_JWT_EXPIRATION_HOURS),
            scope=ADMIN_SCOPE,
        )
        return {
            "message": "Login successful",
            "access_token": access_token,
            "token_type": "bearer",
            "admin": admin,
        }


class AdminDashboardService:
    """Read side of the back-office plus user moderation."""

    def __init__(self, db):
        self.users = UserRepository(db)
        self.payments = PaymentRepository(db)
        self.plans = PlanRepository(db)
        self.subscriptions = SubscriptionRepository(db)

    def stats(self) -> dict:
        return {
            "total_users": self.users.count(),
            "total_revenue": float(self.payments.total_revenue()),
            "active_subscriptions": self.subscriptions.count_active(),
            "total_plans": self.plans.count(),
            "total_payments": self.payments.count(),
            "successful_payments": self.payments.count(PAYMENT_SUCCESS),
        }

    def list_users(self, page: int, limit: int, account_type: Optional[str] = None) -> dict:
        offset = (page - 1) * limit
        items = []
        for user in self.users.list_paginated(limit, offset, account_type):
            latest = self.subscriptions.get_latest_with_plan(user.id)
            subscription = None
            if latest is not None:
                sub, plan = latest
                subscription = {
                    "status": sub.status,
                    "billing_cycle": sub.billing_cycle,
                    "plan_name": plan.name if plan else None,
                }
            items.append(
                {
                    "id": user.id,
                    "username": user.username,
                    "email": user.email,
                    "display_name": user.display_name,
                    "account_type": user.account_type,
                    "onboarding_completed": user.onboarding_completed,
                    "template": user.template,
                    "is_disabled": user.is_disabled,
                    "subscription": subscription,
                }
            )
        return {"users": items, "total": self.users.count(account_type), "page": page, "limit": limit}

    def _user(self, user_id: str):
        user = self.users.get_by_id(user_id)
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        return user

    def toggle_user_status(self, user_id: str) -> dict:
        user = self._user(user_id)
        user.is_disabled = not user.is_disabled
        self.users.update(user)
        state = "disabled" if user.is_disabled else "enabled"
        logger.info(f"User {user_id} {state} by admin")
        return {"message": f"User {state}", "is_disabled": user.is_disabled}

    def delete_user(self, user_id: str) -> None:
        self.users.delete(self._user(user_id))
        logger.info(f"User {user_id} deleted by admin")

    def list_payments(self, page: int, limit: int) -> dict:
        offset = (page - 1) * limit
        items = [
            {
                "id": payment.id,
                "amount": float(payment.amount),
                "currency": payment.currency,
                "status": payment.status,
                "billing_cycle": payment.billing_cycle,
                "razorpay_order_id": payment.razorpay_order_id,
                "razorpay_payment_id": payment.razorpay_payment_id,
                "created_at": payment.created_at,
                "user_email": email,
                "username": username,
                "plan_name": plan_name,
            }
            for payment, email, username, plan_name in self.payments.list_paginated(limit, offset)
        ]
        return {"payments": items, "total": self.payments.count(), "page": page, "limit": limit}
