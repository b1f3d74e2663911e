from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from linkfolio.api.v1.dependencies import get_current_admin
from linkfolio.db.session import get_db
from linkfolio.models.admin_user import AdminUser
from linkfolio.repositories.admin_repository import AdminRepository
from linkfolio.repositories.plan_repository import PlanRepository
from linkfolio.schemas.admin import (
    AdminCreate,
    AdminLogin,
    AdminPaymentList,
    AdminResponse,
    AdminStats,
    AdminToken,
    AdminUserList,
    ToggleStatusResponse,
)
from linkfolio.schemas.billing import PlanCreate, PlanResponse, PlanUpdate
from linkfolio.schemas.user import MessageResponse
from linkfolio.services.admin_service import AdminDashboardService, AdminService
from linkfolio.services.plan_service import PlanService

router = APIRouter(tags=["admin"])


@router.get("/exists")
def admin_exists(db: Session = Depends(get_db)):
    return {"exists": AdminService(AdminRepository(db)).exists()}


@router.post("/seed", response_model=AdminResponse, status_code=status.HTTP_201_CREATED)
def seed_admin(payload: AdminCreate, db: Session = Depends(get_db)):
    return AdminService(AdminRepository(db)).seed(payload)


@router.post("/login", response_model=AdminToken)
def admin_login(payload: AdminLogin, db: Session = Depends(get_db)):
    return AdminService(AdminRepository(db)).login(payload.email, payload.password)


@router.get("/me", response_model=AdminResponse)
def admin_me(admin: AdminUser = Depends(get_current_admin)):
    return admin


@router.post("/logout", response_model=MessageResponse)
def admin_logout(admin: AdminUser = Depends(get_current_admin)):
    # Tokens are stateless; the client drops it.
    return {"message": "Logged out"}


@router.get("/stats", response_model=AdminStats)
def admin_stats(admin: AdminUser = Depends(get_current_admin), db: Session = Depends(get_db)):
    return AdminDashboardService(db).stats()


# Plans
@router.get("/plans", response_model=List[PlanResponse])
def list_plans(admin: AdminUser = Depends(get_current_admin), db: Session = Depends(get_db)):
    return PlanService(PlanRepository(db)).list_all()


@router.post("/plans", response_model=PlanResponse, status_code=status.HTTP_201_CREATED)
def create_plan(
    payload: PlanCreate,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return PlanService(PlanRepository(db)).create(payload)


@router.patch("/plans/{plan_id}", response_model=PlanResponse)
def update_plan(
    plan_id: str,
    payload: PlanUpdate,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return PlanService(PlanRepository(db)).update(plan_id, payload)


@router.delete("/plans/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_plan(
    plan_id: str,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    PlanService(PlanRepository(db)).delete(plan_id)


# Users
@router.get("/users", response_model=AdminUserList)
def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    account_type: Optional[str] = Query(None),
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return AdminDashboardService(db).list_users(page, limit, account_type)


@router.patch("/users/{user_id}/toggle-status", response_model=ToggleStatusResponse)
def toggle_user_status(
    user_id: str,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return AdminDashboardService(db).toggle_user_status(user_id)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: str,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    AdminDashboardService(db).delete_user(user_id)


@router.get("/payments", response_model=AdminPaymentList)
def list_payments(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return AdminDashboardService(db).list_payments(page, limit)
