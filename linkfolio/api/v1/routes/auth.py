from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from linkfolio.api.v1.dependencies import get_current_user, get_usage_service
from linkfolio.db.session import get_db
from linkfolio.models.user import User
from linkfolio.repositories.affiliate_repository import AffiliateRepository
from linkfolio.repositories.user_repository import UserRepository
from linkfolio.schemas.usage import PlanLimitsResponse
from linkfolio.schemas.user import (
    BusinessProfile,
    ChangePasswordRequest,
    LoginRequest,
    MessageResponse,
    ProfileUpdate,
    TokenWithUser,
    UserCreate,
    UserResponse,
)
from linkfolio.services.affiliate_service import AffiliateService
from linkfolio.services.auth_service import AuthService
from linkfolio.services.plan_limits import UsageService

router = APIRouter(tags=["auth"])


def _auth_service(db: Session) -> AuthService:
    users = UserRepository(db)
    return AuthService(users, AffiliateService(AffiliateRepository(db), users))


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(user_data: UserCreate, db: Session = Depends(get_db)):
    return _auth_service(db).register(user_data)


@router.post("/login", response_model=TokenWithUser)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    return _auth_service(db).login(payload.email, payload.password)


@router.get("/me", response_model=UserResponse)
def read_current_user(current_user: User = Depends(get_current_user)):
    return current_user


@router.patch("/profile", response_model=UserResponse)
def update_profile(
    payload: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
    db: Session = Depends(get_db),
):
    return _auth_service(db).update_profile(current_user, payload, usage)


@router.post("/change-password", response_model=MessageResponse)
def change_password(
    payload: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    _auth_service(db).change_password(current_user, payload.current_password, payload.new_password)
    return {"message": "Password updated"}


@router.get("/plan-limits", response_model=PlanLimitsResponse)
def plan_limits(
    current_user: User = Depends(get_current_user),
    usage: UsageService = Depends(get_usage_service),
):
    return usage.get_limits(current_user.id).to_dict()


@router.get("/business-profile", response_model=BusinessProfile)
def get_business_profile(current_user: User = Depends(get_current_user)):
    return current_user


@router.patch("/business-profile", response_model=BusinessProfile)
def update_business_profile(
    payload: BusinessProfile,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return _auth_service(db).update_business_profile(current_user, payload)
