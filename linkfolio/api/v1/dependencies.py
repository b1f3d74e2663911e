from typing import Optional
import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from linkfolio.core.cache import KeyValueCache
from linkfolio.core.security import ADMIN_SCOPE, USER_SCOPE, decode_access_token
from linkfolio.db.session import get_db
from linkfolio.models.admin_user import AdminUser
from linkfolio.models.user import User
from linkfolio.repositories.admin_repository import AdminRepository
from linkfolio.repositories.usage_repository import UsageRepository
from linkfolio.repositories.user_repository import UserRepository
from linkfolio.services.plan_limits import UsageService, get_usage_cache

logger = logging.getLogger(__name__)
security = HTTPBearer(auto_error=False)


def _token_subject(credentials: Optional[HTTPAuthorizationCredentials], scope: str) -> str:
    if credentials is None or not credentials.credentials.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_access_token(credentials.credentials.strip())
    if payload is None or payload.get("scope") != scope or not payload.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return str(payload["sub"])


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    user_id = _token_subject(credentials, USER_SCOPE)
    user = UserRepository(db).get_by_id(user_id)
    if user is None:
        logger.warning(f"Token for unknown user {user_id}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if user.is_disabled:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is disabled")
    return user


def get_current_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> AdminUser:
    admin_id = _token_subject(credentials, ADMIN_SCOPE)
    admin = AdminRepository(db).get_by_id(admin_id)
    if admin is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Admin not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return admin


def get_usage_service(
    db: Session = Depends(get_db),
    cache: KeyValueCache = Depends(get_usage_cache),
) -> UsageService:
    return UsageService(UsageRepository(db), cache)
