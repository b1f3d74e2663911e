import hashlib
import hmac
import logging
import secrets
import string
from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from linkfolio.core.config import settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
)

ADMIN_SCOPE = "admin"
USER_SCOPE = "user"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash."""
    return pwd_context.verify(plain_password[:72], hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password (bcrypt only looks at the first 72 bytes)."""
    return pwd_context.hash(password[:72])


def generate_token(length: int = 32) -> str:
    alphabet = string.ascii_letters + string.digits
    return ''.join(secrets.choice(alphabet) for _ in range(length))


def create_access_token(
    data: dict,
    expires_delta: Optional[timedelta] = None,
    scope: str = USER_SCOPE,
) -> str:
    """Create a JWT access token."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(hours=settings.JWT_EXPIRATION_HOURS)

    to_encode.update({"exp": expire, "scope": scope})
    return jwt.encode(
        to_encode,
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str) -> Optional[dict]:
    """Decode and verify a JWT token."""
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"verify_signature": True, "verify_exp": True, "verify_sub": False},
        )
    except JWTError as e:
        logger.info(f"Rejected access token: {e}")
        return None


def compute_payment_signature(order_id: str, payment_id: str, key_secret: str) -> str:
    """HMAC-SHA256 hex digest of "order_id|payment_id", as Razorpay signs checkouts."""
    message = f"{order_id}|{payment_id}".encode("utf-8")
    return hmac.new(key_secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def verify_payment_signature(order_id: str, payment_id: str, signature: str, key_secret: str) -> bool:
    expected = compute_payment_signature(order_id, payment_id, key_secret)
    return hmac.compare_digest(expected, signature or "")
