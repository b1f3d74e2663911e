from typing import Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database (PostgreSQL)
    DATABASE_URL: str

    # JWT
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRATION_HOURS: int = 24 * 30
    ADMIN_JWT_EXPIRATION_HOURS: int = 12

    # App Configuration
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Linkfolio Backend"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Cache / Redis
    REDIS_URL: Optional[str] = None
    REDIS_PASSWORD: Optional[str] = None
    CACHE_TTL_SECONDS: int = 300
    # "memory" keeps usage snapshots per process; "redis" shares them across instances
    USAGE_CACHE_BACKEND: str = "memory"

    @model_validator(mode='after')
    def assemble_redis_url(self) -> 'Settings':
        if self.REDIS_PASSWORD and self.REDIS_URL:
            if "@" in self.REDIS_URL:
                return self

            import urllib.parse
            if "redis://" in self.REDIS_URL:
                encoded_pwd = urllib.parse.quote_plus(self.REDIS_PASSWORD)
                self.REDIS_URL = self.REDIS_URL.replace("redis://", f"redis://:{encoded_pwd}@", 1)
        return self

    # Razorpay Integration
    RAZORPAY_API_BASE: str = "https://api.razorpay.com/v1"
    RAZORPAY_KEY_ID: Optional[str] = None
    RAZORPAY_KEY_SECRET: Optional[str] = None
    PAYMENT_CURRENCY: str = "INR"

    # Email / SMTP Configuration
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 465
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_FROM_EMAIL: Optional[str] = None
    SMTP_FROM_NAME: str = "Linkfolio"
    FRONTEND_URL: str = "http://localhost:5173"

    # Teams
    INVITE_EXPIRATION_DAYS: int = 7

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8080",
    ]

    def get_cors_origins(self) -> list[str]:
        """Allowed CORS origins, FRONTEND_URL included."""
        origins = self.CORS_ORIGINS.copy()
        if self.FRONTEND_URL and self.FRONTEND_URL not in origins:
            origins.append(self.FRONTEND_URL)
        return origins

    @property
    def payment_gateway_configured(self) -> bool:
        return bool(self.RAZORPAY_KEY_ID and self.RAZORPAY_KEY_SECRET)

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
