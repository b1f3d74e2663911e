from fastapi import FastAPI, status
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from linkfolio.core.cache import get_client
from linkfolio.core.clock import utcnow
from linkfolio.core.config import settings
from linkfolio.core.logging import configure_logging
from linkfolio.core.errors import register_exception_handlers
from linkfolio.api.v1.routes import router as api_v1_router
from linkfolio.db.base import init_db
from linkfolio.db.session import SessionLocal
import logging

import redis

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Link-in-bio profiles, pages, menus and team business cards with plan-metered usage",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

register_exception_handlers(app)


@app.on_event("startup")
async def startup_event():
    """Initialize database on startup."""
    logger.info("Initializing database...")
    try:
        init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    max_age=3600,
)

app.add_middleware(GZipMiddleware, minimum_size=1000)

app.include_router(api_v1_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    return {
        "message": "Linkfolio Backend API",
        "version": "1.0.0",
        "docs": "/docs",
        "environment": settings.ENVIRONMENT
    }


def _redis_status() -> str:
    client = get_client()
    if client is None:
        return "not_configured"
    try:
        client.ping()
        return "connected"
    except redis.exceptions.AuthenticationError:
        logger.warning("Redis health check: authentication required (check REDIS_URL)")
        return "auth_required"
    except redis.exceptions.RedisError as e:
        logger.warning(f"Redis health check failed: {str(e)}")
        return "disconnected"


@app.get("/health")
def health_check():
    """Database, Redis and integration status; 503 when the database is unreachable."""
    health_status = {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "timestamp": utcnow().isoformat(),
        "database": "unknown",
        "redis": _redis_status(),
        "usage_cache": settings.USAGE_CACHE_BACKEND,
        "payments": "configured" if settings.payment_gateway_configured else "not_configured",
    }

    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        health_status["database"] = "connected"
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        health_status["database"] = "disconnected"
        health_status["status"] = "unhealthy"
    finally:
        db.close()

    status_code = status.HTTP_200_OK if health_status["status"] == "healthy" else status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(content=health_status, status_code=status_code)
