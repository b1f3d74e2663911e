import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class PlanLimitExceeded(Exception):
    """Raised when the action gate denies a metered create."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class PaymentGatewayError(RuntimeError):
    pass


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(PlanLimitExceeded)
    async def plan_limit_handler(request: Request, exc: PlanLimitExceeded):
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={"detail": exc.message, "limit_reached": True},
        )

    @app.exception_handler(PaymentGatewayError)
    async def payment_gateway_handler(request: Request, exc: PaymentGatewayError):
        logger.error(f"Payment gateway error on {request.url}: {str(exc)}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Failed to create payment order"},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.url}: {str(exc)}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )
