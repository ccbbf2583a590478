"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from boxoffice.api.v1.router import router as v1_router
from boxoffice.config import get_settings
from boxoffice.database import close_db, init_models
from boxoffice.exceptions import (
    AlreadyCheckedIn,
    AmountTooSmall,
    BookingNotFound,
    CheckoutError,
    EmailDeliveryFailed,
    EventHasBookings,
    EventNotFound,
    GatewayUnavailable,
    InsufficientInventory,
    InvalidSignature,
    OrderCreationFailed,
    PaymentCancelled,
    PaymentFailed,
    PaymentInProgress,
    PaymentMismatch,
    PaymentNotCompleted,
    PaymentVerificationFailed,
    ValidationError,
)
from boxoffice.redis_client import close_redis, get_redis, redis_available
from boxoffice.schemas.common import ErrorResponse, HealthResponse


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


settings = get_settings()

ERROR_STATUS: dict[type[CheckoutError], int] = {
    ValidationError: status.HTTP_422_UNPROCESSABLE_CONTENT,
    AmountTooSmall: status.HTTP_400_BAD_REQUEST,
    InvalidSignature: status.HTTP_400_BAD_REQUEST,
    PaymentCancelled: status.HTTP_400_BAD_REQUEST,
    PaymentFailed: status.HTTP_402_PAYMENT_REQUIRED,
    PaymentMismatch: status.HTTP_402_PAYMENT_REQUIRED,
    EventNotFound: status.HTTP_404_NOT_FOUND,
    BookingNotFound: status.HTTP_404_NOT_FOUND,
    InsufficientInventory: status.HTTP_409_CONFLICT,
    EventHasBookings: status.HTTP_409_CONFLICT,
    AlreadyCheckedIn: status.HTTP_409_CONFLICT,
    PaymentNotCompleted: status.HTTP_409_CONFLICT,
    PaymentInProgress: status.HTTP_409_CONFLICT,
    OrderCreationFailed: status.HTTP_502_BAD_GATEWAY,
    PaymentVerificationFailed: status.HTTP_502_BAD_GATEWAY,
    EmailDeliveryFailed: status.HTTP_502_BAD_GATEWAY,
    GatewayUnavailable: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def error_status(exc: CheckoutError) -> int:
    """HTTP status for a checkout error."""
    for error_cls in type(exc).__mro__:
        if error_cls in ERROR_STATUS:
            return ERROR_STATUS[error_cls]
    return status.HTTP_400_BAD_REQUEST


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info("Starting Boxoffice API...")

    await init_models()
    logger.info("Database tables ready")

    # Initialize Redis connection
    await get_redis()
    logger.info("Redis connection established")

    yield

    # Shutdown
    logger.info("Shutting down Boxoffice API...")

    # Close Redis connection
    await close_redis()
    logger.info("Redis connection closed")

    await close_db()


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="""
## Boxoffice API

Event discovery, seat selection and paid checkout through a hosted payment
gateway, with venue check-in.

### Checkout Workflow
1. Browse events and the seat layout
2. Create a payment order for the selected seats
3. Pay in the hosted checkout
4. Verify the payment callback signature
5. Create the booking (verified again server-side)
6. Show the ticket QR code at the venue for check-in

### Authentication
Buyer endpoints require the `X-User-ID` header. Check-in endpoints record
`X-Operator-ID` when present.
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include API routers
    app.include_router(v1_router, prefix="/api")

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Report service health; degraded when the payment lock store is down."""
        redis_ok = await redis_available()
        return HealthResponse(
            status="healthy" if redis_ok else "degraded",
            version=settings.APP_VERSION,
            redis=redis_ok,
        )

    @app.exception_handler(CheckoutError)
    async def checkout_error_handler(request: Request, exc: CheckoutError):
        """Render checkout errors as ``{error, detail, field_errors?}``."""
        status_code = error_status(exc)
        if status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc}")
        else:
            logger.info(f"{request.method} {request.url.path} rejected: {exc}")

        body = ErrorResponse(
            error=exc.code,
            detail=exc.message,
            field_errors=exc.field_errors if isinstance(exc, ValidationError) else None,
        )
        return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        body = ErrorResponse(
            error="INTERNAL_ERROR",
            detail=str(exc) if settings.DEBUG else "Internal Server Error",
        )
        return JSONResponse(status_code=500, content=body.model_dump(exclude_none=True))

    return app


# Create application instance
app = create_app()


def run():
    """Run the application with uvicorn."""
    uvicorn.run(
        "boxoffice.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    run()
