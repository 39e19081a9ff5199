"""FastAPI application initialization and configuration."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from .core.config import settings
from .core.database import close_db, init_db
from .core.exceptions import (
    ProblemDetailsException,
    generic_exception_handler,
    problem_details_handler,
    request_validation_handler,
)
from .core.middleware import setup_middleware
from .core.observability import (
    SERVICE_NAME,
    instrument_fastapi,
    instrument_sqlalchemy,
    setup_metrics,
    setup_structured_logging,
    setup_tracing,
)
from .routers import (
    accommodation,
    admin,
    booking,
    cart,
    chat,
    destination,
    event,
    health,
    itinerary,
    metrics,
    notification,
    payment,
    profile,
    review,
    wishlist,
)
from .services.mailer import mail_dispatcher
from .workers.manager import worker_manager

# Configure structured logging
setup_structured_logging()

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger(__name__)

API_ROUTERS = (
    health.router,
    destination.router,
    accommodation.router,
    event.router,
    booking.router,
    payment.router,
    wishlist.router,
    review.router,
    itinerary.router,
    cart.router,
    notification.router,
    profile.router,
    admin.router,
    chat.router,
    metrics.router,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Start observability, the database and workers; drain mail on shutdown."""
    logger.info("Starting DiscoverZim API")
    logger.info(f"Environment: {settings.environment}")

    try:
        setup_tracing(SERVICE_NAME)
        setup_metrics(SERVICE_NAME)
        instrument_sqlalchemy()

        await init_db()
        logger.info("Database initialized successfully")

        await worker_manager.start_all()
    except Exception as e:
        logger.error(f"Failed to initialize application: {e}")
        raise

    if not settings.mail_enabled:
        logger.warning("SMTP relay not configured; outgoing mail will only be logged")

    yield

    logger.info("Shutting down DiscoverZim API")

    try:
        await worker_manager.stop_all()
        await mail_dispatcher.drain()
        await close_db()
    except Exception as e:
        logger.error(f"Error during application cleanup: {e}")

    logger.info("Application shutdown complete")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ProblemDetailsException, problem_details_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, generic_exception_handler)


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    app = FastAPI(
        title="DiscoverZim API",
        description="RPC-over-HTTP API for Zimbabwe travel: destinations, events, accommodation bookings, payments by proof and a travel assistant",
        version="1.0.0",
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "traceparent", "tracestate"],
    )

    setup_middleware(app, enable_logging=True)
    instrument_fastapi(app)
    register_exception_handlers(app)

    @app.get(
        "/health",
        status_code=status.HTTP_200_OK,
        tags=["health"],
        summary="Liveness check",
        response_model=dict,
    )
    async def health_check():
        return {
            "status": "healthy",
            "service": SERVICE_NAME,
            "version": "1.0.0",
            "environment": settings.environment,
            "workers": worker_manager.get_worker_status(),
        }

    for router in API_ROUTERS:
        app.include_router(router)

    logger.info("FastAPI application created and configured")

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "discoverzim.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
        access_log=True,
    )
