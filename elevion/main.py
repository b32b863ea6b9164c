"""
Elevion - FastAPI Application

Main entry point for the backend API: client previews, subscriptions,
marketplace, advertising, feedback and analytics.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from elevion.config.settings import settings
from elevion.infrastructure.exceptions import (
    ConstraintViolationError,
    ElevionError,
    NotFoundError,
    PaymentServiceError,
    ValidationError,
)

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup
    logger.info(f"Elevion backend starting in {settings.environment} mode...")

    from elevion.infrastructure.db.database import close_db, get_db_manager, init_db

    try:
        await init_db()
        logger.info("Database connection pool initialized")
        if settings.auto_create_tables:
            await get_db_manager().create_tables()
            logger.info("Database tables created")
    except Exception as e:
        logger.warning(f"Database initialization skipped: {e}")

    if settings.seed_sample_data:
        from elevion.infrastructure.db.storage import get_storage
        from elevion.infrastructure.services.sample_data_service import SampleDataBootstrapper

        try:
            summary = await SampleDataBootstrapper(get_storage()).run()
            logger.info(f"Sample data initialized: {summary}")
        except Exception as e:
            logger.error(f"Error initializing sample data: {e}")

    yield

    # Shutdown
    try:
        await close_db()
        logger.info("Database connection pool closed")
    except Exception as e:
        logger.warning(f"Database shutdown error: {e}")

    logger.info("Elevion backend shutting down...")


app = FastAPI(
    title="Elevion",
    description="Web development agency platform API",
    version="1.0.0",
    lifespan=lifespan,
    debug=settings.debug,
)

# CORS configuration from Settings
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Exception Handlers
# ============================================================================

@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    """Handle validation errors."""
    return JSONResponse(
        status_code=400,
        content=exc.to_dict(),
    )


@app.exception_handler(NotFoundError)
async def not_found_error_handler(request: Request, exc: NotFoundError):
    """Handle not found errors."""
    return JSONResponse(
        status_code=404,
        content=exc.to_dict(),
    )


@app.exception_handler(ConstraintViolationError)
async def constraint_violation_handler(request: Request, exc: ConstraintViolationError):
    """Handle duplicate keys and broken references."""
    return JSONResponse(
        status_code=409,
        content=exc.to_dict(),
    )


@app.exception_handler(PaymentServiceError)
async def payment_error_handler(request: Request, exc: PaymentServiceError):
    """Handle payment processor failures."""
    return JSONResponse(
        status_code=502,
        content=exc.to_dict(),
    )


@app.exception_handler(ElevionError)
async def general_error_handler(request: Request, exc: ElevionError):
    """Handle all other application errors."""
    logger.error(f"Unhandled application error: {exc.message}")
    return JSONResponse(
        status_code=500,
        content=exc.to_dict(),
    )


# ============================================================================
# Health Check
# ============================================================================

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "elevion"}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Elevion API",
        "version": "1.0.0",
        "docs": "/docs",
    }


# ============================================================================
# Import and register routers
# ============================================================================

from elevion.api.routes import (  # noqa: E402
    advertisements,
    analytics,
    client_previews,
    contact,
    feedback,
    marketplace,
    mockups,
    pricing,
    search,
    subscriptions,
)

app.include_router(client_previews.router)
app.include_router(subscriptions.router)
app.include_router(marketplace.router)
app.include_router(advertisements.router)
app.include_router(search.router)
app.include_router(feedback.router)
app.include_router(mockups.router)
app.include_router(contact.router)
app.include_router(analytics.router)
app.include_router(pricing.router)
