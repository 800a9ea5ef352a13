"""
FastAPI application initialization and configuration.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import settings
from database.engine import init_db, close_db
from api.routes import health
from api.routes.v1 import (
    admins,
    applications,
    auth,
    candidates,
    positions,
)

# Import middleware components
from core.middleware import (
    ErrorHandlingMiddleware,
    setup_error_handlers,
    StructuredLoggingMiddleware,
    setup_logging,
)

# Setup structured logging (do this first, before anything else)
setup_logging(
    log_level=settings.log_level,
    json_logs=settings.json_logs,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan events."""
    # Startup
    logger.info(f"Starting {settings.app_name} in {settings.app_env} environment")
    await init_db()

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.app_name}")
    await close_db()


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Job board API: positions, applications, candidates and admin accounts",
    version="0.1.0",
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan,
)

# Setup error handlers (before middleware)
setup_error_handlers(app, debug=settings.debug)

# Add middleware (order matters - they execute in reverse order)
# 1. Structured logging middleware (logs all requests/responses)
app.add_middleware(
    StructuredLoggingMiddleware,
    log_request_body=settings.log_request_body,
    log_response_body=settings.log_response_body,
    max_body_size=settings.log_max_body_size,
)

# 2. CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 3. Error handling middleware (outermost - catches all errors)
app.add_middleware(
    ErrorHandlingMiddleware,
    debug=settings.debug,
)

# Health check routes
app.include_router(health.router, tags=["Health"])

# API routes
app.include_router(auth.router)
app.include_router(admins.router)
app.include_router(positions.router)
app.include_router(applications.router)
app.include_router(candidates.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
