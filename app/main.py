# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Resource Portal API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.auth import routes as auth_routes
from app.auth.verifier import TokenVerifier
from app.config import settings
from app.exceptions import (
    ResourcePortalException,
    resource_portal_exception_handler,
    validation_exception_handler,
)
from app.routers import admin, boards, health, resources
from core.services.storage_service import StorageService
from lib.supabase_client import SupabaseClient, SupabaseClientError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs on startup and shutdown:
    - Startup: build the Supabase wrapper, storage service and token
      verifier, and keep them on app.state for the dependencies
    - Shutdown: drop them
    """
    # Startup
    logger.info(f"Starting Resource Portal API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    db = SupabaseClient.from_settings(settings)
    app.state.supabase = db
    app.state.storage = StorageService(
        db.client,
        public_bucket=settings.PUBLIC_BUCKET,
        private_bucket=settings.PRIVATE_BUCKET,
        public_base_url=settings.public_base_url,
    )
    app.state.token_verifier = TokenVerifier(
        settings.SUPABASE_URL,
        jwt_secret=settings.SUPABASE_JWT_SECRET,
    )

    if settings.ALLOW_ANONYMOUS_PUBLIC_DOWNLOAD:
        logger.info("Anonymous downloads of public resources are enabled")

    yield

    # Shutdown
    logger.info("Shutting down Resource Portal API")
    app.state.supabase = None
    app.state.storage = None
    app.state.token_verifier = None


# Create FastAPI application
app = FastAPI(
    title="Resource Portal API",
    description="""
## Role-gated Resource Portal

Public pages list and open resources; admins upload and maintain them.

### Visibility

| Visibility | View | Download |
|------------|------|----------|
| **public** | anyone | logged-in users |
| **member** | approved members | approved members |
| **admin** | approved admins | approved admins |

Public files are served from a stable URL. Member and admin files are
served through signed URLs that expire after a short time.

### Authentication

Send the Supabase access token as `Authorization: Bearer <token>`.
Without a token every endpoint except the admin ones still works, as an
anonymous viewer.
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Who the current token belongs to",
        },
        {
            "name": "Resources",
            "description": "List resources and get file URLs",
        },
        {
            "name": "Boards",
            "description": "Resource categories",
        },
        {
            "name": "Admin",
            "description": "Upload, replace, delete and edit resources; manage members",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(ResourcePortalException)
async def handle_resource_portal_exception(request: Request, exc: ResourcePortalException):
    """Handle custom Resource Portal exceptions."""
    return await resource_portal_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    """Malformed request bodies and parameters are 400s."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(SupabaseClientError)
async def handle_supabase_error(request: Request, exc: SupabaseClientError):
    """Database/auth platform failures, with the platform's message."""
    logger.error(f"Supabase error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "ok": False,
            "error": exc.message,
            "code": exc.code,
        }
    )


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "ok": False,
            "error": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Identity endpoint (/api/me)
app.include_router(
    auth_routes.router,
    prefix="/api",
    tags=["Auth"]
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api",
    tags=["Health"]
)

# Resource listing and delivery
app.include_router(
    resources.router,
    prefix="/api/resources",
    tags=["Resources"]
)

# Boards
app.include_router(
    boards.router,
    prefix="/api/boards",
    tags=["Boards"]
)

# Admin endpoints
app.include_router(
    admin.router,
    prefix="/api/admin",
    tags=["Admin"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Resource Portal API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/health",
    }
