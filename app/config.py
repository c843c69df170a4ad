# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.PUBLIC_BUCKET)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# Settings hold plain values only. Clients built from them (Supabase, storage,
# token verifier) are constructed once at startup in app/main.py.
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses pydantic-settings to:
    - Automatically load from .env file
    - Validate types and constraints
    - Provide sensible defaults for development
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # These are required - app won't start without them

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS, server only)"
    )

    SUPABASE_JWT_SECRET: str = Field(
        default="",
        description="Legacy HS256 JWT secret used to verify access tokens"
    )

    # -------------------------------------------------------------------------
    # Object Storage
    # -------------------------------------------------------------------------
    # Public-tier objects live in a world-readable bucket, member/admin-tier
    # objects in a private bucket reachable only through signed URLs.

    PUBLIC_BUCKET: str = Field(
        default="public",
        description="World-readable bucket for public-tier resources"
    )

    PRIVATE_BUCKET: str = Field(
        default="private",
        description="Private bucket for member/admin-tier resources"
    )

    PUBLIC_BASE_URL: str = Field(
        default="",
        description="Custom base URL for the public bucket (empty = use the bucket's own URL)"
    )

    SIGNED_URL_TTL_SECONDS: int = Field(
        default=60,
        ge=1,
        le=3600,
        description="Validity window of signed URLs for private-tier objects"
    )

    # -------------------------------------------------------------------------
    # Access Policy
    # -------------------------------------------------------------------------

    ALLOW_ANONYMOUS_PUBLIC_DOWNLOAD: bool = Field(
        default=False,
        description="Let anonymous viewers download public-tier files (view is always allowed)"
    )

    # -------------------------------------------------------------------------
    # Listing
    # -------------------------------------------------------------------------

    RESOURCE_LIST_LIMIT: int = Field(
        default=200,
        ge=1,
        le=1000,
        description="Maximum number of items returned by the resource list"
    )

    RESOURCE_PAGE_SIZE: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Page size for category detail listings"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug logging"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # File Upload Settings
    # -------------------------------------------------------------------------

    MAX_UPLOAD_SIZE_MB: int = Field(
        default=200,
        ge=1,
        le=2048,
        description="Maximum file upload size in MB"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        # Don't fail if .env doesn't exist (env vars set directly in production)
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://site.org" -> ["http://localhost:3000", "https://site.org"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def max_upload_size_bytes(self) -> int:
        """Convert MB to bytes for file size validation."""
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def public_base_url(self) -> str | None:
        """PUBLIC_BASE_URL without trailing slash, or None when unset."""
        base = self.PUBLIC_BASE_URL.strip().rstrip("/")
        return base or None

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
