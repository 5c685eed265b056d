# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.SUPABASE_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration (database + storage + auth)
    # -------------------------------------------------------------------------

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        ...,
        description="Supabase anon/public API key"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    SUPABASE_JWT_SECRET: str = Field(
        default="",
        description="Legacy HS256 JWT secret used to verify user tokens"
    )

    STORAGE_BUCKET: str = Field(
        default="media",
        description="Public storage bucket for uploaded and generated assets"
    )

    # -------------------------------------------------------------------------
    # Redis Configuration (for Celery)
    # -------------------------------------------------------------------------

    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL for Celery broker"
    )

    # -------------------------------------------------------------------------
    # Search Index
    # -------------------------------------------------------------------------

    ELASTICSEARCH_URL: str = Field(
        default="http://localhost:9200",
        description="Elasticsearch endpoint"
    )

    ELASTICSEARCH_API_KEY: str = Field(
        default="",
        description="Optional Elasticsearch API key"
    )

    SEARCH_INDEX_PREFIX: str = Field(
        default="articles",
        description="Per-language indices are named {prefix}_{lang}"
    )

    # -------------------------------------------------------------------------
    # OpenAI / LLM Configuration
    # -------------------------------------------------------------------------

    OPENAI_API_KEY: str = Field(
        ...,
        description="OpenAI API key for translation and generation"
    )

    OPENAI_MODEL: str = Field(
        default="gpt-4o",
        description="Chat model used for translation and content generation"
    )

    OPENAI_IMAGE_MODEL: str = Field(
        default="dall-e-3",
        description="Image model used for featured and inline images"
    )

    # Keyword research runs against any OpenAI-compatible endpoint
    # (empty values fall back to the OpenAI settings above)
    RESEARCH_API_KEY: str = Field(
        default="",
        description="API key for the research model endpoint"
    )

    RESEARCH_BASE_URL: str = Field(
        default="",
        description="Base URL of an OpenAI-compatible research endpoint"
    )

    RESEARCH_MODEL: str = Field(
        default="",
        description="Model used for keyword selection and research briefs"
    )

    TRANSLATION_MAX_WORKERS: int = Field(
        default=3,
        ge=1,
        le=8,
        description="Languages translated in parallel by the publish pipeline"
    )

    # -------------------------------------------------------------------------
    # Scheduling
    # -------------------------------------------------------------------------

    CRON_SECRET: str = Field(
        default="",
        description="Bearer token accepted by the cron endpoint (empty disables it)"
    )

    SCHEDULE_DEFAULT_TIMEZONE: str = Field(
        default="Asia/Tokyo",
        description="Timezone applied to schedules created without one"
    )

    # -------------------------------------------------------------------------
    # Public Site
    # -------------------------------------------------------------------------

    SITE_ROOT_DOMAIN: str = Field(
        default="pixseo.cloud",
        description="Tenants without a custom domain are served at {slug}.{SITE_ROOT_DOMAIN}"
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
        description="Enable debug mode (verbose logging, auto-reload)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    # -------------------------------------------------------------------------
    # Security
    # -------------------------------------------------------------------------

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    SUPER_ADMIN_EMAILS: str = Field(
        default="",
        description="Emails with access to every tenant (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # File Upload Settings
    # -------------------------------------------------------------------------

    MAX_UPLOAD_SIZE_MB: int = Field(
        default=50,
        ge=1,
        le=500,
        description="Maximum media upload size in MB"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://myapp.com" -> ["http://localhost:3000", "https://myapp.com"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def super_admin_emails_list(self) -> list[str]:
        """Lowercased super admin emails, empty entries dropped."""
        return [e.strip().lower() for e in self.SUPER_ADMIN_EMAILS.split(",") if e.strip()]

    @property
    def max_upload_size_bytes(self) -> int:
        """
        Convert MB to bytes for file size validation.
        """
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
