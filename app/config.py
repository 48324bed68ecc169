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
#
# Provider keys (Kie AI, Bytez, Moneroo, FedaPay) are optional at startup.
# Endpoints that need a missing key fail with SERVICE_NOT_CONFIGURED instead.
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

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # These are required - app won't start without them

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
        ...,
        description="Supabase JWT secret used to verify HS256 access tokens"
    )

    # -------------------------------------------------------------------------
    # Redis Configuration (Celery + conversation store + pub/sub)
    # -------------------------------------------------------------------------

    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL for Celery, pub/sub and conversations"
    )

    CONVERSATION_TTL_SECONDS: int = Field(
        default=86400,
        ge=60,
        description="How long an idle conversation is kept in Redis"
    )

    # -------------------------------------------------------------------------
    # AI Gateway (chat + vision, OpenAI-compatible)
    # -------------------------------------------------------------------------

    AI_GATEWAY_URL: str = Field(
        default="https://ai.gateway.lovable.dev/v1",
        description="Base URL of the OpenAI-compatible AI gateway"
    )

    AI_GATEWAY_API_KEY: str = Field(
        ...,
        description="Bearer token for the AI gateway"
    )

    AI_MODEL: str = Field(
        default="google/gemini-2.5-flash",
        description="Model used for request analysis and vision calls"
    )

    AI_REQUEST_TIMEOUT: float = Field(
        default=12.0,
        gt=0,
        description="Per-attempt timeout for AI gateway calls (seconds)"
    )

    AI_MAX_RETRIES: int = Field(
        default=2,
        ge=0,
        le=5,
        description="Retries on transient AI gateway failures (3 attempts total by default)"
    )

    MAX_REQUEST_TEXT_LENGTH: int = Field(
        default=5000,
        ge=100,
        description="Maximum length of a poster request submitted for analysis"
    )

    # -------------------------------------------------------------------------
    # Image Generation (Kie AI - Nano Banana Pro)
    # -------------------------------------------------------------------------

    KIE_AI_API_KEY: str | None = Field(
        default=None,
        description="Kie AI API key"
    )

    KIE_API_BASE: str = Field(
        default="https://api.kie.ai/api/v1/jobs",
        description="Kie AI jobs API base URL"
    )

    KIE_MODEL: str = Field(
        default="nano-banana-pro",
        description="Kie AI model identifier"
    )

    KIE_POLL_MAX_ATTEMPTS: int = Field(
        default=60,
        ge=1,
        description="Maximum number of status polls per generation task"
    )

    KIE_POLL_INTERVAL_SECONDS: float = Field(
        default=2.0,
        ge=0,
        description="Delay between two status polls"
    )

    # -------------------------------------------------------------------------
    # Speech-to-text (Bytez Whisper)
    # -------------------------------------------------------------------------

    BYTEZ_API_KEY: str | None = Field(
        default=None,
        description="Bytez API key for Whisper transcription"
    )

    BYTEZ_WHISPER_URL: str = Field(
        default="https://api.bytez.com/models/v2/openai/whisper-large-v3",
        description="Bytez Whisper model endpoint"
    )

    # -------------------------------------------------------------------------
    # Payments
    # -------------------------------------------------------------------------

    MONEROO_SECRET_KEY: str | None = Field(
        default=None,
        description="Moneroo secret API key"
    )

    MONEROO_WEBHOOK_SECRET: str | None = Field(
        default=None,
        description="Moneroo webhook signing secret (HMAC-SHA256)"
    )

    MONEROO_API_BASE: str = Field(
        default="https://api.moneroo.io/v1",
        description="Moneroo REST API base URL"
    )

    PAYMENT_CURRENCY: str = Field(
        default="XOF",
        description="Currency used for Moneroo payments"
    )

    FEDAPAY_PUBLIC_KEY: str | None = Field(
        default=None,
        description="FedaPay public key handed to the checkout widget"
    )

    FEDAPAY_WEBHOOK_SECRET: str | None = Field(
        default=None,
        description="FedaPay webhook signing secret"
    )

    FEDAPAY_ENVIRONMENT: Literal["sandbox", "live"] = Field(
        default="sandbox",
        description="FedaPay environment for the checkout widget"
    )

    # -------------------------------------------------------------------------
    # Credits
    # -------------------------------------------------------------------------

    FREE_GENERATION_LIMIT: int = Field(
        default=5,
        ge=0,
        description="Number of free 1K generations granted to free-tier users"
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

    PUBLIC_APP_URL: str = Field(
        default="http://localhost:5173",
        description="Public URL of the web app (payment return URLs)"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:5173",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        # Don't fail if .env doesn't exist (useful for production where
        # env vars are set directly)
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

        Example: "http://localhost:5173, https://graphiste.app" -> ["http://localhost:5173", "https://graphiste.app"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

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

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
