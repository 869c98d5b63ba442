"""
Configuration Settings.

This module defines the application configuration using Pydantic's BaseSettings.
It loads all configuration from environment variables and the .env file.
Grouped settings are nested models addressed with a double underscore,
e.g. ``AI__API_KEY`` or ``SESSION__TTL_HOURS``.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# =====================================================================
# Grouped Configuration Models
# =====================================================================


class SessionConfig(BaseModel):
    """Login session configuration."""

    ttl_hours: int = Field(default=24, ge=1, le=168, description="Hours a login session stays valid")
    cookie_name: str = Field(default="session_token", description="Cookie carrying the session token")
    cookie_secure: bool = Field(default=False, description="Mark the session cookie as Secure (HTTPS only)")


class SecurityConfig(BaseModel):
    """Password hashing configuration."""

    pbkdf2_iterations: int = Field(default=390_000, ge=1_000, description="PBKDF2-HMAC-SHA256 iteration count")
    reset_token_ttl_minutes: int = Field(default=60, ge=5, description="Minutes a password reset token stays valid")


class AIConfig(BaseModel):
    """Generative AI (Google Gemini) configuration."""

    api_key: Optional[SecretStr] = Field(default=None, description="Gemini API key; AI completion is disabled without it")
    model: str = Field(default="gemini-2.0-flash-lite", description="Default model used for completions")
    fallback_model: str = Field(default="gemini-pro", description="Model retried once when the default is not found")
    features_enabled: bool = Field(default=False, description="Enable the advanced AI endpoint")
    advanced_model: str = Field(default="gemini-2.0-pro", description="Default model for advanced requests")


class CORSConfig(BaseModel):
    """CORS configuration."""

    origins: list[str] = Field(default=["*"], description="Allowed CORS origins (use * for all)")
    allow_credentials: bool = Field(default=True, description="Allow credentials in CORS requests")
    allow_methods: list[str] = Field(default=["*"], description="Allowed HTTP methods (use * for all)")
    allow_headers: list[str] = Field(default=["*"], description="Allowed HTTP headers (use * for all)")


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Application settings model.

    All properties are bound from environment variables and the .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # =====================================================================
    # Server Configuration
    # =====================================================================
    server_host: str = Field(default="0.0.0.0", description="Server host address to bind to")
    server_port: int = Field(default=8000, description="Server port number")
    environment: Literal["development", "production", "test"] = Field(
        default="development",
        description="Deployment environment; production enforces a session on AI completion",
    )
    base_url: str = Field(default="http://localhost:3000", description="Public URL used to build reset links")

    # =====================================================================
    # Logging Configuration
    # =====================================================================
    log_level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")
    log_format: Literal["simple", "detailed", "json"] = Field(default="detailed", description="Log line format")
    log_file_dir: str = Field(default="logs", description="Directory for the log file")
    enable_file_logging: bool = Field(default=False, description="Write logs to a file as well as the console")

    # =====================================================================
    # Database Configuration
    # =====================================================================
    database_url: str = Field(
        default="sqlite+aiosqlite:///./adhd_todo.db",
        description="Async database URL; postgres URLs are rewritten to use asyncpg",
    )

    # =====================================================================
    # Grouped Configurations
    # =====================================================================
    session: SessionConfig = Field(default_factory=SessionConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)
    ai: AIConfig = Field(default_factory=AIConfig)
    cors: CORSConfig = Field(default_factory=CORSConfig)


settings = Settings()
