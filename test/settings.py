"""
Test Configuration Settings.

This module defines the test environment configuration using Pydantic's BaseSettings.
Values are read from the test/.env file; nested properties use ``__`` as the
delimiter, e.g. ``DATABASE__URL`` maps to ``test_settings.database.url``.
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class TestDatabaseConfig(BaseModel):
    """Database configuration container for tests."""

    url: str = Field(
        default="sqlite+aiosqlite:///:memory:",
        description="Test database connection URL (defaults to in-memory SQLite)",
    )

    model_config = ConfigDict(strict=False)


class TestAIConfig(BaseModel):
    """AI provider configuration for tests."""

    gemini_api_key: Optional[SecretStr] = Field(
        default=None,
        description="Real Gemini key; unit tests never use it, they patch the model instead",
    )

    model_config = ConfigDict(strict=False)


class TestSettings(BaseSettings):
    """
    Test environment settings model.

    Examples:
    - DATABASE__URL → test_settings.database.url
    - AI__GEMINI_API_KEY → test_settings.ai.gemini_api_key
    """

    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).parent / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    database: TestDatabaseConfig = Field(
        default_factory=TestDatabaseConfig,
        description="Database configuration for tests",
    )
    ai: TestAIConfig = Field(
        default_factory=TestAIConfig,
        description="AI provider configuration for tests",
    )


test_settings = TestSettings()
