"""
Base configuration module for FastQuery applications.

This module provides the base settings class that other settings classes inherit from.
It handles application metadata, database connection and pagination limits.
"""

from typing import Optional

from pydantic import ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings


class BaseAppSettings(BaseSettings):
    """
    Base settings class for application configuration.

    This class provides the foundation for all environment-specific settings classes.

    Attributes:
        APP_NAME: The name of the application
        DEBUG: Flag to enable/disable debug mode
        VERSION: Application version string
        LOG_JSON: Emit log records as JSON instead of plain text
        LOG_LEVEL: Level of the package logger when DEBUG is off
        DATABASE_URL: Database connection URL
        DB_ECHO: Enable SQL query logging (echo)
        DB_POOL_SIZE: Connection pool size for the database
        PAGINATION_DEFAULT_PAGE_SIZE: Page size used when a request gives none
        PAGINATION_MAX_PAGE_SIZE: Hard ceiling applied to every page size
    """

    APP_NAME: str = Field(default="FastQuery")
    DEBUG: bool = Field(default=False)
    VERSION: str = Field(default="0.1.0")
    LOG_LEVEL: str = Field(
        default="INFO", description="Level of the package logger when DEBUG is off"
    )
    LOG_JSON: bool = Field(
        default=False, description="Emit log records as JSON instead of plain text"
    )

    # Database configuration
    DATABASE_URL: Optional[str] = Field(
        default=None, description="Database connection URL"
    )
    DB_ECHO: bool = Field(default=False, description="Enable SQL query logging (echo)")
    DB_POOL_SIZE: int = Field(
        default=5, description="Connection pool size for the database"
    )

    # Pagination configuration
    PAGINATION_DEFAULT_PAGE_SIZE: int = Field(
        default=20, description="Page size used when a request gives none"
    )
    PAGINATION_MAX_PAGE_SIZE: int = Field(
        default=100, description="Hard ceiling applied to every page size"
    )

    @field_validator("DATABASE_URL", mode="before")
    def validate_database_url(cls, value):
        """
        Ensure DATABASE_URL uses asyncpg for PostgreSQL connections.
        """
        if (
            value
            and value.startswith("postgresql://")
            and not value.startswith("postgresql+asyncpg://")
        ):
            raise ValueError(
                "DATABASE_URL must start with 'postgresql+asyncpg://' for asyncpg driver. "
                "You provided a URL starting with 'postgresql://', which will cause psycopg2 errors. "
                "Please update your DATABASE_URL to use the correct format."
            )
        return value

    @field_validator("PAGINATION_MAX_PAGE_SIZE", "PAGINATION_DEFAULT_PAGE_SIZE")
    def validate_page_size(cls, value):
        """Page sizes must be positive."""
        if value < 1:
            raise ValueError("Page sizes must be at least 1")
        return value

    @model_validator(mode="after")
    def validate_default_page_size(self):
        """The default page size may not exceed the configured ceiling."""
        if self.PAGINATION_DEFAULT_PAGE_SIZE > self.PAGINATION_MAX_PAGE_SIZE:
            raise ValueError(
                f"PAGINATION_DEFAULT_PAGE_SIZE ({self.PAGINATION_DEFAULT_PAGE_SIZE}) "
                f"cannot exceed PAGINATION_MAX_PAGE_SIZE ({self.PAGINATION_MAX_PAGE_SIZE})"
            )
        return self

    model_config = ConfigDict(env_file=".env", case_sensitive=True)
