"""
Testing environment specific settings.
"""

from .base import BaseAppSettings


class TestingSettings(BaseAppSettings):
    """
    Settings class for testing environment.

    Uses in-memory SQLite database and enables debug mode for testing.

    Attributes:
        DEBUG: Set to True for detailed test output
        DATABASE_URL: In-memory SQLite connection string for testing
    """

    __test__ = False

    DEBUG: bool = True
    DATABASE_URL: str = "sqlite+aiosqlite:///:memory:"
