"""
Production environment specific settings.
"""

from .base import BaseAppSettings


class ProductionSettings(BaseAppSettings):
    """
    Settings class for production environment.

    Disables debug mode and emits structured logs. DATABASE_URL must come
    from the environment.
    """

    DEBUG: bool = False
    LOG_JSON: bool = True
