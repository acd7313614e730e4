"""
Application factory for FastQuery.
"""

from fastquery.factory.app import configure_app

__all__ = ["configure_app"]
