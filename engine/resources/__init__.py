"""
Resources module - static content loading.
"""

from engine.resources.database import Database, ContentError, CATEGORIES

__all__ = [
    "Database",
    "ContentError",
    "CATEGORIES",
]
