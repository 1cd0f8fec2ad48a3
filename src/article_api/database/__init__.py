"""Database module."""

from article_api.database.engine import (
    DatabaseNotFoundError,
    create_db_engine,
    get_session,
    open_database,
)
from article_api.database.repository import ArticleRepository

__all__ = [
    "ArticleRepository",
    "DatabaseNotFoundError",
    "create_db_engine",
    "get_session",
    "open_database",
]
