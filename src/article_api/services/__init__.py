"""Service layer for article-api business logic."""

from article_api.services.article_service import ArticleNotFoundError, ArticleService

__all__ = [
    "ArticleNotFoundError",
    "ArticleService",
]
