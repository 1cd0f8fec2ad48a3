"""Data models for article-api."""

from article_api.models.pydantic_models import ArticleParams, ArticleRead, Settings

__all__ = [
    "ArticleParams",
    "ArticleRead",
    "Settings",
]
