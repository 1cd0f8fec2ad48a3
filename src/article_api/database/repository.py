"""Repository layer for database operations."""

import functools
from collections.abc import Callable
from typing import TypeVar

from sqlalchemy import delete, select
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session
from tenacity import (
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)
from typing_extensions import ParamSpec

from article_api.models.db_models import Article

P = ParamSpec("P")
R = TypeVar("R")

# Retry configuration for database operations
DB_RETRY_MAX_ATTEMPTS = 5
DB_RETRY_WAIT_MIN = 1  # seconds
DB_RETRY_WAIT_MAX = 8  # seconds
DB_RETRY_WAIT_MULTIPLIER = 2


def is_lock_error(exc: BaseException) -> bool:
    """Whether an error is SQLite lock contention rather than a permanent failure."""
    return isinstance(exc, OperationalError) and "locked" in str(exc.orig)


def with_db_retry(func: Callable[P, R]) -> Callable[P, R]:
    """Decorator to retry database operations on SQLite lock errors.

    Retries "database is locked" OperationalErrors using exponential backoff.
    Other OperationalErrors, such as a missing table, are raised immediately.
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        for attempt in Retrying(
            retry=retry_if_exception(is_lock_error),
            stop=stop_after_attempt(DB_RETRY_MAX_ATTEMPTS),
            wait=wait_exponential(
                multiplier=DB_RETRY_WAIT_MULTIPLIER,
                min=DB_RETRY_WAIT_MIN,
                max=DB_RETRY_WAIT_MAX,
            ),
            reraise=True,
        ):
            with attempt:
                return func(*args, **kwargs)
        raise RuntimeError("Retry logic failed unexpectedly")

    return wrapper


class ArticleRepository:
    """Data access for the articles table.

    Every method binds its parameters to a single statement against the
    session it was created with. Missing rows are reported as None/False,
    never as exceptions.
    """

    def __init__(self, session: Session) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session instance.
        """
        self._session = session

    @with_db_retry
    def create_article(self, name: str) -> Article:
        """Insert a new article.

        Args:
            name: Article name, already validated and trimmed.

        Returns:
            The created Article with its store-assigned id.
        """
        article = Article(name=name)
        self._session.add(article)
        self._commit()
        self._session.refresh(article)
        return article

    def get_article(self, article_id: int) -> Article | None:
        """Get an article by ID.

        Args:
            article_id: Article ID.

        Returns:
            Article if found, None otherwise.
        """
        return self._session.get(Article, article_id)

    def list_articles(self) -> list[Article]:
        """Get all articles in insertion order."""
        return list(self._session.scalars(select(Article).order_by(Article.id)).all())

    @with_db_retry
    def update_article(self, article_id: int, name: str) -> Article | None:
        """Rename an article.

        Args:
            article_id: Article ID.
            name: New name, already validated and trimmed.

        Returns:
            The updated Article, or None if no article has that ID.
        """
        article = self._session.get(Article, article_id)
        if article is None:
            return None

        article.name = name
        self._commit()
        self._session.refresh(article)
        return article

    @with_db_retry
    def delete_article(self, article_id: int) -> bool:
        """Delete an article by ID.

        Args:
            article_id: Article ID.

        Returns:
            True if a row was deleted, False if not found.
        """
        result = self._session.execute(delete(Article).where(Article.id == article_id))
        self._commit()
        return bool(result.rowcount)

    def _commit(self) -> None:
        """Commit, rolling back first if the commit fails so a retry starts clean."""
        try:
            self._session.commit()
        except SQLAlchemyError:
            self._session.rollback()
            raise
