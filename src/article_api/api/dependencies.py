"""FastAPI dependency injection for database sessions and services."""

import re
from collections.abc import Generator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session, sessionmaker

from article_api.api.errors import InvalidArticleIdError
from article_api.services.article_service import ArticleService

# Largest id the store can hold (signed 64-bit INTEGER)
MAX_ARTICLE_ID = 2**63 - 1

_ID_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse_article_id(raw_id: str) -> int:
    """Parse a path segment as an article ID.

    Args:
        raw_id: The raw path segment.

    Returns:
        The ID as a positive integer.

    Raises:
        InvalidArticleIdError: If the segment is not a base-10 integer in
            the range 1..MAX_ARTICLE_ID.
    """
    if not _ID_PATTERN.fullmatch(raw_id):
        raise InvalidArticleIdError(raw_id)
    article_id = int(raw_id)
    if article_id <= 0 or article_id > MAX_ARTICLE_ID:
        raise InvalidArticleIdError(raw_id)
    return article_id


def get_article_id(article_id: str) -> int:
    """Dependency that validates the ``{article_id}`` path parameter."""
    return parse_article_id(article_id)


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency that provides a database session.

    The session factory is bound to the engine the application was created
    with, see ``create_app``.

    Yields:
        Database session that is automatically closed after use.
    """
    session_factory: sessionmaker[Session] = request.app.state.session_factory
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


def get_article_service(
    session: Annotated[Session, Depends(get_db)],
) -> ArticleService:
    """Dependency that provides an ArticleService instance.

    Args:
        session: Database session from get_db dependency.

    Returns:
        ArticleService instance.
    """
    return ArticleService(session)


# Type aliases for cleaner dependency injection
ArticleIdDep = Annotated[int, Depends(get_article_id)]
ArticleServiceDep = Annotated[ArticleService, Depends(get_article_service)]
