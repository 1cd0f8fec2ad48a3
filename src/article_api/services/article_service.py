"""Service layer for article operations."""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from article_api.database.repository import ArticleRepository
from article_api.models.pydantic_models import ArticleRead

if TYPE_CHECKING:
    from article_api.models.db_models import Article


class ArticleNotFoundError(Exception):
    """Raised when an article is not found."""

    def __init__(self, article_id: int) -> None:
        self.article_id = article_id
        super().__init__(f"Article {article_id} not found")


class ArticleService:
    """Service for article operations.

    Provides a clean interface for article CRUD operations,
    returning Pydantic models instead of ORM objects.
    """

    def __init__(self, session: Session) -> None:
        """Initialize with database session.

        Args:
            session: SQLAlchemy session instance.
        """
        self._repo = ArticleRepository(session)

    def create_article(self, name: str) -> ArticleRead:
        """Create an article. Never idempotent: every call inserts a row."""
        return self._to_article_read(self._repo.create_article(name))

    def get_article(self, article_id: int) -> ArticleRead:
        """Get an article by ID.

        Raises:
            ArticleNotFoundError: If no article has that ID.
        """
        article = self._repo.get_article(article_id)
        if article is None:
            raise ArticleNotFoundError(article_id)
        return self._to_article_read(article)

    def list_articles(self) -> list[ArticleRead]:
        """Get all articles, oldest first."""
        return [self._to_article_read(article) for article in self._repo.list_articles()]

    def update_article(self, article_id: int, name: str) -> ArticleRead:
        """Rename an article.

        Args:
            article_id: Article ID.
            name: New name.

        Returns:
            Updated ArticleRead.

        Raises:
            ArticleNotFoundError: If no article has that ID.
        """
        article = self._repo.update_article(article_id, name)
        if article is None:
            raise ArticleNotFoundError(article_id)
        return self._to_article_read(article)

    def delete_article(self, article_id: int) -> bool:
        """Delete an article.

        Deleting a missing article is not an error.

        Returns:
            True if a row was deleted, False if there was nothing to delete.
        """
        return self._repo.delete_article(article_id)

    def _to_article_read(self, article: "Article") -> ArticleRead:
        """Convert ORM Article to ArticleRead Pydantic model."""
        return ArticleRead(id=article.id, name=article.name)
