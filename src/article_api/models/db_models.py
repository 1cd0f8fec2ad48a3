"""SQLAlchemy ORM models."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class Article(Base):
    """A named article.

    The table itself is created and dropped by the registered migrations,
    never by ``Base.metadata.create_all``.
    """

    __tablename__ = "articles"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<Article(id={self.id}, name={self.name!r})>"
