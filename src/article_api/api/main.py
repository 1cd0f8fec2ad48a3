"""FastAPI application factory and configuration."""

from fastapi import FastAPI
from sqlalchemy.engine import Engine

from article_api import __version__
from article_api.api.errors import register_exception_handlers
from article_api.api.routes import articles
from article_api.api.schemas import HealthResponse
from article_api.database.engine import create_session_factory


def create_app(engine: Engine) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        engine: Store handle shared by all request workers. The caller owns
            it and disposes of it when the server stops.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title="article-api",
        description="CRUD service for articles",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    register_exception_handlers(app)

    app.include_router(articles.router, prefix="/articles", tags=["articles"])

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy")

    return app
