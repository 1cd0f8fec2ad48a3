"""Article API endpoints."""

from fastapi import APIRouter, HTTPException, Response

from article_api.api.dependencies import ArticleIdDep, ArticleServiceDep
from article_api.api.schemas import ErrorResponse
from article_api.models.pydantic_models import ArticleParams, ArticleRead
from article_api.services.article_service import ArticleNotFoundError

router = APIRouter(
    responses={
        400: {"model": ErrorResponse, "description": "Invalid id or request body"},
        500: {"model": ErrorResponse, "description": "Database failure"},
    },
)

NOT_FOUND_RESPONSE = {404: {"model": ErrorResponse, "description": "Article not found"}}


@router.post("", response_model=ArticleRead, status_code=201)
def create_article(
    params: ArticleParams,
    service: ArticleServiceDep,
) -> ArticleRead:
    """Create an article.

    Args:
        params: Request body with the article name.

    Returns:
        The created article.
    """
    return service.create_article(params.name)


@router.get("", response_model=list[ArticleRead])
def list_articles(service: ArticleServiceDep) -> list[ArticleRead]:
    """List all articles in insertion order.

    An empty table yields an empty JSON array.
    """
    return service.list_articles()


@router.get("/{article_id}", response_model=ArticleRead, responses=NOT_FOUND_RESPONSE)
def get_article(
    article_id: ArticleIdDep,
    service: ArticleServiceDep,
) -> ArticleRead:
    """Get a single article.

    Raises:
        HTTPException: 404 if the article does not exist.
    """
    try:
        return service.get_article(article_id)
    except ArticleNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None


@router.put("/{article_id}", response_model=ArticleRead, responses=NOT_FOUND_RESPONSE)
def update_article(
    article_id: ArticleIdDep,
    params: ArticleParams,
    service: ArticleServiceDep,
) -> ArticleRead:
    """Rename an article.

    Args:
        article_id: The article ID.
        params: Request body with the new name.

    Returns:
        The updated article.

    Raises:
        HTTPException: 404 if the article does not exist.
    """
    try:
        return service.update_article(article_id, params.name)
    except ArticleNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None


@router.delete("/{article_id}", status_code=204, response_class=Response)
def delete_article(
    article_id: ArticleIdDep,
    service: ArticleServiceDep,
) -> Response:
    """Delete an article. Deleting a missing article also succeeds."""
    service.delete_article(article_id)
    return Response(status_code=204)
