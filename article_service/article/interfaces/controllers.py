"""
Article Controllers (API Routes)
================================

FastAPI routes for the article CRUD endpoints.

Controllers are thin - they parse input, delegate to ``ArticleService`` and
serialize the result. Error-to-status mapping is done by the exception
handlers registered in ``article_service.shared.api.errors``.
"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Path, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from article_service.article.application import (
    ArticleService,
    ArticleCreateRequest,
    ArticleUpdateRequest,
    ArticleResponse,
)
from article_service.article.infrastructure import SQLAlchemyArticleRepository
from article_service.author.infrastructure import SQLAlchemyAuthorRepository
from article_service.config import ArticleSettings, Settings
from article_service.infrastructure.database import get_session

router = APIRouter(prefix="/articles", tags=["Articles"])

# Largest value the INTEGER id column holds
MAX_ARTICLE_ID = 2**31 - 1

ArticleId = Annotated[int, Path(ge=1, le=MAX_ARTICLE_ID, description="Article ID")]


# ========== Example payloads for Swagger ==========

ARTICLE_RESPONSE_EXAMPLE = {
    "id": 1,
    "title": "Designing small services",
    "content": "Start with the handlers, then the storage.",
    "authorId": 1,
    "author": {"id": 1, "name": "Jane Doe"},
    "createdAt": "2024-01-15T10:00:00Z",
    "updatedAt": "2024-01-15T10:00:00Z"
}

ERROR_RESPONSES = {
    400: {"description": "Malformed identifier or request body"},
    404: {"description": "Article (or its author) not found"},
    500: {"description": "Storage failure"},
    504: {"description": "Storage did not answer before the request deadline"},
}


# ========== Dependencies ==========

def get_settings(request: Request) -> Settings:
    """Settings the application was built with."""
    return request.app.state.settings


async def get_article_service(
    settings: Settings = Depends(get_settings),
    session: AsyncSession = Depends(get_session)
) -> ArticleService:
    """Get article service instance bound to the request's session."""
    return ArticleService(
        article_repository=SQLAlchemyArticleRepository(session),
        author_repository=SQLAlchemyAuthorRepository(session),
        timeout=settings.context.timeout
    )


def resolve_page_size(num: Optional[int], limits: ArticleSettings) -> int:
    """Apply the default for missing/non-positive values and clamp to the maximum."""
    if num is None or num <= 0:
        return limits.default_page_size
    return min(num, limits.max_page_size)


# ========== Route Handlers ==========

@router.get(
    "",
    response_model=List[ArticleResponse],
    summary="List articles",
    description="""
    List the newest articles with their author embedded.

    **Query Parameters:**
    - `num`: Number of articles to return. Missing or non-positive values use
      the configured default; values above the configured maximum are clamped.
    """,
    responses={
        200: {
            "description": "Articles, newest first",
            "content": {"application/json": {"example": [ARTICLE_RESPONSE_EXAMPLE]}}
        },
        **ERROR_RESPONSES
    }
)
async def fetch_articles(
    num: Optional[int] = Query(None, description="Number of articles to return"),
    settings: Settings = Depends(get_settings),
    service: ArticleService = Depends(get_article_service)
):
    articles = await service.fetch(resolve_page_size(num, settings.articles))
    return [ArticleResponse.from_domain(article) for article in articles]


@router.get(
    "/{article_id}",
    response_model=ArticleResponse,
    summary="Get article",
    responses={
        200: {
            "description": "The article",
            "content": {"application/json": {"example": ARTICLE_RESPONSE_EXAMPLE}}
        },
        **ERROR_RESPONSES
    }
)
async def get_article(
    article_id: ArticleId,
    service: ArticleService = Depends(get_article_service)
):
    article = await service.get_by_id(article_id)
    return ArticleResponse.from_domain(article)


@router.post(
    "",
    response_model=ArticleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create article",
    description="""
    Create an article.

    **Example Request**:
    ```json
    {"title": "T", "content": "C", "authorId": 1}
    ```
    """,
    responses={
        201: {
            "description": "Article created",
            "content": {"application/json": {"example": ARTICLE_RESPONSE_EXAMPLE}}
        },
        409: {"description": "Duplicate title or unknown author"},
        **ERROR_RESPONSES
    }
)
async def create_article(
    body: ArticleCreateRequest,
    service: ArticleService = Depends(get_article_service)
):
    article = await service.store(body)
    return ArticleResponse.from_domain(article)


@router.api_route(
    "/{article_id}",
    methods=["PUT", "PATCH"],
    response_model=ArticleResponse,
    summary="Update article",
    description="Change only the supplied fields (`title`, `content`, `authorId`).",
    responses={
        409: {"description": "Title already used or unknown author"},
        **ERROR_RESPONSES
    }
)
async def update_article(
    article_id: ArticleId,
    body: ArticleUpdateRequest,
    service: ArticleService = Depends(get_article_service)
):
    article = await service.update(article_id, body)
    return ArticleResponse.from_domain(article)


@router.delete(
    "/{article_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete article",
    responses=ERROR_RESPONSES
)
async def delete_article(
    article_id: ArticleId,
    service: ArticleService = Depends(get_article_service)
):
    await service.delete(article_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Export router for inclusion in main app
article_router = router
