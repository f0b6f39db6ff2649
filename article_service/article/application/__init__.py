"""
Article Application Layer
=========================

Contains:
- Services: the article usecase and author enrichment
- DTOs: Data transfer objects for API serialization

This layer depends on the domain layer and repository interfaces,
but not on concrete infrastructure implementations.
"""

from article_service.article.application.dto import (
    ArticleCreateRequest,
    ArticleUpdateRequest,
    ArticleResponse,
    AuthorResponse,
)
from article_service.article.application.services import (
    ArticleService,
    IArticleRepository,
    IAuthorResolver,
    SequentialAuthorResolver,
)

__all__ = [
    # DTOs
    "ArticleCreateRequest",
    "ArticleUpdateRequest",
    "ArticleResponse",
    "AuthorResponse",
    # Services
    "ArticleService",
    "IAuthorResolver",
    "SequentialAuthorResolver",
    # Repository Interfaces
    "IArticleRepository",
]
