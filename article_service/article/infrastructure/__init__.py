"""
Article Infrastructure Layer
============================

- Models: SQLAlchemy ORM models
- Repositories: SQLAlchemy and in-memory implementations
"""

from article_service.article.infrastructure.models import ArticleModel
from article_service.article.infrastructure.repositories import (
    SQLAlchemyArticleRepository,
    InMemoryArticleRepository,
)

__all__ = [
    "ArticleModel",
    "SQLAlchemyArticleRepository",
    "InMemoryArticleRepository",
]
