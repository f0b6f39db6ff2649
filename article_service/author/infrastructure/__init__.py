"""
Author Infrastructure Layer
===========================

- Models: SQLAlchemy ORM models
- Repositories: SQLAlchemy and in-memory implementations
"""

from article_service.author.infrastructure.models import AuthorModel
from article_service.author.infrastructure.repositories import (
    SQLAlchemyAuthorRepository,
    InMemoryAuthorRepository,
)

__all__ = [
    "AuthorModel",
    "SQLAlchemyAuthorRepository",
    "InMemoryAuthorRepository",
]
