"""
Article Application DTOs
========================

Pydantic models for request validation and response serialization.

JSON field names are camelCase (``authorId``, ``createdAt``); snake_case
input is accepted as well.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from article_service.article.domain import Article
from article_service.author.domain import Author


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ========== Request DTOs ==========

class ArticleCreateRequest(_CamelModel):
    """Request body for creating an article."""
    title: str = Field(..., min_length=1, max_length=300, description="Article title")
    content: str = Field(..., description="Article body")
    author_id: int = Field(..., ge=1, description="Identifier of an existing author")


class ArticleUpdateRequest(_CamelModel):
    """
    Request body for updating an article.

    Every field is optional; only supplied, non-null fields are changed.
    """
    title: Optional[str] = Field(None, min_length=1, max_length=300)
    content: Optional[str] = None
    author_id: Optional[int] = Field(None, ge=1)

    def to_changes(self) -> Dict[str, Any]:
        """Return the supplied fields as a column -> value mapping."""
        return self.model_dump(exclude_unset=True, exclude_none=True, by_alias=False)


# ========== Response DTOs ==========

class AuthorResponse(_CamelModel):
    id: int
    name: str

    @classmethod
    def from_domain(cls, author: Author) -> "AuthorResponse":
        return cls(id=author.id, name=author.name)


class ArticleResponse(_CamelModel):
    """Response model for a single article."""
    id: int = Field(..., description="Article ID")
    title: str
    content: str
    author_id: int
    author: Optional[AuthorResponse] = Field(None, description="Embedded author")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, article: Article) -> "ArticleResponse":
        return cls(
            id=article.id,
            title=article.title,
            content=article.content,
            author_id=article.author_id,
            author=AuthorResponse.from_domain(article.author) if article.author else None,
            created_at=article.created_at,
            updated_at=article.updated_at
        )
