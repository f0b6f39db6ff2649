"""
Article Infrastructure Repositories
===================================

Concrete implementations of ``IArticleRepository``.

Every statement is built with SQLAlchemy expressions, so values always travel
as bound parameters. Write operations commit before returning.
"""

from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from article_service.article.application import IArticleRepository
from article_service.article.domain import Article, UPDATABLE_FIELDS
from article_service.article.infrastructure.models import ArticleModel
from article_service.author.infrastructure import InMemoryAuthorRepository
from article_service.core import (
    ConflictException,
    RepositoryException,
    ResourceNotFoundException,
)


def _to_entity(model: ArticleModel) -> Article:
    return Article(
        id=model.id,
        title=model.title,
        content=model.content,
        author_id=model.author_id,
        created_at=model.created_at,
        updated_at=model.updated_at
    )


class SQLAlchemyArticleRepository(IArticleRepository):
    """
    SQLAlchemy implementation of article repository.

    Handles persistence of Article entities using async SQLAlchemy.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def _execute(self, stmt: Any, operation: str, details: Dict[str, Any]) -> Any:
        try:
            return await self._session.execute(stmt)
        except (SQLAlchemyError, OSError) as e:
            raise RepositoryException(f"{operation} failed: {e}", details) from e

    async def _commit(self, operation: str, details: Dict[str, Any]) -> None:
        try:
            await self._session.commit()
        except IntegrityError as e:
            # Unknown author_id or a unique constraint on the storage side
            raise ConflictException(f"{operation} violates a storage constraint", details) from e
        except (SQLAlchemyError, OSError) as e:
            raise RepositoryException(f"{operation} failed: {e}", details) from e

    async def _get_model(self, article_id: int) -> ArticleModel:
        stmt = select(ArticleModel).where(ArticleModel.id == article_id)
        result = await self._execute(stmt, "Fetch article", {"article_id": article_id})
        model = result.scalar_one_or_none()
        if model is None:
            raise ResourceNotFoundException("Article", article_id)
        return model

    async def get_by_id(self, article_id: int) -> Article:
        """Get article by ID."""
        return _to_entity(await self._get_model(article_id))

    async def get_by_title(self, title: str) -> Optional[Article]:
        """Get article by exact title."""
        stmt = select(ArticleModel).where(ArticleModel.title == title).limit(1)
        result = await self._execute(stmt, "Fetch article by title", {"title": title})
        model = result.scalar_one_or_none()
        return _to_entity(model) if model else None

    async def fetch(self, limit: int) -> List[Article]:
        """List articles, newest first."""
        stmt = (
            select(ArticleModel)
            .order_by(ArticleModel.created_at.desc(), ArticleModel.id.desc())
            .limit(limit)
        )
        result = await self._execute(stmt, "List articles", {"limit": limit})
        return [_to_entity(model) for model in result.scalars().all()]

    async def create(self, title: str, content: str, author_id: int) -> Article:
        """Create new article."""
        now = datetime.now(timezone.utc)
        model = ArticleModel(
            title=title,
            content=content,
            author_id=author_id,
            created_at=now,
            updated_at=now
        )

        self._session.add(model)
        await self._commit("Create article", {"title": title, "author_id": author_id})

        return _to_entity(model)

    async def update(self, article_id: int, changes: Dict[str, Any]) -> Article:
        """Update supplied fields of an existing article."""
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise RepositoryException(f"Cannot update fields: {sorted(unknown)}")

        model = await self._get_model(article_id)

        for field_name, value in changes.items():
            setattr(model, field_name, value)
        model.updated_at = datetime.now(timezone.utc)

        await self._commit("Update article", {"article_id": article_id})

        return _to_entity(model)

    async def delete(self, article_id: int) -> None:
        """Delete article by ID."""
        stmt = delete(ArticleModel).where(ArticleModel.id == article_id)
        result = await self._execute(stmt, "Delete article", {"article_id": article_id})

        if result.rowcount == 0:
            raise ResourceNotFoundException("Article", article_id)

        await self._commit("Delete article", {"article_id": article_id})


class InMemoryArticleRepository(IArticleRepository):
    """
    Dict-backed article repository.

    Returns copies, so every read behaves like a fresh fetch. When given an
    author repository it rejects unknown author IDs the way a foreign key
    would.
    """

    def __init__(self, authors: Optional[InMemoryAuthorRepository] = None):
        self._articles: Dict[int, Article] = {}
        self._next_id = 1
        self._authors = authors

    def _check_author(self, author_id: int) -> None:
        if self._authors is not None and author_id not in self._authors:
            raise ConflictException(
                "Article references an unknown author",
                {"author_id": author_id}
            )

    def _get(self, article_id: int) -> Article:
        article = self._articles.get(article_id)
        if article is None:
            raise ResourceNotFoundException("Article", article_id)
        return article

    async def get_by_id(self, article_id: int) -> Article:
        return replace(self._get(article_id))

    async def get_by_title(self, title: str) -> Optional[Article]:
        for article in self._articles.values():
            if article.title == title:
                return replace(article)
        return None

    async def fetch(self, limit: int) -> List[Article]:
        ordered = sorted(
            self._articles.values(),
            key=lambda a: (a.created_at, a.id),
            reverse=True
        )
        return [replace(a) for a in ordered[:limit]]

    async def create(self, title: str, content: str, author_id: int) -> Article:
        self._check_author(author_id)
        now = datetime.now(timezone.utc)
        article = Article(
            id=self._next_id,
            title=title,
            content=content,
            author_id=author_id,
            created_at=now,
            updated_at=now
        )
        self._articles[article.id] = article
        self._next_id += 1
        return replace(article)

    async def update(self, article_id: int, changes: Dict[str, Any]) -> Article:
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise RepositoryException(f"Cannot update fields: {sorted(unknown)}")

        current = self._get(article_id)
        if "author_id" in changes:
            self._check_author(changes["author_id"])

        updated = replace(current, updated_at=datetime.now(timezone.utc), **changes)
        self._articles[article_id] = updated
        return replace(updated)

    async def delete(self, article_id: int) -> None:
        self._get(article_id)
        del self._articles[article_id]

    def __len__(self) -> int:
        return len(self._articles)
