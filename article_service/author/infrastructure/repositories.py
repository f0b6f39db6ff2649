"""
Author Infrastructure Repositories
==================================

Concrete implementations of ``IAuthorRepository``.
"""

from dataclasses import replace
from typing import Dict, Iterable, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from article_service.author.application import IAuthorRepository
from article_service.author.domain import Author
from article_service.author.infrastructure.models import AuthorModel
from article_service.core import RepositoryException, ResourceNotFoundException


class SQLAlchemyAuthorRepository(IAuthorRepository):
    """
    SQLAlchemy implementation of author repository.

    Read-only; every call re-fetches from storage.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, author_id: int) -> Author:
        """Get author by ID."""
        stmt = select(AuthorModel).where(AuthorModel.id == author_id)

        try:
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()
        except (SQLAlchemyError, OSError) as e:
            raise RepositoryException(
                f"Failed to fetch author {author_id}: {e}",
                {"author_id": author_id}
            ) from e

        if model is None:
            raise ResourceNotFoundException("Author", author_id)

        return Author(
            id=model.id,
            name=model.name,
            created_at=model.created_at,
            updated_at=model.updated_at
        )


class InMemoryAuthorRepository(IAuthorRepository):
    """
    Dict-backed author repository.

    Counts lookups so callers can observe how many round-trips a read made.
    """

    def __init__(self, authors: Optional[Iterable[Author]] = None):
        self._authors: Dict[int, Author] = {a.id: a for a in authors or []}
        self.lookup_count = 0

    async def get_by_id(self, author_id: int) -> Author:
        self.lookup_count += 1
        author = self._authors.get(author_id)
        if author is None:
            raise ResourceNotFoundException("Author", author_id)
        return replace(author)

    def __contains__(self, author_id: int) -> bool:
        return author_id in self._authors
