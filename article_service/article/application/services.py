"""
Article Application Services
============================

The usecase layer: wraps repository calls in a per-operation deadline and
embeds the author of every article it returns.

Following SOLID principles:
- Single Responsibility: author enrichment lives behind ``IAuthorResolver``
- Dependency Inversion: depend on repository abstractions, not SQLAlchemy
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Dict, List, Optional, TypeVar

from article_service.article.application.dto import ArticleCreateRequest, ArticleUpdateRequest
from article_service.article.domain import Article
from article_service.author.application import IAuthorRepository
from article_service.author.domain import Author
from article_service.core import (
    ConflictException,
    OperationTimeoutException,
    ResourceNotFoundException,
    ValidationException,
)
from article_service.shared.infrastructure.logging import get_logger, log_latency

logger = get_logger(__name__)

T = TypeVar("T")


# ========== Repository Interfaces (Dependency Inversion) ==========

class IArticleRepository(ABC):
    """
    Interface for article data access.

    Lookups of a missing row raise ``ResourceNotFoundException``; driver
    failures raise ``RepositoryException``.
    """

    @abstractmethod
    async def get_by_id(self, article_id: int) -> Article:
        """Get article by ID."""

    @abstractmethod
    async def get_by_title(self, title: str) -> Optional[Article]:
        """Get article by exact title, or None."""

    @abstractmethod
    async def fetch(self, limit: int) -> List[Article]:
        """List at most ``limit`` articles, newest first."""

    @abstractmethod
    async def create(self, title: str, content: str, author_id: int) -> Article:
        """Create an article; storage assigns id and timestamps."""

    @abstractmethod
    async def update(self, article_id: int, changes: Dict[str, Any]) -> Article:
        """Apply ``changes`` to an existing article."""

    @abstractmethod
    async def delete(self, article_id: int) -> None:
        """Delete an existing article."""


class IAuthorResolver(ABC):
    """Populates ``Article.author`` for a batch of articles."""

    @abstractmethod
    async def resolve(self, articles: List[Article]) -> List[Article]:
        """Return the same articles with ``author`` set. Any failure propagates."""


class SequentialAuthorResolver(IAuthorResolver):
    """
    One author lookup per article, in order.

    No batching and no de-duplication: an article list of size N costs N
    author round-trips, and the first failed lookup fails the whole call.
    """

    def __init__(self, author_repository: IAuthorRepository):
        self._author_repo = author_repository

    async def resolve(self, articles: List[Article]) -> List[Article]:
        for article in articles:
            article.author = await self._author_repo.get_by_id(article.author_id)
        return articles


# ========== Application Services ==========

class ArticleService:
    """
    Article usecase.

    Every public method runs under a single deadline of ``timeout`` seconds
    covering all repository calls it makes. On expiry the in-flight call is
    cancelled and ``OperationTimeoutException`` is raised. No retries.
    """

    def __init__(
        self,
        article_repository: IArticleRepository,
        author_repository: IAuthorRepository,
        timeout: float,
        author_resolver: Optional[IAuthorResolver] = None
    ):
        self._article_repo = article_repository
        self._author_repo = author_repository
        self._author_resolver = author_resolver or SequentialAuthorResolver(author_repository)
        self._timeout = timeout

    async def _run(self, operation: str, work: Awaitable[T]) -> T:
        try:
            with log_latency(logger, operation):
                return await asyncio.wait_for(work, timeout=self._timeout)
        except asyncio.TimeoutError as e:
            logger.warning(
                "Operation deadline exceeded",
                extra={"operation": operation, "timeout_seconds": self._timeout}
            )
            raise OperationTimeoutException(operation, self._timeout) from e

    async def fetch(self, num: int) -> List[Article]:
        """
        List up to ``num`` articles with authors embedded.

        Args:
            num: Maximum number of articles (already clamped by the caller)
        """
        async def _fetch() -> List[Article]:
            articles = await self._article_repo.fetch(num)
            return await self._author_resolver.resolve(articles)

        return await self._run("article.fetch", _fetch())

    async def get_by_id(self, article_id: int) -> Article:
        """Get a single article with its author embedded."""
        async def _get() -> Article:
            article = await self._article_repo.get_by_id(article_id)
            resolved = await self._author_resolver.resolve([article])
            return resolved[0]

        return await self._run("article.get_by_id", _get())

    async def store(self, request: ArticleCreateRequest) -> Article:
        """
        Create an article.

        The author is looked up before the insert, so the commit is the last
        step under the deadline.

        Raises:
            ConflictException: An article with the same title exists, or the
                author does not exist
        """
        async def _store() -> Article:
            await self._ensure_title_free(request.title)
            author = await self._existing_author(request.author_id)
            article = await self._article_repo.create(
                title=request.title,
                content=request.content,
                author_id=request.author_id
            )
            article.author = author
            return article

        article = await self._run("article.store", _store())
        logger.info("Article stored", extra={"article_id": article.id, "author_id": article.author_id})
        return article

    async def update(self, article_id: int, request: ArticleUpdateRequest) -> Article:
        """
        Change only the supplied fields of an article.

        Raises:
            ValidationException: No fields supplied
            ResourceNotFoundException: No article with this ID
            ConflictException: New title already used by another article, or
                the author does not exist
        """
        changes = request.to_changes()
        if not changes:
            raise ValidationException("Update requires at least one of: title, content, authorId")

        async def _update() -> Article:
            current = await self._article_repo.get_by_id(article_id)
            if "title" in changes:
                await self._ensure_title_free(changes["title"], article_id)
            author = await self._existing_author(changes.get("author_id", current.author_id))
            article = await self._article_repo.update(article_id, changes)
            article.author = author
            return article

        article = await self._run("article.update", _update())
        logger.info("Article updated", extra={"article_id": article_id, "fields": sorted(changes)})
        return article

    async def delete(self, article_id: int) -> None:
        """Delete an article. Raises ``ResourceNotFoundException`` if absent."""
        await self._run("article.delete", self._article_repo.delete(article_id))
        logger.info("Article deleted", extra={"article_id": article_id})

    async def _existing_author(self, author_id: int) -> Author:
        try:
            return await self._author_repo.get_by_id(author_id)
        except ResourceNotFoundException as e:
            raise ConflictException(
                "Article references an unknown author",
                {"author_id": author_id}
            ) from e

    async def _ensure_title_free(self, title: str, article_id: Optional[int] = None) -> None:
        existing = await self._article_repo.get_by_title(title)
        if existing is not None and existing.id != article_id:
            raise ConflictException(
                f"Article with title '{title}' already exists",
                {"title": title, "article_id": existing.id}
            )
