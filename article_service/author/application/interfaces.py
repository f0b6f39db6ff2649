"""
Author Repository Interface
===========================
"""

from abc import ABC, abstractmethod

from article_service.author.domain import Author


class IAuthorRepository(ABC):
    """Interface for author data access."""

    @abstractmethod
    async def get_by_id(self, author_id: int) -> Author:
        """
        Get author by ID.

        Raises:
            ResourceNotFoundException: No author with this ID
            RepositoryException: Storage failure
        """
