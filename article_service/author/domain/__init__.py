"""
Author Domain Layer
===================

Pure Python entities with no infrastructure dependencies.
"""

from article_service.author.domain.entities import Author

__all__ = ["Author"]
