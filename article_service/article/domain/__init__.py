"""
Article Domain Layer
====================

Pure Python entities with no infrastructure dependencies.
"""

from article_service.article.domain.entities import Article, UPDATABLE_FIELDS

__all__ = ["Article", "UPDATABLE_FIELDS"]
