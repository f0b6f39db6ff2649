"""
Author Application Layer
========================

Repository interface consumed by other modules.
"""

from article_service.author.application.interfaces import IAuthorRepository

__all__ = ["IAuthorRepository"]
