"""
Article Interfaces Layer
========================

Interface adapters (controllers) for the article module.

This is the outermost layer - handles HTTP requests/responses and
delegates to application services.
"""

from article_service.article.interfaces.controllers import article_router

__all__ = ["article_router"]
