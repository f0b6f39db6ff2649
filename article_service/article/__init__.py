"""
Article Module
==============

Bounded context for articles.

Responsibilities:
- Persist articles (fetch, list, create, update, delete)
- Enrich article reads with their author
- Bound every operation by the configured per-request timeout
- Expose the CRUD API under /articles
"""

__version__ = "1.0.0"
