"""
Article Domain Entities
=======================
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from article_service.author.domain import Author


# Fields a client may change after creation
UPDATABLE_FIELDS = frozenset({"title", "content", "author_id"})


@dataclass
class Article:
    """
    Article entity.

    ``id`` and the timestamps are assigned by storage. ``author`` is only
    populated on reads that resolve the referenced author.
    """

    id: Optional[int]
    title: str
    content: str
    author_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    author: Optional[Author] = None
