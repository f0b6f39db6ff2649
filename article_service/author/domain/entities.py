"""
Author Domain Entities
======================
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class Author:
    """Author entity. Owned by storage, never modified by this service."""

    id: int
    name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
