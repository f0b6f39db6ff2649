"""
Article Infrastructure Models
=============================

SQLAlchemy ORM model for the 'article' table.
"""

from datetime import datetime, timezone

from sqlalchemy import String, DateTime, Integer, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from article_service.infrastructure.database import Base
# The foreign key below needs the author table registered on Base.metadata
from article_service.author.infrastructure.models import AuthorModel  # noqa: F401


class ArticleModel(Base):
    """
    Database model for Article entity.

    Maps to the 'article' table.
    """
    __tablename__ = "article"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(300), nullable=False, unique=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    author_id: Mapped[int] = mapped_column(Integer, ForeignKey("author.id"), nullable=False, index=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
