"""
PyTest Configuration and Fixtures
=================================

Shared fixtures for the Article Service tests.

HTTP tests run against the real FastAPI app with ``get_article_service``
overridden to use the in-memory repositories, so no database is needed.
"""

import pytest
from fastapi.testclient import TestClient

from article_service.article.application import ArticleService
from article_service.article.infrastructure import InMemoryArticleRepository
from article_service.article.interfaces.controllers import get_article_service
from article_service.author.domain import Author
from article_service.author.infrastructure import InMemoryAuthorRepository
from article_service.config import Settings
from article_service.main import create_app


@pytest.fixture
def settings():
    """Settings with small page limits so clamping is easy to observe."""
    return Settings(
        environment="test",
        context={"timeout": 2},
        articles={"default_page_size": 2, "max_page_size": 3},
    )


@pytest.fixture
def author_repo():
    return InMemoryAuthorRepository([
        Author(id=1, name="Jane Doe"),
        Author(id=2, name="John Roe"),
    ])


@pytest.fixture
def article_repo(author_repo):
    return InMemoryArticleRepository(authors=author_repo)


@pytest.fixture
def article_service(article_repo, author_repo, settings):
    return ArticleService(article_repo, author_repo, timeout=settings.context.timeout)


@pytest.fixture
def app(settings, article_service):
    app = create_app(settings)
    app.dependency_overrides[get_article_service] = lambda: article_service
    return app


@pytest.fixture
def client(app):
    """Client without lifespan: no database connection is attempted."""
    return TestClient(app)
