"""
Tests for Article HTTP Endpoints
================================

Routes, input validation, status-code mapping and middleware, exercised
through FastAPI's TestClient against the in-memory repositories.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from article_service.article.application import ArticleService
from article_service.article.infrastructure import InMemoryArticleRepository
from article_service.article.interfaces.controllers import get_article_service
from article_service.core import DatabaseConnectionException, RepositoryException
from article_service.main import create_app


def _post(client, title="T", content="C", author_id=1):
    return client.post("/articles", json={"title": title, "content": content, "authorId": author_id})


class TestCreateAndGet:

    def test_create_then_get_round_trip(self, client):
        response = _post(client, title="T", content="C", author_id=1)

        assert response.status_code == 201
        created = response.json()
        assert isinstance(created["id"], int)
        assert created["authorId"] == 1

        fetched = client.get(f"/articles/{created['id']}")

        assert fetched.status_code == 200
        body = fetched.json()
        assert body["id"] == created["id"]
        assert body["title"] == "T"
        assert body["content"] == "C"
        assert body["author"] == {"id": 1, "name": "Jane Doe"}
        assert "createdAt" in body and "updatedAt" in body

    def test_create_accepts_snake_case_author_id(self, client):
        response = client.post("/articles", json={"title": "T", "content": "C", "author_id": 2})

        assert response.status_code == 201
        assert response.json()["author"]["name"] == "John Roe"

    def test_create_with_empty_content(self, client):
        response = _post(client, title="Placeholder", content="")

        assert response.status_code == 201
        assert response.json()["content"] == ""

    @pytest.mark.parametrize("body", [
        {"content": "C", "authorId": 1},
        {"title": "T", "authorId": 1},
        {"title": "T", "content": "C"},
        {"title": "", "content": "C", "authorId": 1},
        {"title": "T", "content": "C", "authorId": "one"},
    ])
    def test_create_with_bad_body_is_400(self, client, body):
        response = client.post("/articles", json=body)

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid request"

    def test_create_with_malformed_json_is_400(self, client):
        response = client.post(
            "/articles",
            content="{not json",
            headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400

    def test_create_duplicate_title_is_409(self, client):
        _post(client, title="Dup")

        response = _post(client, title="Dup")

        assert response.status_code == 409

    def test_create_with_unknown_author_is_409(self, client):
        response = _post(client, author_id=77)

        assert response.status_code == 409

    def test_get_non_numeric_id_is_400(self, client):
        response = client.get("/articles/abc")

        assert response.status_code == 400

    def test_get_missing_is_404(self, client):
        response = client.get("/articles/42")

        assert response.status_code == 404
        assert "not found" in response.json()["detail"]

    @pytest.mark.parametrize("method", ["get", "put", "patch", "delete"])
    @pytest.mark.parametrize("article_id", ["0", "-1", "2147483648", "9223372036854775808"])
    def test_id_outside_column_range_is_400(self, client, method, article_id):
        kwargs = {"json": {"title": "X"}} if method in ("put", "patch") else {}

        response = getattr(client, method)(f"/articles/{article_id}", **kwargs)

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid request"

    def test_largest_column_id_is_looked_up(self, client):
        assert client.get("/articles/2147483647").status_code == 404


class TestList:

    @pytest.fixture
    def five_articles(self, client):
        for i in range(5):
            assert _post(client, title=f"Article {i}").status_code == 201

    def test_list_returns_at_most_num(self, client, five_articles):
        response = client.get("/articles", params={"num": 1})

        assert response.status_code == 200
        assert [a["title"] for a in response.json()] == ["Article 4"]

    def test_list_default_page_size(self, client, five_articles):
        response = client.get("/articles")

        assert len(response.json()) == 2

    @pytest.mark.parametrize("num", [0, -5])
    def test_list_non_positive_num_uses_default(self, client, five_articles, num):
        response = client.get("/articles", params={"num": num})

        assert response.status_code == 200
        assert len(response.json()) == 2

    def test_list_num_above_bound_is_clamped(self, client, five_articles):
        response = client.get("/articles", params={"num": 1000})

        assert response.status_code == 200
        assert len(response.json()) == 3

    def test_list_huge_num_is_clamped(self, client, five_articles):
        response = client.get("/articles", params={"num": "9223372036854775808"})

        assert response.status_code == 200
        assert len(response.json()) == 3

    def test_list_non_numeric_num_is_400(self, client):
        response = client.get("/articles", params={"num": "ten"})

        assert response.status_code == 400

    def test_list_embeds_authors(self, client, five_articles):
        body = client.get("/articles", params={"num": 3}).json()

        assert all(a["author"]["name"] == "Jane Doe" for a in body)

    def test_list_empty(self, client):
        response = client.get("/articles")

        assert response.status_code == 200
        assert response.json() == []


class TestUpdate:

    @pytest.mark.parametrize("method", ["put", "patch"])
    def test_update_changes_only_supplied_fields(self, client, method):
        article_id = _post(client, title="Old", content="Body").json()["id"]

        response = getattr(client, method)(f"/articles/{article_id}", json={"title": "New"})

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "New"
        assert body["content"] == "Body"
        assert body["authorId"] == 1

    def test_update_author_reflected_in_embedded_author(self, client):
        article_id = _post(client).json()["id"]

        response = client.put(f"/articles/{article_id}", json={"authorId": 2})

        assert response.json()["author"]["name"] == "John Roe"

    def test_update_twice_gives_same_state(self, client):
        article_id = _post(client).json()["id"]
        patch = {"content": "Edited"}

        first = client.put(f"/articles/{article_id}", json=patch).json()
        second = client.put(f"/articles/{article_id}", json=patch).json()

        assert {k: first[k] for k in ("title", "content", "authorId")} == \
            {k: second[k] for k in ("title", "content", "authorId")}

    def test_update_empty_body_is_400(self, client):
        article_id = _post(client).json()["id"]

        response = client.put(f"/articles/{article_id}", json={})

        assert response.status_code == 400

    def test_update_missing_is_404(self, client):
        response = client.put("/articles/999", json={"title": "X"})

        assert response.status_code == 404

    def test_update_non_numeric_id_is_400(self, client):
        response = client.put("/articles/x1", json={"title": "X"})

        assert response.status_code == 400


class TestDelete:

    def test_delete_then_get_is_404(self, client):
        article_id = _post(client).json()["id"]

        response = client.delete(f"/articles/{article_id}")

        assert response.status_code == 204
        assert response.content == b""
        assert client.get(f"/articles/{article_id}").status_code == 404

    def test_delete_missing_is_404(self, client):
        assert client.delete("/articles/999").status_code == 404


class TestErrorMapping:

    def test_storage_failure_is_500(self, app, client, author_repo):
        article_repo = InMemoryArticleRepository()
        article_repo.get_by_id = AsyncMock(side_effect=RepositoryException("connection refused"))
        app.dependency_overrides[get_article_service] = lambda: ArticleService(
            article_repo, author_repo, timeout=2
        )

        response = client.get("/articles/1")

        assert response.status_code == 500
        # Driver messages are not exposed outside development
        assert response.json()["detail"] == "Storage failure"

    def test_timeout_is_504(self, app, client, author_repo):
        async def slow_fetch(limit):
            await asyncio.sleep(5)
            return []

        article_repo = InMemoryArticleRepository()
        article_repo.fetch = slow_fetch
        app.dependency_overrides[get_article_service] = lambda: ArticleService(
            article_repo, author_repo, timeout=0.1
        )

        response = client.get("/articles")

        assert response.status_code == 504

    def test_error_body_carries_correlation_id(self, client):
        response = client.get("/articles/404", headers={"X-Correlation-ID": "req-123"})

        assert response.json()["correlation_id"] == "req-123"
        assert response.headers["X-Correlation-ID"] == "req-123"


class TestMiddleware:

    def test_cors_headers_on_success(self, client):
        response = client.get("/articles", headers={"Origin": "http://example.com"})

        assert response.status_code == 200
        assert response.headers["Access-Control-Allow-Origin"] == "*"

    def test_cors_headers_on_error(self, client):
        response = client.get("/articles/999", headers={"Origin": "http://example.com"})

        assert response.status_code == 404
        assert response.headers["Access-Control-Allow-Origin"] == "*"

    def test_preflight_is_answered(self, client):
        response = client.options(
            "/articles/1",
            headers={
                "Origin": "http://example.com",
                "Access-Control-Request-Method": "DELETE",
                "Access-Control-Request-Headers": "content-type",
            }
        )

        assert response.status_code == 200
        assert response.headers["Access-Control-Allow-Origin"] == "*"
        assert "DELETE" in response.headers["Access-Control-Allow-Methods"]
        assert response.headers["Access-Control-Allow-Headers"] == "content-type"

    def test_configured_origin_is_echoed(self, settings, article_service):
        settings = settings.model_copy(update={"cors": settings.cors.model_copy(update={"origins": ["http://app.local"]})})
        app = create_app(settings)
        app.dependency_overrides[get_article_service] = lambda: article_service

        response = TestClient(app).get("/articles", headers={"Origin": "http://app.local"})

        assert response.headers["Access-Control-Allow-Origin"] == "http://app.local"


class TestHealth:

    def test_health_ok(self, settings):
        database = AsyncMock()
        client = TestClient(create_app(settings, database=database))

        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["checks"]["database"] == "connected"
        database.ping.assert_awaited_once()

    def test_health_database_down(self, settings):
        database = AsyncMock()
        database.ping.side_effect = DatabaseConnectionException("Database unreachable")
        client = TestClient(create_app(settings, database=database))

        response = client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["service"] == "article-service"

    def test_lifespan_connects_and_closes_database(self, settings):
        database = AsyncMock()

        with TestClient(create_app(settings, database=database)):
            database.connect.assert_awaited_once()

        database.close.assert_awaited_once()

    def test_lifespan_fails_when_database_unreachable(self, settings):
        database = AsyncMock()
        database.connect.side_effect = DatabaseConnectionException("Database unreachable")

        with pytest.raises(DatabaseConnectionException):
            with TestClient(create_app(settings, database=database)):
                pass

        database.close.assert_awaited_once()
