"""
Tests for Configuration Loading
===============================
"""

import json

import pytest

from article_service.config import Settings, load_settings
from article_service.core import ConfigurationException
from article_service.infrastructure.database import build_database_url
from article_service.main import main


CONFIG = {
    "debug": True,
    "server": {"address": ":9090"},
    "context": {"timeout": 2},
    "database": {
        "host": "db.internal",
        "port": "5432",
        "user": "user",
        "pass": "password",
        "name": "article"
    }
}


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ("ARTICLES_CONFIG", "ARTICLES_DEBUG", "ARTICLES_CONTEXT__TIMEOUT"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(CONFIG))
    return path


class TestLoadSettings:

    def test_load_json(self, config_file):
        settings = load_settings(config_file)

        assert settings.debug is True
        assert settings.context.timeout == 2
        assert settings.database.host == "db.internal"
        assert settings.database.port == 5432
        assert settings.database.password == "password"
        assert settings.server.host == "0.0.0.0"
        assert settings.server.port == 9090

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "debug: false\n"
            "server:\n"
            "  address: 127.0.0.1:8080\n"
            "context:\n"
            "  timeout: 5\n"
        )

        settings = load_settings(path)

        assert settings.debug is False
        assert settings.server.host == "127.0.0.1"
        assert settings.server.port == 8080
        assert settings.context.timeout == 5

    def test_path_from_environment(self, config_file, monkeypatch):
        monkeypatch.setenv("ARTICLES_CONFIG", str(config_file))

        assert load_settings().database.host == "db.internal"

    def test_environment_overrides_file(self, config_file, monkeypatch):
        monkeypatch.setenv("ARTICLES_CONTEXT__TIMEOUT", "7")

        settings = load_settings(config_file)

        assert settings.context.timeout == 7
        assert settings.database.host == "db.internal"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationException):
            load_settings(tmp_path / "nope.json")

    def test_malformed_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{debug: true")

        with pytest.raises(ConfigurationException):
            load_settings(path)

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("[1, 2]")

        with pytest.raises(ConfigurationException):
            load_settings(path)

    @pytest.mark.parametrize("override", [
        {"context": {"timeout": 0}},
        {"server": {"address": "localhost"}},
        {"database": {"port": "not-a-port"}},
        {"articles": {"default_page_size": 50, "max_page_size": 10}},
    ])
    def test_invalid_values(self, tmp_path, override):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({**CONFIG, **override}))

        with pytest.raises(ConfigurationException):
            load_settings(path)


class TestSettings:

    def test_defaults(self):
        settings = Settings()

        assert settings.context.timeout == 2
        assert settings.cors.origins == ["*"]
        assert settings.articles.max_page_size >= settings.articles.default_page_size

    def test_debug_forces_debug_log_level(self):
        assert Settings(debug=True, log_level="warning").effective_log_level == "DEBUG"
        assert Settings(debug=False, log_level="warning").effective_log_level == "WARNING"

    def test_database_url(self, config_file):
        url = build_database_url(load_settings(config_file).database)

        assert url.drivername == "postgresql+asyncpg"
        assert url.host == "db.internal"
        assert url.port == 5432
        assert url.database == "article"
        assert url.query["ssl"] == "disable"
        assert "password" not in url.render_as_string(hide_password=True)


class TestMain:

    def test_unreadable_config_exits_non_zero(self, tmp_path, monkeypatch):
        monkeypatch.setattr("article_service.main.setup_logging", lambda *args, **kwargs: None)

        with pytest.raises(SystemExit) as exc_info:
            main(["--config", str(tmp_path / "missing.json")])

        assert exc_info.value.code == 1
