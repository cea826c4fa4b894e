"""Tests for environment configuration loading."""

from __future__ import annotations

import pytest

from core import config as config_module
from core.config import ConfigError, load_config, load_database_config

DB_VARS = ["DB_HOST", "DB_PORT", "DB_USER", "DB_PASSWORD", "DB_NAME", "DB_CONNECTION_LIMIT",
           "API_HOST", "API_PORT", "LOG_LEVEL", "LOG_FILE"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in DB_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config_module, "ENV_PATH", tmp_path / "missing.env")


@pytest.fixture
def required_env(monkeypatch):
    monkeypatch.setenv("DB_HOST", "localhost")
    monkeypatch.setenv("DB_USER", "postgres")
    monkeypatch.setenv("DB_PASSWORD", "secret")


class TestDatabaseConfig:
    def test_defaults(self, required_env):
        config = load_database_config()

        assert config.port == 5432
        assert config.database == "group_project"
        assert config.connection_limit == 10

    def test_overrides(self, required_env, monkeypatch):
        monkeypatch.setenv("DB_PORT", "6543")
        monkeypatch.setenv("DB_NAME", "users")
        monkeypatch.setenv("DB_CONNECTION_LIMIT", "3")

        config = load_database_config()

        assert config.port == 6543
        assert config.database == "users"
        assert config.connection_limit == 3

    def test_missing_fields_listed(self, monkeypatch):
        monkeypatch.setenv("DB_HOST", "localhost")

        with pytest.raises(ConfigError, match="user, password"):
            load_database_config()

    @pytest.mark.parametrize("port", ["0", "70000", "-5"])
    def test_port_out_of_range(self, required_env, monkeypatch, port):
        monkeypatch.setenv("DB_PORT", port)

        with pytest.raises(ConfigError, match="port"):
            load_database_config()

    def test_non_numeric_port(self, required_env, monkeypatch):
        monkeypatch.setenv("DB_PORT", "abc")

        with pytest.raises(ConfigError, match="DB_PORT"):
            load_database_config()

    def test_connection_limit_must_be_positive(self, required_env, monkeypatch):
        monkeypatch.setenv("DB_CONNECTION_LIMIT", "0")

        with pytest.raises(ConfigError):
            load_database_config()

    def test_masked_hides_password(self, required_env):
        masked = load_database_config().masked()

        assert masked == {"host": "localhost", "port": 5432, "user": "postgres"}


class TestServiceConfig:
    def test_api_and_logging_settings(self, required_env, monkeypatch):
        monkeypatch.setenv("API_PORT", "8080")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        config = load_config()

        assert config.api_host == "0.0.0.0"
        assert config.api_port == 8080
        assert config.log_level == "DEBUG"
        assert config.log_file is None

    def test_invalid_database_config_is_fatal(self):
        with pytest.raises(ConfigError):
            load_config()
