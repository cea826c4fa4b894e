"""
Service Configuration
Loads database, API and logging settings from environment variables
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel


ENV_PATH = Path(__file__).parent.parent / "configs" / ".env"

REQUIRED_DB_FIELDS = ("host", "user", "password")


class ConfigError(ValueError):
    """Raised when a required setting is missing or out of range"""


class DatabaseConfig(BaseModel):
    """Connection parameters for the PostgreSQL pool"""
    host: str = ""
    port: int = 5432
    user: str = ""
    password: str = ""
    database: str = "group_project"
    connection_limit: int = 10

    def validate_settings(self) -> "DatabaseConfig":
        """
        Check that required fields are present and numeric fields are in range

        Returns:
            self, so calls can be chained

        Raises:
            ConfigError: If any field is missing or invalid
        """
        missing = [field for field in REQUIRED_DB_FIELDS if not getattr(self, field)]
        if missing:
            raise ConfigError(
                f"Missing required database configuration fields: {', '.join(missing)}"
            )

        if self.port <= 0 or self.port > 65535:
            raise ConfigError("Invalid database port number")

        if self.connection_limit < 1:
            raise ConfigError("Database connection limit must be at least 1")

        return self

    def masked(self) -> dict:
        """Connection details that are safe to return to clients"""
        return {"host": self.host, "port": self.port, "user": self.user}


class ServiceConfig(BaseModel):
    """Top-level settings for the users API service"""
    database: DatabaseConfig
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    log_level: str = "INFO"
    log_file: Optional[str] = None


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}")


def load_database_config() -> DatabaseConfig:
    """
    Build a DatabaseConfig from DB_* environment variables

    Returns:
        Validated DatabaseConfig

    Raises:
        ConfigError: If required variables are missing or invalid
    """
    if ENV_PATH.exists():
        load_dotenv(ENV_PATH)

    config = DatabaseConfig(
        host=os.getenv("DB_HOST", ""),
        port=_int_env("DB_PORT", 5432),
        user=os.getenv("DB_USER", ""),
        password=os.getenv("DB_PASSWORD", ""),
        database=os.getenv("DB_NAME") or "group_project",
        connection_limit=_int_env("DB_CONNECTION_LIMIT", 10),
    )
    return config.validate_settings()


def load_config() -> ServiceConfig:
    """
    Load the full service configuration

    Returns:
        ServiceConfig with a validated database section

    Raises:
        ConfigError: If any setting is missing or invalid
    """
    database = load_database_config()
    return ServiceConfig(
        database=database,
        api_host=os.getenv("API_HOST", "0.0.0.0"),
        api_port=_int_env("API_PORT", 3000),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_file=os.getenv("LOG_FILE") or None,
    )
