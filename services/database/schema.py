"""
Database Schema
DDL for the users table
"""

from loguru import logger

from .postgres_manager import PostgresManager


USERS_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS users (
    id          SERIAL PRIMARY KEY,
    name        VARCHAR(100) NOT NULL,
    email       VARCHAR(255) NOT NULL,
    created_at  TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at  TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    CONSTRAINT users_email_key UNIQUE (email)
);
"""


def create_tables(db: PostgresManager):
    """
    Create the users table if it does not exist

    Safe to call multiple times (uses IF NOT EXISTS).

    Args:
        db: Initialized PostgresManager
    """
    with db.transaction() as connection:
        with connection.cursor() as cursor:
            cursor.execute(USERS_TABLE_SQL)
    logger.info("✅ Database schema ready")
