"""Tests for the users table DDL."""

from __future__ import annotations

from unittest.mock import MagicMock

from services.database.schema import USERS_TABLE_SQL, create_tables


def test_users_table_has_unique_email():
    assert "CREATE TABLE IF NOT EXISTS users" in USERS_TABLE_SQL
    assert "UNIQUE (email)" in USERS_TABLE_SQL


def test_create_tables_runs_ddl_in_transaction():
    db = MagicMock()
    connection = db.transaction.return_value.__enter__.return_value
    cursor = connection.cursor.return_value.__enter__.return_value

    create_tables(db)

    db.transaction.assert_called_once()
    cursor.execute.assert_called_once_with(USERS_TABLE_SQL)
