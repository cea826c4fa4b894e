"""Shared fixtures for the users API tests."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from core.config import DatabaseConfig, ServiceConfig
from services.database import DuplicateEmailError, User
from services.database_service import create_app
from services.dependencies import get_user_repository


class FakeUserRepository:
    """In-memory stand-in for UserRepository."""

    def __init__(self):
        self.users: Dict[int, User] = {}
        self.next_id = 1
        self.failure: Optional[Exception] = None

    def ensure_ready(self):
        pass

    def _check(self):
        if self.failure is not None:
            raise self.failure

    def list_users(self, limit: int = 10, offset: int = 0) -> List[User]:
        self._check()
        ordered = [self.users[key] for key in sorted(self.users)]
        return ordered[offset:offset + limit]

    def count_users(self) -> int:
        self._check()
        return len(self.users)

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        self._check()
        return self.users.get(user_id)

    def user_exists(self, user_id: int) -> bool:
        self._check()
        return user_id in self.users

    def email_taken(self, email: str, exclude_id: Optional[int] = None) -> bool:
        self._check()
        return any(
            user.email == email and user.id != exclude_id for user in self.users.values()
        )

    def create_user(self, name: str, email: str) -> int:
        self._check()
        if any(user.email == email for user in self.users.values()):
            raise DuplicateEmailError(email)
        now = datetime.now(timezone.utc)
        user = User(id=self.next_id, name=name, email=email, created_at=now, updated_at=now)
        self.users[user.id] = user
        self.next_id += 1
        return user.id

    def update_user(self, user_id: int, name: Optional[str] = None,
                    email: Optional[str] = None) -> int:
        self._check()
        user = self.users.get(user_id)
        if user is None:
            return 0
        changes = {"updated_at": datetime.now(timezone.utc)}
        if name is not None:
            changes["name"] = name
        if email is not None:
            changes["email"] = email
        self.users[user_id] = user.model_copy(update=changes)
        return 1

    def delete_user(self, user_id: int) -> int:
        self._check()
        return 1 if self.users.pop(user_id, None) is not None else 0


@pytest.fixture
def database_config() -> DatabaseConfig:
    return DatabaseConfig(host="db.local", port=5432, user="tester", password="secret")


@pytest.fixture
def service_config(database_config) -> ServiceConfig:
    return ServiceConfig(database=database_config, log_level="WARNING")


@pytest.fixture
def fake_db(database_config) -> MagicMock:
    db = MagicMock()
    db.config = database_config
    db.is_initialized = True
    return db


@pytest.fixture
def repo() -> FakeUserRepository:
    return FakeUserRepository()


@pytest.fixture
def app(service_config, fake_db, repo):
    application = create_app(service_config, db=fake_db)
    application.dependency_overrides[get_user_repository] = lambda: repo
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
