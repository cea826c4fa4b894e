"""
User Repository
Parameterized SQL for the users table, built on PostgresManager primitives
"""

from typing import List, Optional

from psycopg2 import errors
from loguru import logger

from .models import User
from .postgres_manager import PostgresManager


USER_COLUMNS = "id, name, email, created_at, updated_at"


class DuplicateEmailError(Exception):
    """Raised when a write hits the unique constraint on users.email"""

    def __init__(self, email: str):
        super().__init__(f"Email already exists: {email}")
        self.email = email


class UserRepository:
    """Repository for CRUD operations on the users table"""

    def __init__(self, db: PostgresManager):
        self.db = db

    def ensure_ready(self):
        """Open the pool on first use"""
        if not self.db.is_initialized:
            self.db.initialize()

    def list_users(self, limit: int = 10, offset: int = 0) -> List[User]:
        """
        Get a page of users ordered by id

        Args:
            limit: Maximum number of users
            offset: Number of users to skip

        Returns:
            List of User objects
        """
        rows = self.db.query(
            f"SELECT {USER_COLUMNS} FROM users ORDER BY id LIMIT %s OFFSET %s",
            (limit, offset),
        )
        return [User(**row) for row in rows]

    def count_users(self) -> int:
        row = self.db.query_one("SELECT COUNT(*) AS total FROM users")
        return int(row["total"]) if row else 0

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        row = self.db.query_one(f"SELECT {USER_COLUMNS} FROM users WHERE id = %s", (user_id,))
        return User(**row) if row else None

    def user_exists(self, user_id: int) -> bool:
        return self.db.query_one("SELECT id FROM users WHERE id = %s", (user_id,)) is not None

    def email_taken(self, email: str, exclude_id: Optional[int] = None) -> bool:
        """
        Check whether an email is already used

        Args:
            email: Exact, case-sensitive email to look for
            exclude_id: User id to ignore (the user being updated)
        """
        if exclude_id is None:
            row = self.db.query_one("SELECT id FROM users WHERE email = %s", (email,))
        else:
            row = self.db.query_one(
                "SELECT id FROM users WHERE email = %s AND id != %s", (email, exclude_id)
            )
        return row is not None

    def create_user(self, name: str, email: str) -> int:
        """
        Insert a user

        Returns:
            Generated user id

        Raises:
            DuplicateEmailError: If the email is already stored
        """
        try:
            user_id = self.db.insert(
                "INSERT INTO users (name, email, created_at, updated_at) "
                "VALUES (%s, %s, NOW(), NOW()) RETURNING id",
                (name, email),
            )
        except errors.UniqueViolation:
            raise DuplicateEmailError(email)

        logger.info(f"✅ Created user: {name} (id: {user_id})")
        return user_id

    def update_user(self, user_id: int, name: Optional[str] = None, email: Optional[str] = None) -> int:
        """
        Update the given fields of a user and bump updated_at

        Args:
            user_id: User ID to update
            name: New name, left unchanged if None
            email: New email, left unchanged if None

        Returns:
            Number of affected rows

        Raises:
            DuplicateEmailError: If the new email is already stored
        """
        update_fields = []
        values = []

        if name is not None:
            update_fields.append("name = %s")
            values.append(name)

        if email is not None:
            update_fields.append("email = %s")
            values.append(email)

        update_fields.append("updated_at = NOW()")
        values.append(user_id)

        try:
            affected = self.db.execute(
                f"UPDATE users SET {', '.join(update_fields)} WHERE id = %s", values
            )
        except errors.UniqueViolation:
            raise DuplicateEmailError(email)

        logger.info(f"✅ Updated user ID: {user_id}")
        return affected

    def delete_user(self, user_id: int) -> int:
        """Hard-delete a user, returning the number of affected rows"""
        affected = self.db.execute("DELETE FROM users WHERE id = %s", (user_id,))
        logger.info(f"✅ Deleted user ID: {user_id}")
        return affected
