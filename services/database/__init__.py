"""
Database Service Module
Handles PostgreSQL pooling and user persistence
"""

from .postgres_manager import PostgresManager, DatabaseNotInitializedError
from .user_repository import UserRepository, DuplicateEmailError
from .models import User

__all__ = ['PostgresManager', 'DatabaseNotInitializedError', 'UserRepository', 'DuplicateEmailError', 'User']
