"""
FastAPI dependencies
Hand the pool handle stored on app.state to the route handlers
"""

from fastapi import Depends, Request

from services.database import PostgresManager, UserRepository


def get_database(request: Request) -> PostgresManager:
    """The PostgresManager created by the application factory"""
    return request.app.state.db


def get_user_repository(db: PostgresManager = Depends(get_database)) -> UserRepository:
    """UserRepository over the shared pool; handlers call ensure_ready() before querying"""
    return UserRepository(db)
