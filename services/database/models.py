"""
Database Models
Defines data structures for the users table and API payloads
"""

from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime


class User(BaseModel):
    """User model matching the PostgreSQL users table"""
    id: int = Field(..., examples=[1])
    name: str = Field(..., examples=["Li Si"])
    email: str = Field(..., examples=["lisi@example.com"])
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserCreate(BaseModel):
    """Request body for creating a user"""
    name: Optional[str] = Field(None, max_length=100, examples=["Li Si"])
    email: Optional[str] = Field(None, max_length=255, examples=["lisi@example.com"])


class UserUpdate(BaseModel):
    """Request body for updating a user, every field optional"""
    name: Optional[str] = Field(None, max_length=100, examples=["Wang Wu"])
    email: Optional[str] = Field(None, max_length=255, examples=["wangwu@example.com"])


class DatabaseTestRequest(BaseModel):
    """Optional operations for POST /api/database/test"""
    databaseName: Optional[str] = None
    tableName: Optional[str] = None
    query: Optional[str] = None


class Envelope(BaseModel):
    """Fixed JSON response shape shared by every endpoint"""
    status: str = Field(..., examples=["success"])
    message: str
    data: Optional[Any] = None
    error: Optional[str] = None
    timestamp: datetime


class UserEnvelope(Envelope):
    data: Optional[User] = None


class UserListEnvelope(Envelope):
    data: List[User] = []
    count: int = Field(..., examples=[5])
    total: int = Field(..., examples=[42])


class ErrorEnvelope(Envelope):
    status: str = Field("error", examples=["error"])
