"""
Users API
CRUD endpoints for the users table
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from loguru import logger

from services.database import DuplicateEmailError, UserRepository
from services.database.models import ErrorEnvelope, UserCreate, UserEnvelope, UserListEnvelope, UserUpdate
from services.dependencies import get_user_repository
from services.responses import APIError, success_response
from services.validation import is_valid_email, parse_user_id

router = APIRouter(prefix="/api/users", tags=["Users"])

ERROR_RESPONSES = {
    400: {"model": ErrorEnvelope, "description": "Invalid request parameters"},
    404: {"model": ErrorEnvelope, "description": "User not found"},
    500: {"model": ErrorEnvelope, "description": "Server error"},
}


def _clean_name(name: Optional[str]) -> Optional[str]:
    if name is None or not name.strip():
        return None
    return name.strip()


@router.get(
    "",
    response_model=UserListEnvelope,
    responses={k: ERROR_RESPONSES[k] for k in (400, 500)},
    summary="List users",
)
def list_users(
    limit: int = Query(10, ge=1, le=100, description="Maximum number of users to return"),
    offset: int = Query(0, ge=0, description="Number of users to skip"),
    repo: UserRepository = Depends(get_user_repository),
):
    """Get a page of users along with the total number of users"""
    try:
        repo.ensure_ready()
        users = repo.list_users(limit=limit, offset=offset)
        total = repo.count_users()
    except Exception as e:
        logger.error(f"Error fetching users: {e}")
        raise APIError(500, "Failed to retrieve users", error=str(e))

    return success_response(
        "Users retrieved successfully", users, count=len(users), total=total
    )


@router.post(
    "",
    status_code=201,
    response_model=UserEnvelope,
    responses={k: ERROR_RESPONSES[k] for k in (400, 500)},
    summary="Create a user",
)
def create_user(user_data: UserCreate, repo: UserRepository = Depends(get_user_repository)):
    """
    Create a new user

    The email must be unique; duplicates are rejected with 400.
    """
    name = _clean_name(user_data.name)
    email = user_data.email

    if not name or not email:
        raise APIError(400, "Name and email are required fields")

    if not is_valid_email(email):
        raise APIError(400, "Invalid email format")

    try:
        repo.ensure_ready()
        if repo.email_taken(email):
            raise APIError(400, "Email already exists")

        user_id = repo.create_user(name, email)
        user = repo.get_user_by_id(user_id)
    except APIError:
        raise
    except DuplicateEmailError:
        raise APIError(400, "Email already exists")
    except Exception as e:
        logger.error(f"Error creating user: {e}")
        raise APIError(500, "Failed to create user", error=str(e))

    return success_response("User created successfully", user, status_code=201)


@router.get(
    "/{user_id}",
    response_model=UserEnvelope,
    responses=ERROR_RESPONSES,
    summary="Get a user by ID",
)
def get_user(user_id: str, repo: UserRepository = Depends(get_user_repository)):
    """Get a single user"""
    uid = parse_user_id(user_id)

    try:
        repo.ensure_ready()
        user = repo.get_user_by_id(uid)
    except Exception as e:
        logger.error(f"Error fetching user {uid}: {e}")
        raise APIError(500, "Failed to retrieve user", error=str(e))

    if user is None:
        raise APIError(404, "User not found")

    return success_response("User retrieved successfully", user)


@router.put(
    "/{user_id}",
    response_model=UserEnvelope,
    responses=ERROR_RESPONSES,
    summary="Update a user",
)
def update_user(user_id: str, user_data: UserUpdate,
                repo: UserRepository = Depends(get_user_repository)):
    """
    Partially update a user

    At least one of name or email must be given. A new email must not be
    used by another user.
    """
    uid = parse_user_id(user_id)
    name = _clean_name(user_data.name)
    email = user_data.email or None

    if name is None and email is None:
        raise APIError(400, "At least one field must be provided for update")

    if email is not None and not is_valid_email(email):
        raise APIError(400, "Invalid email format")

    try:
        repo.ensure_ready()
        if not repo.user_exists(uid):
            raise APIError(404, "User not found")

        if email is not None and repo.email_taken(email, exclude_id=uid):
            raise APIError(400, "Email already used by another user")

        affected = repo.update_user(uid, name=name, email=email)
        if affected == 0:
            raise APIError(500, "Update failed")

        user = repo.get_user_by_id(uid)
    except APIError:
        raise
    except DuplicateEmailError:
        raise APIError(400, "Email already used by another user")
    except Exception as e:
        logger.error(f"Error updating user {uid}: {e}")
        raise APIError(500, "Failed to update user", error=str(e))

    return success_response("User updated successfully", user)


@router.delete(
    "/{user_id}",
    response_model=UserEnvelope,
    responses=ERROR_RESPONSES,
    summary="Delete a user",
)
def delete_user(user_id: str, repo: UserRepository = Depends(get_user_repository)):
    """Hard-delete a user and return the deleted record"""
    uid = parse_user_id(user_id)

    try:
        repo.ensure_ready()
        user = repo.get_user_by_id(uid)
        if user is None:
            raise APIError(404, "User not found")

        affected = repo.delete_user(uid)
        if affected == 0:
            raise APIError(500, "Delete failed")
    except APIError:
        raise
    except Exception as e:
        logger.error(f"Error deleting user {uid}: {e}")
        raise APIError(500, "Failed to delete user", error=str(e))

    return success_response("User deleted successfully", user)
