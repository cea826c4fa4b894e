"""
Request field validation shared by the route handlers
"""

import re

from services.responses import APIError


EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
USER_ID_PATTERN = re.compile(r"[0-9]+")

# Upper bound of a PostgreSQL SERIAL column
MAX_USER_ID = 2147483647


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def parse_user_id(raw: str) -> int:
    """
    Parse a path segment into a user id

    Raises:
        APIError: 400 if the segment is not an integer in 1..MAX_USER_ID
    """
    if not USER_ID_PATTERN.fullmatch(raw):
        raise APIError(400, "Invalid user ID")

    user_id = int(raw)
    if user_id <= 0 or user_id > MAX_USER_ID:
        raise APIError(400, "Invalid user ID")
    return user_id
