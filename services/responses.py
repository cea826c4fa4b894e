"""
Response Envelope
Every endpoint answers with {status, message, data?, error?, timestamp}
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from loguru import logger


class APIError(Exception):
    """
    Error rendered as an error envelope

    Args:
        status_code: HTTP status code
        message: Human readable message
        error: Underlying error text, echoed to the client
        extra: Additional top-level envelope keys
    """

    def __init__(self, status_code: int, message: str, error: Optional[str] = None,
                 **extra: Any):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.error = error
        self.extra = extra


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision"""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def success_response(message: str, data: Any = None, status_code: int = 200,
                     **extra: Any) -> JSONResponse:
    content: Dict[str, Any] = {"status": "success", "message": message}
    if data is not None:
        content["data"] = data
    content.update(extra)
    content["timestamp"] = utc_timestamp()
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))


def error_response(status_code: int, message: str, error: Optional[str] = None,
                   **extra: Any) -> JSONResponse:
    content: Dict[str, Any] = {"status": "error", "message": message}
    if error is not None:
        content["error"] = error
    content.update(extra)
    content["timestamp"] = utc_timestamp()
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))


def _describe_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(item) for item in err.get("loc", ()))
        parts.append(f"{location}: {err.get('msg')}")
    return "; ".join(parts)


def register_exception_handlers(app: FastAPI):
    """Render every error raised by the app as an error envelope"""

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        return error_response(exc.status_code, exc.message, exc.error, **exc.extra)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return error_response(400, "Invalid request parameters", _describe_validation_errors(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return error_response(500, "Internal server error", str(exc))
