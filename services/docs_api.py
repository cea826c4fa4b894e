"""
API Documentation
Serves the generated OpenAPI document and a Swagger UI viewer
"""

from typing import Optional

from fastapi import APIRouter, Query, Request
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.responses import JSONResponse

router = APIRouter(tags=["Docs"])

OPENAPI_JSON_URL = "/api/docs?format=json"


@router.get("/api/docs", include_in_schema=False)
def api_docs(request: Request, format: Optional[str] = Query(None)):
    """OpenAPI JSON when format=json, otherwise the Swagger UI page"""
    if format == "json":
        return JSONResponse(request.app.openapi())

    return get_swagger_ui_html(
        openapi_url=OPENAPI_JSON_URL,
        title=f"{request.app.title} - API Documentation",
    )
