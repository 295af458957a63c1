"""
errors.py — API Error Taxonomy & Exception Handlers

Purpose:
- Define the expected, user-facing failure outcomes as one exception hierarchy.
- Render every failure with the uniform body:
      {"error": {"code": ..., "message": ..., "details": [...]?}}
  `details` is only present for VALIDATION_ERROR.
- Register FastAPI exception handlers (called once from main.py).

None of these errors are fatal to the process. Anything not in the taxonomy is
logged with its traceback and surfaces as a generic 500.
"""

from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.logging import get_logger

logger = get_logger(__name__)


# -----------------------------------------------------------------------------
# Error Hierarchy
# -----------------------------------------------------------------------------

class ApiError(Exception):
    """Base class for every structured API failure."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Optional[List[Dict[str, str]]] = None):
        self.message = message or self.message
        self.details = details
        super().__init__(self.message)

    def to_body(self) -> Dict[str, Any]:
        error: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details is not None:
            error["details"] = self.details
        return {"error": error}


class ValidationFailed(ApiError):
    status_code = 422
    code = "VALIDATION_ERROR"
    message = "Request validation failed"


class AuthMissing(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "AUTH_MISSING"
    message = "Missing or invalid Authorization header"


class AuthInvalid(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "AUTH_INVALID"
    message = "Invalid or expired token"


class Forbidden(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"
    message = "Insufficient permissions"


class EmailExists(ApiError):
    status_code = status.HTTP_409_CONFLICT
    code = "EMAIL_EXISTS"
    message = "An account with this email already exists"


class InvalidCredentials(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "INVALID_CREDENTIALS"
    message = "Invalid email or password"


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"
    message = "Resource not found"


class InvalidProduct(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "INVALID_PRODUCT"

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Invalid productId: {product_id}")


# -----------------------------------------------------------------------------
# Handlers
# -----------------------------------------------------------------------------

async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Router-level HTTP errors. Unknown paths and unsupported methods on known
    paths both render as NOT_FOUND.
    """
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        return await api_error_handler(request, NotFound("Route not found"))

    body = {"error": {"code": "HTTP_ERROR", "message": str(exc.detail)}}
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ApiError().to_body(),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
