"""
Unified error handling for consistent API error responses.

All API errors should use these classes to ensure consistent response format:
{
    "error": {
        "code": "ERROR_CODE",
        "message": "Human-readable message",
        "detail": "Optional additional context"
    }
}
"""

from typing import Any

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from ..core.types import BALANCE_ERROR


class APIError(HTTPException):
    """Base API error class for consistent error responses."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        detail: str | None = None,
        headers: dict[str, str] | None = None,
    ):
        self.code = code
        self.message = message
        self.error_detail = detail
        super().__init__(
            status_code=status_code,
            detail={"code": code, "message": message, "detail": detail},
            headers=headers,
        )


class NotFoundError(APIError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: Any = None,
        message: str | None = None,
        detail: str | None = None,
    ):
        super().__init__(
            status_code=404,
            code="NOT_FOUND",
            message=message or f"{resource} not found",
            detail=detail or f"{resource} with ID {identifier}",
        )


class ValidationError(APIError):
    """Invalid input (400)."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(
            status_code=400,
            code="VALIDATION_ERROR",
            message=message,
            detail=detail,
        )


class BalanceError(APIError):
    """Manager cannot afford the requested spend (400)."""

    def __init__(self, points: int, required: int):
        super().__init__(
            status_code=400,
            code="INSUFFICIENT_POINTS",
            message=BALANCE_ERROR,
            detail=f"Check your balance: {points} points available, {required} required",
        )


class MalformedResultAPIError(APIError):
    """Stored season data cannot be aggregated (400)."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=400,
            code="MALFORMED_RESULT",
            message="Season contains a malformed result",
            detail=detail,
        )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """
    FastAPI exception handler for APIError.

    Converts APIError exceptions to consistent JSON responses.
    """
    content = {
        "error": {
            "code": exc.code,
            "message": exc.message,
        }
    }
    if exc.error_detail:
        content["error"]["detail"] = exc.error_detail

    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=exc.headers,
    )
