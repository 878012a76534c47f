"""
Shared API utilities for the quiz service.

This module provides:
- The standard success/error response envelope
- Exception handlers mapping quiz errors to HTTP responses
- Registration of the handlers on an application
"""

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from pmpquiz.common.error_handling import (
    NoCurrentQuestionError, QuizError, SessionNotFoundError, error_response, log_error
)

logger = logging.getLogger(__name__)

API_PREFIX = "/api/quiz"
START_PATH = f"{API_PREFIX}/start"
SUMMARY_PATH = f"{API_PREFIX}/summary"

# Where the client should go next for each recoverable error
REDIRECTS = {
    SessionNotFoundError: START_PATH,
    NoCurrentQuestionError: SUMMARY_PATH,
}


class APIResponse:
    """Standard API response structure"""

    @staticmethod
    def success(data: Any = None, message: str = "Success") -> Dict[str, Any]:
        """
        Create a success response.

        Args:
            data: Response data
            message: Success message

        Returns:
            Response dictionary
        """
        return {
            "status": "success",
            "message": message,
            "data": data
        }

    @staticmethod
    def error(message: str, details: Optional[Any] = None,
              code: Optional[str] = None) -> Dict[str, Any]:
        """
        Create an error response.

        Args:
            message: Error message
            details: Optional error details
            code: Optional error code

        Returns:
            Response dictionary
        """
        response: Dict[str, Any] = {
            "status": "error",
            "message": message
        }

        if details:
            response["details"] = details

        if code:
            response["code"] = code

        return response


async def quiz_error_handler(request: Request, exc: QuizError) -> JSONResponse:
    """
    Turn a QuizError into an error response.

    Recoverable flow errors carry a ``redirect`` detail telling the client
    which action to take next.
    """
    log_error(exc, context={"path": request.url.path}, log=logger)

    content = error_response(exc)
    redirect = REDIRECTS.get(type(exc))
    if redirect:
        content.setdefault("details", {})["redirect"] = redirect

    return JSONResponse(status_code=exc.http_status, content=content)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log an unexpected error and answer with a generic 500."""
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=APIResponse.error("Internal server error", code="unknown_error")
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle validation errors and return a standardized response.

    Args:
        request: The incoming request
        exc: The validation exception

    Returns:
        A JSON response with error details
    """
    error_details = []
    for error in exc.errors():
        error_details.append({
            "location": list(error.get("loc", [])),
            "message": error.get("msg", "Unknown validation error"),
            "type": error.get("type", "")
        })

    return JSONResponse(
        status_code=422,
        content=APIResponse.error("Validation error", details=error_details, code="validation_error")
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the quiz exception handlers on an application."""
    app.add_exception_handler(QuizError, quiz_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
