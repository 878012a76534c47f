"""
Error Handling System for the quiz service

This module provides the error taxonomy shared by the domain, the storage
layer and the HTTP layer:
1. A ``QuizError`` hierarchy carrying error codes, severity and an HTTP status
2. Conversion of foreign exceptions into ``QuizError``
3. Structured error logging
4. Error payload generation for API responses

Per-request errors (unknown session, nothing left to answer) are recoverable
and map to redirects; ``CatalogLoadError`` is the only fatal condition and is
raised once, at startup.
"""

import logging
import traceback
import json
from enum import Enum
from typing import Any, Dict, List, Optional, Union
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Severity levels for errors"""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCode(Enum):
    """Standard error codes for the quiz service"""
    UNKNOWN_ERROR = "unknown_error"
    VALIDATION_ERROR = "validation_error"

    # Quiz flow errors
    SESSION_NOT_FOUND = "session_not_found"
    SESSION_ALREADY_EXISTS = "session_already_exists"
    NO_CURRENT_QUESTION = "no_current_question"
    DUPLICATE_ANSWER = "duplicate_answer"
    PROGRESS_CONFLICT = "progress_conflict"

    # Startup errors
    CATALOG_LOAD_FAILURE = "catalog_load_failure"

    # Storage errors
    DATABASE_ERROR = "database_error"


_SEVERITY_LEVELS = {
    ErrorSeverity.DEBUG: logging.DEBUG,
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


class ErrorInfo(BaseModel):
    """Structured information about an error"""
    model_config = ConfigDict(use_enum_values=True)

    code: ErrorCode
    message: str
    timestamp: datetime = Field(default_factory=datetime.now)
    severity: ErrorSeverity = ErrorSeverity.ERROR
    details: Optional[Dict[str, Any]] = None
    exception_type: Optional[str] = None
    exception_message: Optional[str] = None
    stack_trace: Optional[List[str]] = None
    context: Optional[Dict[str, Any]] = None

    @field_validator('stack_trace', mode='before')
    @classmethod
    def validate_stack_trace(cls, v):
        """Format stack trace if it's a string"""
        if isinstance(v, str):
            return v.splitlines()
        return v


class QuizError(Exception):
    """Base exception class for all quiz service errors"""

    http_status: int = 500

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.severity = severity
        self.details = details or {}
        self.cause = cause
        self.context = context or {}
        self.timestamp = datetime.now()

    def to_error_info(self, include_stack_trace: bool = False) -> ErrorInfo:
        """Convert the exception to an ErrorInfo object"""
        stack_trace = None
        if include_stack_trace:
            stack_trace = traceback.format_exc().splitlines()

        details = dict(self.details)
        if self.cause is not None:
            details["cause"] = {
                "type": type(self.cause).__name__,
                "message": str(self.cause)
            }

        return ErrorInfo(
            code=self.code,
            message=self.message,
            timestamp=self.timestamp,
            severity=self.severity,
            details=details,
            exception_type=type(self).__name__,
            exception_message=str(self),
            stack_trace=stack_trace,
            context=self.context
        )

    def to_dict(self, include_stack_trace: bool = False) -> Dict[str, Any]:
        """Convert the exception to a dictionary"""
        return self.to_error_info(include_stack_trace).model_dump(mode="json")

    def to_json(self, include_stack_trace: bool = False) -> str:
        """Convert the exception to a JSON string"""
        return json.dumps(self.to_dict(include_stack_trace))

    def __str__(self) -> str:
        base_str = f"{self.code.value}: {self.message}"
        if self.details:
            base_str += f" (details: {self.details})"
        if self.cause:
            base_str += f" caused by {type(self.cause).__name__}: {str(self.cause)}"
        return base_str


class ValidationError(QuizError):
    """Error raised when input fails validation"""

    http_status = 422

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        super().__init__(
            message=message,
            code=ErrorCode.VALIDATION_ERROR,
            severity=ErrorSeverity.WARNING,
            details=details,
            cause=cause
        )


class SessionNotFoundError(QuizError):
    """Error raised when a quiz token is unknown; the caller should restart the flow"""

    http_status = 404

    def __init__(
        self,
        token: Optional[str],
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        details = details or {}
        details["token"] = token

        super().__init__(
            message=f"Quiz session {token} not found" if token else "No quiz session token supplied",
            code=ErrorCode.SESSION_NOT_FOUND,
            severity=ErrorSeverity.WARNING,
            details=details,
            cause=cause
        )
        self.token = token


class SessionAlreadyExistsError(QuizError):
    """Error raised when creating a session under a token that is already in use"""

    http_status = 409

    def __init__(self, token: str, cause: Optional[Exception] = None):
        super().__init__(
            message=f"Quiz session {token} already exists",
            code=ErrorCode.SESSION_ALREADY_EXISTS,
            details={"token": token},
            cause=cause
        )
        self.token = token


class NoCurrentQuestionError(QuizError):
    """Error raised when answering after every question is consumed; the caller should show the summary"""

    http_status = 409

    def __init__(self, token: str, progress: int, total: int):
        super().__init__(
            message=f"Quiz session {token} has no current question ({progress} of {total} answered)",
            code=ErrorCode.NO_CURRENT_QUESTION,
            severity=ErrorSeverity.WARNING,
            details={"token": token, "progress": progress, "total": total}
        )
        self.token = token
        self.progress = progress
        self.total = total


class DuplicateAnswerError(QuizError):
    """Error raised when an answer row for (token, question index) cannot be appended"""

    http_status = 409

    def __init__(
        self,
        token: str,
        question_index: int,
        expected_index: Optional[int] = None,
        cause: Optional[Exception] = None
    ):
        details: Dict[str, Any] = {"token": token, "question_index": question_index}
        if expected_index is not None:
            details["expected_index"] = expected_index

        super().__init__(
            message=f"Answer for question {question_index} cannot be recorded for session {token}",
            code=ErrorCode.DUPLICATE_ANSWER,
            details=details,
            cause=cause
        )
        self.token = token
        self.question_index = question_index


class ProgressConflictError(QuizError):
    """Error raised when a progress write would go backward or skip a question"""

    http_status = 409

    def __init__(self, token: str, current: int, requested: int):
        super().__init__(
            message=f"Cannot move session {token} from progress {current} to {requested}",
            code=ErrorCode.PROGRESS_CONFLICT,
            details={"token": token, "current": current, "requested": requested}
        )
        self.token = token
        self.current = current
        self.requested = requested


class CatalogLoadError(QuizError):
    """Error raised when the question catalog cannot be loaded at startup"""

    def __init__(
        self,
        source: str,
        reason: str,
        cause: Optional[Exception] = None
    ):
        super().__init__(
            message=f"Failed to load questions from {source}: {reason}",
            code=ErrorCode.CATALOG_LOAD_FAILURE,
            severity=ErrorSeverity.CRITICAL,
            details={"source": source},
            cause=cause
        )
        self.source = source


class DatabaseError(QuizError):
    """Error raised when the session database fails"""

    def __init__(
        self,
        operation: str,
        cause: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=f"Database operation '{operation}' failed",
            code=ErrorCode.DATABASE_ERROR,
            details={"operation": operation},
            cause=cause,
            context=context
        )


def convert_exception(
    exception: Exception,
    default_message: str = "An unexpected error occurred",
    default_code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
    default_severity: ErrorSeverity = ErrorSeverity.ERROR,
    context: Optional[Dict[str, Any]] = None
) -> QuizError:
    """
    Convert a standard exception to a QuizError.

    Args:
        exception: The exception to convert
        default_message: Default message if the exception has no message
        default_code: Default error code
        default_severity: Default error severity
        context: Optional additional context

    Returns:
        Converted QuizError
    """
    if isinstance(exception, QuizError):
        if context:
            exception.context.update(context)
        return exception

    return QuizError(
        message=str(exception) or default_message,
        code=default_code,
        severity=default_severity,
        cause=exception,
        context=context
    )


def error_response(
    error: Union[QuizError, Exception],
    include_details: bool = True,
    include_stack_trace: bool = False
) -> Dict[str, Any]:
    """
    Generate a standardized API error response.

    Args:
        error: The error to generate a response for
        include_details: Whether to include error details
        include_stack_trace: Whether to include stack trace

    Returns:
        Standardized error response dictionary
    """
    if not isinstance(error, QuizError):
        error = convert_exception(error)

    error_info = error.to_error_info(include_stack_trace=include_stack_trace)

    response: Dict[str, Any] = {
        "status": "error",
        "code": error_info.code,
        "message": error_info.message
    }

    if include_details and error_info.details:
        response["details"] = error_info.details

    return response


def log_error(
    error: Union[QuizError, Exception],
    level: Optional[int] = None,
    include_stack_trace: bool = False,
    context: Optional[Dict[str, Any]] = None,
    log: Optional[logging.Logger] = None
) -> None:
    """
    Log an error with standardized format.

    Args:
        error: The error to log
        level: Logging level; derived from the error severity when omitted
        include_stack_trace: Whether to include stack trace
        context: Additional context to include
        log: Logger to write to, defaults to this module's logger
    """
    if not isinstance(error, QuizError):
        error = convert_exception(error, context=context)
    elif context:
        error.context.update(context)

    message = f"ERROR [{error.code.value}]: {error.message}"

    if error.context:
        context_str = ", ".join(f"{k}={v}" for k, v in error.context.items())
        message += f" (context: {context_str})"

    if error.cause:
        message += f" caused by {type(error.cause).__name__}: {str(error.cause)}"

    if include_stack_trace:
        message += f"\n{traceback.format_exc()}"

    if level is None:
        level = _SEVERITY_LEVELS.get(error.severity, logging.ERROR)

    (log or logger).log(level, message)
