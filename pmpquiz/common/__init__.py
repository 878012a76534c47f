"""
Common Components for the quiz service

This package contains the infrastructure shared by the domain, storage and
HTTP layers:
1. Logging - Centralized logging configuration
2. Error Handling - Error taxonomy and API error payloads
"""

from pmpquiz.common.logger import app_logger

from pmpquiz.common.error_handling import (
    ErrorCode, ErrorSeverity, QuizError, SessionNotFoundError,
    NoCurrentQuestionError, CatalogLoadError, DatabaseError
)

__all__ = [
    'app_logger',
    'ErrorCode', 'ErrorSeverity', 'QuizError', 'SessionNotFoundError',
    'NoCurrentQuestionError', 'CatalogLoadError', 'DatabaseError',
]
