"""
Question domain module.

This module contains the question model and the process-wide catalog
that every quiz session reads from.
"""

from .model import Question, DEFAULT_DIFFICULTY
from .catalog import QuestionCatalog

__all__ = [
    'Question',
    'DEFAULT_DIFFICULTY',
    'QuestionCatalog',
]
