"""
Database Module

This module provides the ORM tables and engine lifecycle backing the SQL
session store.
"""

from pmpquiz.database.base import Base, ModelBase, metadata
from pmpquiz.database.models import QuizStateRow, AnswerRow

__all__ = ['Base', 'ModelBase', 'metadata', 'QuizStateRow', 'AnswerRow']
