"""
Quiz session domain module.

This module contains the answer snapshot model and the session store
contract with its in-memory and SQL implementations.
"""

from .model import AnsweredRecord
from .repository import SessionStore
from .memory_repository import MemorySessionStore
from .sql_repository import SqlSessionStore

__all__ = [
    'AnsweredRecord',
    'SessionStore',
    'MemorySessionStore',
    'SqlSessionStore',
]
