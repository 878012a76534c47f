"""
Memory Session Store Module

This module provides an in-memory implementation of the SessionStore
contract, used in tests and when ``SESSION_BACKEND=memory``.
"""

import logging
from typing import Dict, List

from pmpquiz.common.error_handling import SessionAlreadyExistsError, SessionNotFoundError
from .model import AnsweredRecord
from .repository import SessionStore

logger = logging.getLogger(__name__)


class MemorySessionStore(SessionStore):
    """
    In-memory implementation of the SessionStore.

    Sessions live in plain dictionaries for the lifetime of the process.
    """

    def __init__(self):
        self._progress: Dict[str, int] = {}
        self._answers: Dict[str, List[AnsweredRecord]] = {}

    async def create(self, token: str) -> None:
        if token in self._progress:
            raise SessionAlreadyExistsError(token)
        self._progress[token] = 0
        self._answers[token] = []
        logger.debug(f"Created in-memory session {token}")

    async def get_progress(self, token: str) -> int:
        try:
            return self._progress[token]
        except KeyError:
            raise SessionNotFoundError(token) from None

    async def set_progress(self, token: str, progress: int) -> None:
        current = await self.get_progress(token)
        self.check_progress_step(token, current, progress)
        self._progress[token] = progress

    async def append_answer(self, token: str, record: AnsweredRecord) -> None:
        answers = self._answers.get(token)
        if answers is None:
            raise SessionNotFoundError(token)
        self.check_answer_index(token, len(answers), record)
        answers.append(record)

    async def record_answer(self, token: str, record: AnsweredRecord) -> None:
        current = await self.get_progress(token)
        answers = self._answers[token]
        # Validate both steps before mutating either
        self.check_answer_index(token, len(answers), record)
        self.check_progress_step(token, current, record.question_index + 1)
        answers.append(record)
        self._progress[token] = record.question_index + 1

    async def list_answers(self, token: str) -> List[AnsweredRecord]:
        answers = self._answers.get(token)
        if answers is None:
            raise SessionNotFoundError(token)
        return list(answers)

    def __len__(self) -> int:
        return len(self._progress)
