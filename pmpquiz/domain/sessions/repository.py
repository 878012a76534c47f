"""
Session Store Module

This module defines the contract the quiz service relies on for keeping
per-token progress and the append-only answer log.
"""

import abc
from typing import List

from pmpquiz.common.error_handling import (
    DuplicateAnswerError, ProgressConflictError
)
from .model import AnsweredRecord


class SessionStore(abc.ABC):
    """
    Abstract base class for session stores.

    A store maps an opaque token to a progress integer and an ordered log of
    AnsweredRecord entries. Writes for one token are read-your-writes
    consistent within the process; there is no delete operation.
    """

    @abc.abstractmethod
    async def create(self, token: str) -> None:
        """
        Create a session at progress 0 with an empty answer log.

        Args:
            token: The new session token

        Raises:
            SessionAlreadyExistsError: If the token is already in use
        """
        pass

    @abc.abstractmethod
    async def get_progress(self, token: str) -> int:
        """
        Get the number of questions answered so far.

        Args:
            token: The session token

        Returns:
            The progress value

        Raises:
            SessionNotFoundError: If the token is unknown
        """
        pass

    @abc.abstractmethod
    async def set_progress(self, token: str, progress: int) -> None:
        """
        Store a new progress value.

        Args:
            token: The session token
            progress: The new value; must equal the current value or exceed it by one

        Raises:
            SessionNotFoundError: If the token is unknown
            ProgressConflictError: If the write would go backward or skip a question
        """
        pass

    @abc.abstractmethod
    async def append_answer(self, token: str, record: AnsweredRecord) -> None:
        """
        Append an answer to the session log.

        Args:
            token: The session token
            record: The answer; its index must extend the log by exactly one

        Raises:
            SessionNotFoundError: If the token is unknown
            DuplicateAnswerError: If the question index is already answered or out of order
        """
        pass

    @abc.abstractmethod
    async def record_answer(self, token: str, record: AnsweredRecord) -> None:
        """
        Append an answer and advance progress past it in one atomic write.

        Either both the record and the new progress are stored, or neither is.

        Args:
            token: The session token
            record: The answer for the question at the current progress

        Raises:
            SessionNotFoundError: If the token is unknown
            DuplicateAnswerError: If the record does not extend the log by one
            ProgressConflictError: If the record is not for the current question
        """
        pass

    @abc.abstractmethod
    async def list_answers(self, token: str) -> List[AnsweredRecord]:
        """
        List the session's answers in ascending question index order.

        Args:
            token: The session token

        Returns:
            The answer records

        Raises:
            SessionNotFoundError: If the token is unknown
        """
        pass

    async def close(self) -> None:
        """Release any resources held by the store."""
        return None

    @staticmethod
    def check_progress_step(token: str, current: int, requested: int) -> None:
        """Reject progress writes that go backward or skip ahead."""
        if requested < current or requested > current + 1:
            raise ProgressConflictError(token, current, requested)

    @staticmethod
    def check_answer_index(token: str, answered: int, record: AnsweredRecord) -> None:
        """Reject answers that do not extend a log of ``answered`` records by one."""
        if record.question_index != answered:
            raise DuplicateAnswerError(token, record.question_index, expected_index=answered)
