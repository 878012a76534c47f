"""
SQL Session Store Module

This module provides a SessionStore backed by SQLAlchemy async sessions
over the ``quiz_state`` and ``answers`` tables.
"""

from typing import List

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from pmpquiz.common.error_handling import (
    DatabaseError, DuplicateAnswerError, SessionAlreadyExistsError, SessionNotFoundError
)
from pmpquiz.common.logger import app_logger
from pmpquiz.database.models import AnswerRow, QuizStateRow
from .model import AnsweredRecord
from .repository import SessionStore

logger = app_logger.getChild("sessions.sql")


class SqlSessionStore(SessionStore):
    """
    SessionStore implementation on a relational database.

    Every operation runs in its own transaction. Store-level errors
    (unknown token, duplicates) pass through unchanged; driver failures
    are wrapped in DatabaseError.
    """

    def __init__(self, session_factory: async_sessionmaker):
        """
        Initialize the store.

        Args:
            session_factory: Factory producing AsyncSession objects bound to an
                engine whose schema already exists
        """
        self._session_factory = session_factory

    async def create(self, token: str) -> None:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    session.add(QuizStateRow(quiz_id=token, current_index=0))
        except IntegrityError as e:
            raise SessionAlreadyExistsError(token, cause=e) from e
        except SQLAlchemyError as e:
            raise DatabaseError("create", cause=e, context={"token": token}) from e
        logger.debug(f"Inserted quiz_state row for {token}")

    async def get_progress(self, token: str) -> int:
        try:
            async with self._session_factory() as session:
                progress = await session.scalar(
                    select(QuizStateRow.current_index).where(QuizStateRow.quiz_id == token)
                )
        except SQLAlchemyError as e:
            raise DatabaseError("get_progress", cause=e, context={"token": token}) from e

        if progress is None:
            raise SessionNotFoundError(token)
        return progress

    async def set_progress(self, token: str, progress: int) -> None:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    row = await session.get(QuizStateRow, token)
                    if row is None:
                        raise SessionNotFoundError(token)
                    self.check_progress_step(token, row.current_index, progress)
                    row.current_index = progress
        except SQLAlchemyError as e:
            raise DatabaseError("set_progress", cause=e, context={"token": token}) from e

    async def append_answer(self, token: str, record: AnsweredRecord) -> None:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    if await session.get(QuizStateRow, token) is None:
                        raise SessionNotFoundError(token)

                    answered = await session.scalar(
                        select(func.count()).select_from(AnswerRow).where(AnswerRow.quiz_id == token)
                    )
                    self.check_answer_index(token, answered or 0, record)

                    session.add(self._answer_row(token, record))
        except IntegrityError as e:
            raise DuplicateAnswerError(token, record.question_index, cause=e) from e
        except SQLAlchemyError as e:
            raise DatabaseError("append_answer", cause=e, context={"token": token}) from e

    async def record_answer(self, token: str, record: AnsweredRecord) -> None:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    state = await session.get(QuizStateRow, token)
                    if state is None:
                        raise SessionNotFoundError(token)

                    answered = await session.scalar(
                        select(func.count()).select_from(AnswerRow).where(AnswerRow.quiz_id == token)
                    )
                    self.check_answer_index(token, answered or 0, record)

                    session.add(self._answer_row(token, record))
                    await session.flush()

                    # Any failure from here on rolls the answer row back too
                    self.check_progress_step(token, state.current_index, record.question_index + 1)
                    state.current_index = record.question_index + 1
        except IntegrityError as e:
            raise DuplicateAnswerError(token, record.question_index, cause=e) from e
        except SQLAlchemyError as e:
            raise DatabaseError("record_answer", cause=e, context={"token": token}) from e
        logger.debug(f"Recorded answer {record.question_index} for {token}")

    async def list_answers(self, token: str) -> List[AnsweredRecord]:
        try:
            async with self._session_factory() as session:
                if await session.get(QuizStateRow, token) is None:
                    raise SessionNotFoundError(token)

                result = await session.scalars(
                    select(AnswerRow)
                    .where(AnswerRow.quiz_id == token)
                    .order_by(AnswerRow.question_index.asc())
                )
                rows = result.all()
        except SQLAlchemyError as e:
            raise DatabaseError("list_answers", cause=e, context={"token": token}) from e

        return [self._to_record(row) for row in rows]

    @staticmethod
    def _answer_row(token: str, record: AnsweredRecord) -> AnswerRow:
        return AnswerRow(
            quiz_id=token,
            question_index=record.question_index,
            user_answer=record.user_answer,
            correct_answer=record.correct_answer,
            difficulty=record.difficulty,
        )

    @staticmethod
    def _to_record(row: AnswerRow) -> AnsweredRecord:
        data = row.to_dict()
        del data["quiz_id"]
        return AnsweredRecord(**data)
