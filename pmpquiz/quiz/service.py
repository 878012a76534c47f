"""
Quiz Session Service

This module implements the quiz progression: a linear state machine over
the shared question catalog, with per-session progress and answer logs kept
in a SessionStore.

A session is either awaiting the question at index ``progress`` or finished
once ``progress`` reaches the catalog length. Progress only ever moves
forward by one, and every step appends exactly one answer record.
"""

import asyncio
import uuid
from typing import Callable, Dict, Optional, Tuple

from pmpquiz.common.error_handling import NoCurrentQuestionError
from pmpquiz.common.logger import LoggerAdapter, app_logger
from pmpquiz.domain.questions import QuestionCatalog
from pmpquiz.domain.sessions import AnsweredRecord, SessionStore
from pmpquiz.quiz.models import QuestionView, QuizState, QuizSummary, SubmitResult, SummaryEntry

logger = app_logger.getChild("quiz.service")


def generate_token() -> str:
    """Generate an opaque session token."""
    return str(uuid.uuid4())


class QuizService:
    """
    Service driving quiz sessions through the catalog.

    The catalog and store are injected; the service holds no other state
    besides one lock per token, which keeps the read-progress, append,
    write-progress sequence of a single session atomic within the process.
    """

    def __init__(
        self,
        catalog: QuestionCatalog,
        store: SessionStore,
        token_factory: Callable[[], str] = generate_token
    ):
        """
        Initialize the quiz service.

        Args:
            catalog: The shared, read-only question catalog
            store: Session store keeping progress and answers
            token_factory: Callable producing fresh session tokens
        """
        self.catalog = catalog
        self.store = store
        self._token_factory = token_factory
        self._locks: Dict[str, asyncio.Lock] = {}

    @property
    def total(self) -> int:
        return len(self.catalog)

    async def _lock_for(self, token: str) -> asyncio.Lock:
        """
        Get the lock serializing writes for a token.

        Raises:
            SessionNotFoundError: If the token is unknown; no lock is created
        """
        lock = self._locks.get(token)
        if lock is None:
            await self.store.get_progress(token)
            lock = self._locks.setdefault(token, asyncio.Lock())
        return lock

    def _log(self, token: str) -> LoggerAdapter:
        return LoggerAdapter(logger, {"quiz_id": token})

    async def start(self) -> Tuple[str, QuizState]:
        """
        Start a new quiz attempt under a fresh token.

        Earlier sessions are left untouched and stay readable by their own token.

        Returns:
            The new token and its initial state
        """
        token = self._token_factory()
        await self.store.create(token)
        self._locks[token] = asyncio.Lock()
        self._log(token).info(f"Started quiz with {self.total} questions")
        return token, QuizState(progress=0, total=self.total)

    async def get_state(self, token: str) -> QuizState:
        """
        Get the progression state of a session.

        Raises:
            SessionNotFoundError: If the token is unknown
        """
        progress = await self.store.get_progress(token)
        return QuizState(progress=progress, total=self.total)

    async def current_question(self, token: str) -> QuestionView:
        """
        Get the question the session should answer next.

        Args:
            token: The session token

        Returns:
            The question at index ``progress`` with its position, or a
            finished view when every question has been answered

        Raises:
            SessionNotFoundError: If the token is unknown
        """
        state = await self.get_state(token)
        if state.finished:
            return QuestionView(state=state)
        return QuestionView(state=state, question=self.catalog[state.progress])

    async def submit_answer(self, token: str, selected_option: Optional[str]) -> SubmitResult:
        """
        Record the answer for the current question and advance by one.

        An empty or missing answer is a normal submission (the client's timer
        ran out); it is stored as an empty string and scores as incorrect.

        Args:
            token: The session token
            selected_option: The chosen option, possibly empty or None

        Returns:
            The new progress and whether the quiz is now finished

        Raises:
            SessionNotFoundError: If the token is unknown
            NoCurrentQuestionError: If every question has already been answered
        """
        async with await self._lock_for(token):
            return await self._submit_locked(token, selected_option)

    async def _submit_locked(self, token: str, selected_option: Optional[str]) -> SubmitResult:
        log = self._log(token)
        progress = await self.store.get_progress(token)
        if progress >= self.total:
            log.debug(f"Rejected submit at progress {progress}: no current question")
            raise NoCurrentQuestionError(token, progress, self.total)

        question = self.catalog[progress]
        record = AnsweredRecord.snapshot(progress, question, selected_option)
        await self.store.record_answer(token, record)

        next_progress = progress + 1

        finished = next_progress >= self.total
        log.info(
            f"Answered question {progress} "
            f"(answer={record.user_answer!r}, correct={record.is_correct}); "
            f"progress {next_progress}/{self.total}"
        )
        return SubmitResult(next_progress=next_progress, finished=finished)

    async def summarize(self, token: str, pending_answer: Optional[str] = None) -> QuizSummary:
        """
        Build the score summary for a session.

        When ``pending_answer`` is given and a question is still open, it is
        submitted first (the timer ran out on the last question). Once the
        quiz is finished a pending answer is ignored, so repeating the
        finishing request never advances progress or adds records.

        Args:
            token: The session token
            pending_answer: Optional answer to submit before summarizing

        Returns:
            Every recorded answer in ascending question order with the score

        Raises:
            SessionNotFoundError: If the token is unknown
        """
        async with await self._lock_for(token):
            if pending_answer is not None:
                progress = await self.store.get_progress(token)
                if progress < self.total:
                    await self._submit_locked(token, pending_answer)
                else:
                    self._log(token).debug("Ignored pending answer on finished quiz")

            records = await self.store.list_answers(token)
            state = await self.get_state(token)

        entries = tuple(
            SummaryEntry(record=record, question=self.catalog[record.question_index])
            for record in records
        )
        summary = QuizSummary.build(entries, state)
        self._log(token).info(f"Summary: {summary.correct_count}/{summary.total} correct")
        return summary
