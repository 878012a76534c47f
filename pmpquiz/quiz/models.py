"""
Quiz View Models

This module defines the values the quiz service hands to the presentation
layer: the progression state, the current question view, the result of a
submit, and the final summary.
"""

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from pmpquiz.domain.questions import Question
from pmpquiz.domain.sessions import AnsweredRecord


class QuizPhase(enum.Enum):
    """Phases of a quiz session."""
    AWAITING_QUESTION = "awaiting_question"
    FINISHED = "finished"


@dataclass(frozen=True)
class QuizState:
    """Progression state of one session: AwaitingQuestion(progress) or Finished."""
    progress: int
    total: int

    @property
    def phase(self) -> QuizPhase:
        if self.progress >= self.total:
            return QuizPhase.FINISHED
        return QuizPhase.AWAITING_QUESTION

    @property
    def finished(self) -> bool:
        return self.phase is QuizPhase.FINISHED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "progress": self.progress,
            "total": self.total,
            "finished": self.finished,
        }


@dataclass(frozen=True)
class QuestionView:
    """
    The question to show next, or a finished marker.

    ``question`` is None exactly when the session is finished.
    """
    state: QuizState
    question: Optional[Question] = None

    @property
    def finished(self) -> bool:
        return self.state.finished

    @property
    def number(self) -> Optional[int]:
        """1-based position for display, e.g. question 3 of 15; None once finished."""
        if self.finished:
            return None
        return self.state.progress + 1

    def to_dict(self) -> Dict[str, Any]:
        if self.finished or self.question is None:
            return self.state.to_dict()
        return {
            "question": self.question.to_public_dict(),
            "progress": self.state.progress,
            "number": self.number,
            "total": self.state.total,
            "finished": False,
        }


@dataclass(frozen=True)
class SubmitResult:
    """Outcome of recording one answer."""
    next_progress: int
    finished: bool

    def to_dict(self) -> Dict[str, Any]:
        return {"next_progress": self.next_progress, "finished": self.finished}


@dataclass(frozen=True)
class SummaryEntry:
    """An answer record joined with the question it answered."""
    record: AnsweredRecord
    question: Question

    def to_dict(self) -> Dict[str, Any]:
        data = self.record.to_dict()
        data["question"] = self.question.text
        data["options"] = list(self.question.options)
        return data


@dataclass(frozen=True)
class QuizSummary:
    """Final score for a session."""
    entries: Tuple[SummaryEntry, ...]
    state: QuizState
    by_difficulty: Dict[str, Dict[str, int]] = field(default_factory=dict)

    @property
    def records(self) -> Tuple[AnsweredRecord, ...]:
        return tuple(entry.record for entry in self.entries)

    @property
    def correct_count(self) -> int:
        return sum(1 for entry in self.entries if entry.record.is_correct)

    @property
    def total(self) -> int:
        """Number of answered questions."""
        return len(self.entries)

    @property
    def score_percent(self) -> float:
        if not self.entries:
            return 0.0
        return round(self.correct_count / self.total * 100, 1)

    @classmethod
    def build(cls, entries: Tuple[SummaryEntry, ...], state: QuizState) -> 'QuizSummary':
        """Assemble a summary and its per-difficulty breakdown."""
        breakdown: Dict[str, Dict[str, int]] = {}
        for entry in entries:
            bucket = breakdown.setdefault(entry.record.difficulty, {"answered": 0, "correct": 0})
            bucket["answered"] += 1
            if entry.record.is_correct:
                bucket["correct"] += 1
        return cls(entries=entries, state=state, by_difficulty=breakdown)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "answered": [entry.to_dict() for entry in self.entries],
            "correct_count": self.correct_count,
            "total": self.total,
            "score_percent": self.score_percent,
            "by_difficulty": self.by_difficulty,
            "finished": self.state.finished,
        }
