"""
Quiz Session Domain Model Module

This module defines the answer snapshot stored for every consumed question.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from pmpquiz.domain.questions import Question


@dataclass(frozen=True)
class AnsweredRecord:
    """
    Immutable snapshot of a submitted answer plus the ground truth at submission time.

    Attributes:
        question_index: Catalog index of the answered question
        user_answer: The option the user selected; empty means no answer or timed out
        correct_answer: The correct option when the answer was recorded
        difficulty: The question's difficulty label when the answer was recorded
    """
    question_index: int
    user_answer: str
    correct_answer: str
    difficulty: str

    @property
    def is_correct(self) -> bool:
        """An empty answer never matches, otherwise exact string equality."""
        return bool(self.user_answer) and self.user_answer == self.correct_answer

    @classmethod
    def snapshot(cls, question_index: int, question: Question, user_answer: Optional[str]) -> 'AnsweredRecord':
        """
        Record an answer against the catalog entry it belongs to.

        Args:
            question_index: Catalog index of the question
            question: The catalog entry at that index
            user_answer: The submitted option, ``None`` is stored as an empty answer

        Returns:
            The answer record
        """
        return cls(
            question_index=question_index,
            user_answer=user_answer or "",
            correct_answer=question.correct_answer,
            difficulty=question.difficulty,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "question_index": self.question_index,
            "user_answer": self.user_answer,
            "correct_answer": self.correct_answer,
            "difficulty": self.difficulty,
            "correct": self.is_correct,
        }
