"""
Question Domain Model Module

This module defines the immutable question entity served by the quiz.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Tuple

DEFAULT_DIFFICULTY = "unspecified"


@dataclass(frozen=True)
class Question:
    """
    A single multiple-choice question.

    Attributes:
        text: The question text
        options: Ordered answer options shown to the user
        correct_answer: The option string that counts as correct
        difficulty: Free-form difficulty label, e.g. "easy" or "hard"
    """
    text: str
    options: Tuple[str, ...]
    correct_answer: str
    difficulty: str = DEFAULT_DIFFICULTY

    def __post_init__(self):
        """Validate the question after creation."""
        if not isinstance(self.text, str) or not self.text.strip():
            raise ValueError("Question text is required")

        if isinstance(self.options, (str, bytes)) or not isinstance(self.options, (list, tuple)):
            raise ValueError("Question options must be a list of strings")
        # Lists from JSON are frozen into a tuple so the question stays hashable
        object.__setattr__(self, "options", tuple(self.options))

        if len(self.options) < 2:
            raise ValueError("A question needs at least two options")
        if any(not isinstance(option, str) or not option for option in self.options):
            raise ValueError("Question options must be non-empty strings")

        if not isinstance(self.correct_answer, str) or not self.correct_answer:
            raise ValueError("Correct answer is required")
        if self.correct_answer not in self.options:
            raise ValueError(f"Correct answer {self.correct_answer!r} is not one of the options")

        if not isinstance(self.difficulty, str) or not self.difficulty:
            object.__setattr__(self, "difficulty", DEFAULT_DIFFICULTY)

    def to_public_dict(self) -> Dict[str, Any]:
        """
        Convert the question to the dictionary shown while it is being answered.

        The correct answer is left out.
        """
        return {
            "text": self.text,
            "options": list(self.options),
            "difficulty": self.difficulty,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert the question to a dictionary in the catalog file format."""
        return {
            "question": self.text,
            "options": list(self.options),
            "correct_answer": self.correct_answer,
            "difficulty": self.difficulty,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Question':
        """
        Create a Question from a catalog record.

        ``question`` is the canonical key for the text; ``text`` is accepted
        as an alias.

        Args:
            data: Dictionary containing question data

        Returns:
            A Question instance

        Raises:
            ValueError: If the record is not a valid question
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"Question record must be a mapping, got {type(data).__name__}")

        text = data.get("question", data.get("text"))
        return cls(
            text=text,
            options=data.get("options") or (),
            correct_answer=data.get("correct_answer"),
            difficulty=data.get("difficulty") or DEFAULT_DIFFICULTY,
        )
