"""
Tests for the question and answer record models.
"""

import pytest

from pmpquiz.domain.questions import DEFAULT_DIFFICULTY, Question
from pmpquiz.domain.sessions import AnsweredRecord


class TestQuestion:
    """Test the Question model."""

    def test_from_dict_uses_catalog_keys(self):
        question = Question.from_dict({
            "question": "What is a charter?",
            "options": ["A", "B"],
            "correct_answer": "B",
            "difficulty": "easy",
        })

        assert question.text == "What is a charter?"
        assert question.options == ("A", "B")
        assert question.correct_answer == "B"
        assert question.difficulty == "easy"

    def test_from_dict_accepts_text_alias_and_default_difficulty(self):
        question = Question.from_dict({"text": "Q", "options": ["x", "y"], "correct_answer": "x"})

        assert question.text == "Q"
        assert question.difficulty == DEFAULT_DIFFICULTY

    @pytest.mark.parametrize("record", [
        {"options": ["A", "B"], "correct_answer": "A"},
        {"question": "  ", "options": ["A", "B"], "correct_answer": "A"},
        {"question": "Q", "options": ["A"], "correct_answer": "A"},
        {"question": "Q", "options": "AB", "correct_answer": "A"},
        {"question": "Q", "options": ["A", ""], "correct_answer": "A"},
        {"question": "Q", "options": ["A", "B"]},
        {"question": "Q", "options": ["A", "B"], "correct_answer": "C"},
    ])
    def test_invalid_records_are_rejected(self, record):
        with pytest.raises(ValueError):
            Question.from_dict(record)

    def test_non_mapping_record_is_rejected(self):
        with pytest.raises(ValueError):
            Question.from_dict(["not", "a", "mapping"])

    def test_question_is_immutable(self):
        question = Question("Q", ("A", "B"), "A")

        with pytest.raises(AttributeError):
            question.text = "changed"

    def test_public_dict_hides_correct_answer(self):
        question = Question("Q", ["A", "B"], "A", "hard")

        public = question.to_public_dict()

        assert public == {"text": "Q", "options": ["A", "B"], "difficulty": "hard"}
        assert "correct_answer" not in public

    def test_to_dict_round_trips_through_from_dict(self):
        question = Question("Q", ("A", "B"), "B", "easy")

        assert Question.from_dict(question.to_dict()) == question


class TestAnsweredRecord:
    """Test the AnsweredRecord model."""

    def test_snapshot_copies_ground_truth(self):
        question = Question("Q", ("A", "B"), "B", "hard")

        record = AnsweredRecord.snapshot(4, question, "A")

        assert record == AnsweredRecord(4, "A", "B", "hard")
        assert record.is_correct is False

    def test_snapshot_stores_missing_answer_as_empty(self):
        question = Question("Q", ("A", "B"), "A")

        record = AnsweredRecord.snapshot(0, question, None)

        assert record.user_answer == ""
        assert record.is_correct is False

    def test_exact_match_is_correct(self):
        assert AnsweredRecord(0, "A", "A", "easy").is_correct is True
        assert AnsweredRecord(0, "a", "A", "easy").is_correct is False
        assert AnsweredRecord(0, "A ", "A", "easy").is_correct is False

    def test_empty_answer_never_counts(self):
        assert AnsweredRecord(0, "", "", "easy").is_correct is False

    def test_to_dict(self):
        assert AnsweredRecord(1, "X", "B", "medium").to_dict() == {
            "question_index": 1,
            "user_answer": "X",
            "correct_answer": "B",
            "difficulty": "medium",
            "correct": False,
        }
