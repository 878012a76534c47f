"""
Session Table Models

One row per quiz token holding its progress, and one row per
(token, question index) holding the answer snapshot.
"""

from sqlalchemy import Column, ForeignKey, Integer, String, Text

from pmpquiz.database.base import ModelBase


class QuizStateRow(ModelBase):
    """Progress of a single quiz session."""
    __tablename__ = "quiz_state"

    quiz_id = Column(String(64), primary_key=True)
    current_index = Column(Integer, nullable=False, default=0)


class AnswerRow(ModelBase):
    """Answer recorded for one question of one quiz session."""
    __tablename__ = "answers"

    quiz_id = Column(String(64), ForeignKey("quiz_state.quiz_id"), primary_key=True)
    question_index = Column(Integer, primary_key=True, autoincrement=False)
    user_answer = Column(Text, nullable=False, default="")
    correct_answer = Column(Text, nullable=False)
    difficulty = Column(String(32), nullable=False)
