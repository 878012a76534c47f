"""
Quiz progression module.

Contains the quiz service state machine, its view models and the HTTP
router exposing it.
"""

from pmpquiz.quiz.models import QuizPhase, QuizState, QuestionView, SubmitResult, SummaryEntry, QuizSummary
from pmpquiz.quiz.service import QuizService, generate_token

__all__ = [
    'QuizPhase',
    'QuizState',
    'QuestionView',
    'SubmitResult',
    'SummaryEntry',
    'QuizSummary',
    'QuizService',
    'generate_token',
]
