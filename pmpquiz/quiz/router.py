"""
Quiz API Router

This module exposes the quiz flow over HTTP:

- ``POST /start``: begin a new attempt and set the token cookie
- ``GET /question``: the current question, or a finished marker
- ``POST /answer``: record the answer to the current question
- ``GET|POST /summary``: the score summary, optionally submitting a pending answer first

The session token travels in the ``X-Quiz-Token`` header or, failing that,
in the session cookie set by ``/start``.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from pmpquiz.api import APIResponse
from pmpquiz.common.error_handling import SessionNotFoundError
from pmpquiz.common.logger import get_logger
from pmpquiz.quiz.service import QuizService

logger = get_logger(__name__)

router = APIRouter()

TOKEN_HEADER = "X-Quiz-Token"


class AnswerPayload(BaseModel):
    """Answer submitted for the current question; empty when the timer ran out."""
    answer: Optional[str] = Field(default="", description="Selected option, empty for no answer")


class SummaryPayload(BaseModel):
    """Optional answer to the last open question, submitted before summarizing."""
    answer: Optional[str] = Field(default=None, description="Pending answer for the open question")


def get_quiz_service(request: Request) -> QuizService:
    """Dependency returning the application's quiz service."""
    service = getattr(request.app.state, "quiz_service", None)
    if service is None:
        raise RuntimeError("Quiz service not initialized. Application startup may have failed.")
    return service


def get_cookie_name(request: Request) -> str:
    return request.app.state.settings.SESSION_COOKIE_NAME


def get_token(
    request: Request,
    x_quiz_token: Optional[str] = Header(default=None, alias=TOKEN_HEADER),
) -> str:
    """
    Dependency resolving the session token from the header or cookie.

    Raises:
        SessionNotFoundError: If the request carries no token
    """
    token = x_quiz_token or request.cookies.get(get_cookie_name(request))
    if not token:
        raise SessionNotFoundError(None)
    return token


@router.post("/start")
async def start_quiz(
    request: Request,
    service: QuizService = Depends(get_quiz_service),
) -> JSONResponse:
    """Start a new quiz attempt under a fresh token."""
    token, state = await service.start()

    data = state.to_dict()
    data["token"] = token
    response = JSONResponse(content=APIResponse.success(data, message="Quiz started"))
    response.set_cookie(get_cookie_name(request), token, httponly=True, samesite="lax")
    return response


@router.get("/question")
async def current_question(
    token: str = Depends(get_token),
    service: QuizService = Depends(get_quiz_service),
):
    """Return the question to answer next, or a finished marker."""
    view = await service.current_question(token)
    message = "Quiz finished" if view.finished else f"Question {view.number} of {view.state.total}"
    return APIResponse.success(view.to_dict(), message=message)


@router.post("/answer")
async def submit_answer(
    payload: Optional[AnswerPayload] = None,
    token: str = Depends(get_token),
    service: QuizService = Depends(get_quiz_service),
):
    """Record the answer to the current question and advance."""
    answer = payload.answer if payload is not None else ""
    result = await service.submit_answer(token, answer)
    return APIResponse.success(result.to_dict(), message="Answer recorded")


@router.get("/summary")
async def get_summary(
    token: str = Depends(get_token),
    service: QuizService = Depends(get_quiz_service),
):
    """Return the score summary without submitting anything."""
    summary = await service.summarize(token)
    return APIResponse.success(summary.to_dict(), message="Quiz summary")


@router.post("/summary")
async def finish_quiz(
    payload: Optional[SummaryPayload] = None,
    token: str = Depends(get_token),
    service: QuizService = Depends(get_quiz_service),
):
    """Submit a pending answer for the open question, if any, then summarize."""
    pending = payload.answer if payload is not None else None
    summary = await service.summarize(token, pending_answer=pending)
    return APIResponse.success(summary.to_dict(), message="Quiz summary")
