"""
Shared fixtures for the quiz service tests.

The default catalog is the three-question catalog Q0..Q2 whose correct
answers are "A", "B" and "C", kept in source order so tests can rely on
indexes.
"""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pmpquiz.database.init_db import build_engine, create_tables
from pmpquiz.domain.questions import Question, QuestionCatalog
from pmpquiz.domain.sessions import MemorySessionStore, SqlSessionStore
from pmpquiz.quiz.service import QuizService

MEMORY_URL = "sqlite+aiosqlite:///:memory:"


def make_question(index: int, correct: str, difficulty: str = "medium") -> Question:
    return Question(
        text=f"Q{index}",
        options=("A", "B", "C", "D"),
        correct_answer=correct,
        difficulty=difficulty,
    )


@pytest.fixture
def questions():
    return [
        make_question(0, "A", "easy"),
        make_question(1, "B", "medium"),
        make_question(2, "C", "hard"),
    ]


@pytest.fixture
def catalog(questions):
    return QuestionCatalog(questions)


@pytest_asyncio.fixture
async def sql_store():
    """SQL session store on a private in-memory SQLite database."""
    engine = build_engine(MEMORY_URL)
    await create_tables(engine)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    yield SqlSessionStore(factory)
    await engine.dispose()


@pytest_asyncio.fixture(params=["memory", "sql"])
async def store(request):
    """Each session store implementation, run against the same tests."""
    if request.param == "memory":
        yield MemorySessionStore()
        return

    engine = build_engine(MEMORY_URL)
    await create_tables(engine)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    yield SqlSessionStore(factory)
    await engine.dispose()


@pytest.fixture
def service(catalog, store):
    return QuizService(catalog, store)
