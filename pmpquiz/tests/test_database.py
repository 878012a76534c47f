"""
Session store tests.

The contract tests run against both the in-memory and the SQL store through
the parametrized ``store`` fixture; the remaining tests cover behaviour only
the SQL store has (schema layout, engine lifecycle).
"""

import pytest
from sqlalchemy import inspect, select

from pmpquiz.common.error_handling import (
    DatabaseError, DuplicateAnswerError, ProgressConflictError,
    SessionAlreadyExistsError, SessionNotFoundError
)
from pmpquiz.database import AnswerRow
from pmpquiz.database import init_db
from pmpquiz.database.init_db import get_engine_kwargs, is_memory_sqlite
from pmpquiz.domain.sessions import AnsweredRecord


def record(index, answer="A", correct="A", difficulty="easy"):
    return AnsweredRecord(index, answer, correct, difficulty)


@pytest.mark.asyncio
async def test_create_starts_at_zero(store):
    await store.create("t1")

    assert await store.get_progress("t1") == 0
    assert await store.list_answers("t1") == []


@pytest.mark.asyncio
async def test_create_rejects_existing_token(store):
    await store.create("t1")

    with pytest.raises(SessionAlreadyExistsError):
        await store.create("t1")


@pytest.mark.asyncio
async def test_unknown_token_raises_not_found(store):
    with pytest.raises(SessionNotFoundError):
        await store.get_progress("missing")
    with pytest.raises(SessionNotFoundError):
        await store.set_progress("missing", 1)
    with pytest.raises(SessionNotFoundError):
        await store.append_answer("missing", record(0))
    with pytest.raises(SessionNotFoundError):
        await store.list_answers("missing")


@pytest.mark.asyncio
async def test_progress_moves_forward_one_step_at_a_time(store):
    await store.create("t1")

    await store.set_progress("t1", 1)
    await store.set_progress("t1", 1)
    await store.set_progress("t1", 2)

    assert await store.get_progress("t1") == 2

    with pytest.raises(ProgressConflictError):
        await store.set_progress("t1", 1)
    with pytest.raises(ProgressConflictError):
        await store.set_progress("t1", 4)

    assert await store.get_progress("t1") == 2


@pytest.mark.asyncio
async def test_answers_are_listed_in_index_order(store):
    await store.create("t1")

    await store.append_answer("t1", record(0, "A", "A", "easy"))
    await store.append_answer("t1", record(1, "", "B", "hard"))

    assert await store.list_answers("t1") == [
        AnsweredRecord(0, "A", "A", "easy"),
        AnsweredRecord(1, "", "B", "hard"),
    ]


@pytest.mark.asyncio
async def test_answer_must_extend_log_by_one(store):
    await store.create("t1")
    await store.append_answer("t1", record(0))

    with pytest.raises(DuplicateAnswerError):
        await store.append_answer("t1", record(0))
    with pytest.raises(DuplicateAnswerError):
        await store.append_answer("t1", record(2))

    assert len(await store.list_answers("t1")) == 1


@pytest.mark.asyncio
async def test_record_answer_appends_and_advances(store):
    await store.create("t1")

    await store.record_answer("t1", record(0))
    await store.record_answer("t1", record(1, "X", "B", "medium"))

    assert await store.get_progress("t1") == 2
    assert [r.question_index for r in await store.list_answers("t1")] == [0, 1]


@pytest.mark.asyncio
async def test_record_answer_rejects_out_of_order_records(store):
    await store.create("t1")
    await store.record_answer("t1", record(0))

    with pytest.raises(DuplicateAnswerError):
        await store.record_answer("t1", record(0))
    with pytest.raises(DuplicateAnswerError):
        await store.record_answer("t1", record(2))
    with pytest.raises(SessionNotFoundError):
        await store.record_answer("missing", record(0))

    assert await store.get_progress("t1") == 1
    assert len(await store.list_answers("t1")) == 1


@pytest.mark.asyncio
async def test_failed_progress_write_keeps_the_answer_out(store, monkeypatch):
    await store.create("t1")

    def fail_progress(token, current, requested):
        raise DatabaseError("record_answer", context={"token": token})

    monkeypatch.setattr(store, "check_progress_step", fail_progress)
    with pytest.raises(DatabaseError):
        await store.record_answer("t1", record(0))

    assert await store.get_progress("t1") == 0
    assert await store.list_answers("t1") == []

    monkeypatch.undo()
    await store.record_answer("t1", record(0))

    assert await store.get_progress("t1") == 1
    assert len(await store.list_answers("t1")) == 1


@pytest.mark.asyncio
async def test_tokens_do_not_share_state(store):
    await store.create("t1")
    await store.create("t2")

    await store.append_answer("t1", record(0))
    await store.set_progress("t1", 1)

    assert await store.get_progress("t2") == 0
    assert await store.list_answers("t2") == []


@pytest.mark.asyncio
async def test_sql_store_writes_one_row_per_answer(sql_store):
    await sql_store.create("t1")
    await sql_store.append_answer("t1", record(0, "X", "A", "medium"))

    async with sql_store._session_factory() as session:
        rows = (await session.scalars(select(AnswerRow))).all()

    assert [row.to_dict() for row in rows] == [{
        "quiz_id": "t1",
        "question_index": 0,
        "user_answer": "X",
        "correct_answer": "A",
        "difficulty": "medium",
    }]


@pytest.mark.asyncio
async def test_answers_table_has_composite_key(sql_store):
    async with sql_store._session_factory() as session:
        conn = await session.connection()
        pk = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_pk_constraint("answers"))

    assert pk["constrained_columns"] == ["quiz_id", "question_index"]


@pytest.mark.asyncio
async def test_initialize_and_close_database():
    engine = await init_db.initialize_database("sqlite+aiosqlite:///:memory:")

    assert init_db.get_engine() is engine
    assert init_db.get_session_factory() is not None

    await init_db.close_database()

    with pytest.raises(RuntimeError):
        init_db.get_engine()


@pytest.mark.asyncio
async def test_initialize_database_wraps_connection_failures(tmp_path):
    url = f"sqlite+aiosqlite:///{tmp_path}/missing-dir/quiz.db"

    with pytest.raises(DatabaseError):
        await init_db.initialize_database(url)

    with pytest.raises(RuntimeError):
        init_db.get_engine()


@pytest.mark.parametrize("url, expected", [
    ("sqlite+aiosqlite:///:memory:", True),
    ("sqlite+aiosqlite://", True),
    ("sqlite+aiosqlite:///./quiz.db", False),
    ("postgresql+asyncpg://u:p@localhost/quiz", False),
])
def test_is_memory_sqlite(url, expected):
    assert is_memory_sqlite(url) is expected


def test_engine_kwargs_per_backend():
    memory = get_engine_kwargs("sqlite+aiosqlite:///:memory:")
    postgres = get_engine_kwargs("postgresql+asyncpg://u:p@localhost/quiz", pool_size=3)

    assert "poolclass" in memory
    assert memory["connect_args"] == {"check_same_thread": False}
    assert postgres["pool_size"] == 3
    assert postgres["pool_pre_ping"] is True
