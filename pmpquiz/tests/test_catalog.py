"""
Tests for loading and shuffling the question catalog.
"""

import json

import pytest
import yaml

from pmpquiz.common.error_handling import CatalogLoadError, ErrorCode
from pmpquiz.config import DEFAULT_QUESTIONS_FILE
from pmpquiz.domain.questions import Question, QuestionCatalog

RECORDS = [
    {"question": f"Question {i}", "options": ["A", "B", "C"], "correct_answer": "A", "difficulty": "easy"}
    for i in range(12)
]


@pytest.fixture
def json_file(tmp_path):
    path = tmp_path / "questions.json"
    path.write_text(json.dumps(RECORDS), encoding="utf-8")
    return path


def test_catalog_is_an_ordered_sequence(questions):
    catalog = QuestionCatalog(questions)

    assert len(catalog) == 3
    assert catalog.total == 3
    assert catalog[1] is questions[1]
    assert list(catalog) == questions
    assert questions[2] in catalog


def test_load_json_in_source_order(json_file):
    catalog = QuestionCatalog.load(json_file, shuffle=False)

    assert [q.text for q in catalog] == [f"Question {i}" for i in range(12)]
    assert all(isinstance(q, Question) for q in catalog)


def test_load_yaml(tmp_path):
    path = tmp_path / "questions.yaml"
    path.write_text(yaml.safe_dump(RECORDS[:2]), encoding="utf-8")

    catalog = QuestionCatalog.load(path, shuffle=False)

    assert [q.text for q in catalog] == ["Question 0", "Question 1"]


def test_seeded_shuffle_is_reproducible(json_file):
    first = QuestionCatalog.load(json_file, shuffle=True, seed=7)
    second = QuestionCatalog.load(json_file, shuffle=True, seed=7)

    assert [q.text for q in first] == [q.text for q in second]
    assert sorted(q.text for q in first) == sorted(r["question"] for r in RECORDS)


def test_shuffle_happens_once_at_construction(json_file):
    catalog = QuestionCatalog.load(json_file, shuffle=True)

    order = [q.text for q in catalog]

    assert [q.text for q in catalog] == order
    assert [catalog[i].text for i in range(len(catalog))] == order


def test_missing_file_raises_catalog_load_error(tmp_path):
    with pytest.raises(CatalogLoadError) as exc_info:
        QuestionCatalog.load(tmp_path / "missing.json")

    assert exc_info.value.code is ErrorCode.CATALOG_LOAD_FAILURE
    assert isinstance(exc_info.value.cause, OSError)


def test_malformed_json_raises_catalog_load_error(tmp_path):
    path = tmp_path / "questions.json"
    path.write_text("[{not json", encoding="utf-8")

    with pytest.raises(CatalogLoadError):
        QuestionCatalog.load(path)


@pytest.mark.parametrize("name", ["questions.json", "questions.yaml"])
def test_undecodable_file_raises_catalog_load_error(tmp_path, name):
    path = tmp_path / name
    path.write_bytes(b'[{"question": "\xff\xfe"}]')

    with pytest.raises(CatalogLoadError) as exc_info:
        QuestionCatalog.load(path)

    assert "not valid UTF-8" in exc_info.value.message
    assert isinstance(exc_info.value.cause, UnicodeDecodeError)


@pytest.mark.parametrize("content", ["[]", "{}", '"questions"'])
def test_empty_or_non_list_catalog_is_rejected(tmp_path, content):
    path = tmp_path / "questions.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(CatalogLoadError):
        QuestionCatalog.load(path)


def test_invalid_question_names_its_position():
    records = [RECORDS[0], {"question": "Broken", "options": ["A", "B"], "correct_answer": "Z"}]

    with pytest.raises(CatalogLoadError) as exc_info:
        QuestionCatalog.from_records(records, source="inline")

    assert "question #1" in exc_info.value.message
    assert exc_info.value.details["source"] == "inline"


def test_bundled_questions_load():
    catalog = QuestionCatalog.load(DEFAULT_QUESTIONS_FILE, shuffle=False)

    assert len(catalog) >= 10
    for question in catalog:
        assert question.correct_answer in question.options
