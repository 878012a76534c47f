"""
Question Catalog Module

The catalog is the ordered, read-only question set shared by every session
for the lifetime of the process. It is built once at startup, shuffled at
most once, and then handed to the quiz service.
"""

import json
import random
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

import yaml

from pmpquiz.common.error_handling import CatalogLoadError
from pmpquiz.common.logger import app_logger, log_execution_time
from .model import Question

logger = app_logger.getChild("catalog")

YAML_SUFFIXES = (".yaml", ".yml")


class QuestionCatalog(Sequence[Question]):
    """Immutable ordered sequence of questions."""

    def __init__(
        self,
        questions: Iterable[Question],
        shuffle: bool = False,
        seed: Optional[int] = None
    ):
        """
        Build the catalog.

        Args:
            questions: Questions in source order
            shuffle: Whether to shuffle once before freezing the order
            seed: Optional seed making the shuffle reproducible
        """
        ordered: List[Question] = list(questions)
        if shuffle:
            random.Random(seed).shuffle(ordered)
        self._questions: Tuple[Question, ...] = tuple(ordered)

    def __getitem__(self, index):
        return self._questions[index]

    def __len__(self) -> int:
        return len(self._questions)

    def __iter__(self) -> Iterator[Question]:
        return iter(self._questions)

    def __repr__(self) -> str:
        return f"QuestionCatalog({len(self._questions)} questions)"

    @property
    def total(self) -> int:
        """Number of questions, N."""
        return len(self._questions)

    @classmethod
    def from_records(
        cls,
        records: Any,
        source: str = "<records>",
        shuffle: bool = False,
        seed: Optional[int] = None
    ) -> 'QuestionCatalog':
        """
        Build a catalog from decoded question records.

        Args:
            records: A list of question mappings
            source: Where the records came from, for error messages
            shuffle: Whether to shuffle once
            seed: Optional shuffle seed

        Returns:
            The catalog

        Raises:
            CatalogLoadError: If the records are not a non-empty list of valid questions
        """
        if not isinstance(records, list):
            raise CatalogLoadError(source, f"expected a list of questions, got {type(records).__name__}")
        if not records:
            raise CatalogLoadError(source, "no questions found")

        questions = []
        for position, record in enumerate(records):
            try:
                questions.append(Question.from_dict(record))
            except ValueError as e:
                raise CatalogLoadError(source, f"question #{position} is invalid: {e}", cause=e) from e

        return cls(questions, shuffle=shuffle, seed=seed)

    @classmethod
    @log_execution_time(logger)
    def load(
        cls,
        path: Union[str, Path],
        shuffle: bool = True,
        seed: Optional[int] = None
    ) -> 'QuestionCatalog':
        """
        Load the catalog from a JSON or YAML file.

        Args:
            path: Path to the questions file
            shuffle: Whether to shuffle once after loading
            seed: Optional shuffle seed

        Returns:
            The loaded catalog

        Raises:
            CatalogLoadError: If the file cannot be read or parsed, or holds no valid questions
        """
        path = Path(path)
        source = str(path)

        try:
            with path.open("r", encoding="utf-8") as handle:
                if path.suffix.lower() in YAML_SUFFIXES:
                    records = yaml.safe_load(handle)
                else:
                    records = json.load(handle)
        except OSError as e:
            raise CatalogLoadError(source, f"cannot read file ({e.strerror or e})", cause=e) from e
        except UnicodeDecodeError as e:
            raise CatalogLoadError(source, "file is not valid UTF-8", cause=e) from e
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise CatalogLoadError(source, "file is not valid JSON/YAML", cause=e) from e

        catalog = cls.from_records(records, source=source, shuffle=shuffle, seed=seed)
        logger.info(f"Loaded {len(catalog)} questions from {source} (shuffled: {shuffle})")
        return catalog
