"""
Question Catalogue for the Adaptive Piano Quiz.

Loads the static question bank (grouped by topic) once and exposes it as an
immutable id -> QuestionRecord lookup. The bank file uses the layout:

    {"topics": [{"topicID": 101, "topicName": "Notes",
                 "questions": [{"questionID": 1, "Title": "...",
                                "Description": "...", "ExpectedInput": "C",
                                "difficulty": 0}]}]}

A missing or malformed file yields an empty catalogue; malformed questions are
skipped with a warning.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from src.adaptive.skill_state import MAX_LEVEL

DEFAULT_QUESTION_BANK = Path(__file__).parent / "resources" / "question_bank.json"


@dataclass(frozen=True)
class QuestionRecord:
    """A single quiz question."""

    question_id: int
    topic_id: int
    difficulty: int
    title: str = ""
    description: str = ""
    expected_input: str = ""  # Canonical answer, e.g. "C-E-G"
    topic_name: str = ""

    def to_dict(self) -> dict:
        return {
            "questionID": self.question_id,
            "topicID": self.topic_id,
            "Title": self.title,
            "Description": self.description,
            "ExpectedInput": self.expected_input,
            "difficulty": self.difficulty,
            "topicName": self.topic_name,
        }


# Returned for unknown ids instead of raising
EMPTY_QUESTION = QuestionRecord(question_id=0, topic_id=0, difficulty=0)


# ========================================
# Bank file schema
# ========================================


class QuestionEntry(BaseModel):
    """One question as stored in the bank file."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    question_id: int = Field(alias="questionID")
    title: str = Field(default="", alias="Title")
    description: str = Field(default="", alias="Description")
    expected_input: str = Field(default="", alias="ExpectedInput")
    difficulty: int = Field(default=0, ge=0, le=MAX_LEVEL)


class TopicEntry(BaseModel):
    """A topic group; questions are validated one at a time."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    topic_id: int = Field(alias="topicID")
    topic_name: str = Field(default="", alias="topicName")
    questions: list[dict] = Field(default_factory=list)


# ========================================
# Catalogue
# ========================================


class QuestionCatalogue(Mapping[int, QuestionRecord]):
    """
    Read-only mapping of question id to QuestionRecord.

    Iteration is in ascending id order so scans over the catalogue are
    deterministic.
    """

    def __init__(self, questions: Iterable[QuestionRecord] = ()):
        by_id: dict[int, QuestionRecord] = {}
        for question in questions:
            if question.question_id in by_id:
                logger.warning(f"Duplicate question id {question.question_id}; keeping the last one")
            by_id[question.question_id] = question
        self._questions = MappingProxyType(dict(sorted(by_id.items())))

    def __getitem__(self, question_id: int) -> QuestionRecord:
        return self._questions[question_id]

    def __iter__(self) -> Iterator[int]:
        return iter(self._questions)

    def __len__(self) -> int:
        return len(self._questions)

    def get_question(self, question_id: int) -> QuestionRecord:
        """Look up a question, falling back to EMPTY_QUESTION."""
        return self._questions.get(question_id, EMPTY_QUESTION)

    def topics(self) -> dict[int, str]:
        """Topic id -> topic name for every topic with at least one question."""
        names: dict[int, str] = {}
        for question in self._questions.values():
            names.setdefault(question.topic_id, question.topic_name)
        return dict(sorted(names.items()))

    def for_topic(self, topic_id: int) -> list[QuestionRecord]:
        return [q for q in self._questions.values() if q.topic_id == topic_id]

    @classmethod
    def from_dict(cls, data: dict) -> QuestionCatalogue:
        """Build a catalogue from a parsed bank document."""
        topics = data.get("topics") if isinstance(data, dict) else None
        if not isinstance(topics, list):
            logger.warning("Question bank has no 'topics' array")
            return cls()

        records: list[QuestionRecord] = []
        for raw_topic in topics:
            try:
                topic = TopicEntry.model_validate(raw_topic)
            except ValidationError as e:
                logger.warning(f"Skipping malformed topic: {e.errors()[0]['msg']}")
                continue

            for raw_question in topic.questions:
                try:
                    entry = QuestionEntry.model_validate(raw_question)
                except ValidationError as e:
                    logger.warning(f"Skipping malformed question in topic {topic.topic_id}: {e.errors()[0]['msg']}")
                    continue
                records.append(
                    QuestionRecord(
                        question_id=entry.question_id,
                        topic_id=topic.topic_id,
                        difficulty=entry.difficulty,
                        title=entry.title,
                        description=entry.description,
                        expected_input=entry.expected_input,
                        topic_name=topic.topic_name,
                    )
                )
        return cls(records)


def load_question_bank(path: Path | str | None = None) -> QuestionCatalogue:
    """
    Load the question bank from a JSON file.

    Args:
        path: Bank file; defaults to the packaged bank

    Returns:
        QuestionCatalogue (empty if the file is missing or invalid)
    """
    bank_path = Path(path) if path else DEFAULT_QUESTION_BANK
    try:
        with open(bank_path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.warning(f"Question bank not found: {bank_path}")
        return QuestionCatalogue()
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Could not read question bank {bank_path}: {e}")
        return QuestionCatalogue()

    catalogue = QuestionCatalogue.from_dict(data)
    logger.info(f"Loaded {len(catalogue)} questions from {bank_path}")
    return catalogue
