"""
Tests for the question catalogue and bank loader.
"""

import json

import pytest

from src.adaptive.skill_state import SkillDimension, TopicMapping
from src.quiz.catalogue import (
    EMPTY_QUESTION,
    QuestionCatalogue,
    QuestionRecord,
    load_question_bank,
)


@pytest.fixture
def packaged_bank():
    return load_question_bank()


class TestPackagedBank:
    def test_loads_all_topics(self, packaged_bank):
        assert len(packaged_bank) == 40
        assert set(packaged_bank.topics()) == {101, 102, 103, 104, 105}

    def test_every_family_has_a_beginner_question(self, packaged_bank):
        mapping = TopicMapping()
        beginner_dimensions = {
            mapping.dimension_of(q.topic_id) for q in packaged_bank.values() if q.difficulty == 0
        }
        assert beginner_dimensions == set(SkillDimension)

    def test_ids_iterate_in_ascending_order(self, packaged_bank):
        ids = list(packaged_bank)
        assert ids == sorted(ids)

    def test_record_fields(self, packaged_bank):
        question = packaged_bank[21]
        assert question.topic_id == 102
        assert question.topic_name == "Major Chords"
        assert question.expected_input == "C-E-G"
        assert question.difficulty == 0

    def test_difficulties_within_tiers(self, packaged_bank):
        assert {q.difficulty for q in packaged_bank.values()} == {0, 1, 2}


class TestLookup:
    def test_unknown_id_returns_empty_record(self, notes_catalogue):
        assert notes_catalogue.get_question(404) is EMPTY_QUESTION
        assert EMPTY_QUESTION.question_id == 0
        assert EMPTY_QUESTION.title == ""

    def test_mapping_access_raises_for_unknown(self, notes_catalogue):
        with pytest.raises(KeyError):
            notes_catalogue[404]

    def test_for_topic(self, mixed_catalogue):
        assert [q.question_id for q in mixed_catalogue.for_topic(102)] == [21, 24]

    def test_catalogue_is_read_only(self, notes_catalogue):
        with pytest.raises(TypeError):
            notes_catalogue[4] = QuestionRecord(4, 101, 0)  # type: ignore[index]

    def test_duplicate_ids_keep_last(self):
        catalogue = QuestionCatalogue(
            [QuestionRecord(1, 101, 0, "first"), QuestionRecord(1, 101, 0, "second")]
        )
        assert len(catalogue) == 1
        assert catalogue[1].title == "second"

    def test_to_dict_uses_bank_keys(self):
        data = QuestionRecord(5, 101, 1, "T", "D", "C#", "Notes").to_dict()
        assert data["questionID"] == 5
        assert data["ExpectedInput"] == "C#"
        assert data["difficulty"] == 1


class TestLoader:
    def test_missing_file_gives_empty_catalogue(self, tmp_path):
        assert len(load_question_bank(tmp_path / "nope.json")) == 0

    def test_invalid_json_gives_empty_catalogue(self, tmp_path):
        path = tmp_path / "bank.json"
        path.write_text("{not json", encoding="utf-8")
        assert len(load_question_bank(path)) == 0

    def test_missing_topics_array(self, tmp_path):
        path = tmp_path / "bank.json"
        path.write_text(json.dumps({"questions": []}), encoding="utf-8")
        assert len(load_question_bank(path)) == 0

    def test_malformed_entries_skipped(self, tmp_path):
        bank = {
            "topics": [
                {
                    "topicID": 101,
                    "topicName": "Notes",
                    "questions": [
                        {"questionID": 1, "Title": "Play C", "ExpectedInput": "C", "difficulty": 0},
                        {"Title": "No id"},
                        {"questionID": 2, "difficulty": 5},
                        {"questionID": "three", "difficulty": 0},
                    ],
                },
                {"topicName": "Topic without id", "questions": [{"questionID": 9}]},
                {
                    "topicID": 104,
                    "questions": [{"questionID": 41, "ExpectedInput": "C-D-E-F-G-A-B", "difficulty": 1}],
                },
            ]
        }
        path = tmp_path / "bank.json"
        path.write_text(json.dumps(bank), encoding="utf-8")

        catalogue = load_question_bank(path)

        assert list(catalogue) == [1, 41]
        assert catalogue[1].topic_name == "Notes"
        assert catalogue[41].topic_id == 104
        assert catalogue[41].difficulty == 1
