"""
Tests for LearnerStore JSON persistence.

Tests:
- Default document creation
- Value table key encoding
- Skill state and new-user flag round trips
- Recovery from damaged files
- Quiz report files
"""

import json

import pytest

from src.adaptive.skill_state import SkillState
from src.storage.learner_store import (
    LearnerStore,
    decode_value_table,
    encode_value_table,
    state_from_key,
    state_to_key,
)
from src.study.session_tracker import QuizReport


@pytest.fixture
def store(tmp_path):
    return LearnerStore(tmp_path / "learner")


class TestKeys:
    def test_state_key_format(self):
        assert state_to_key(SkillState(0, 1, 2)) == "[0,1,2]"

    @pytest.mark.parametrize("key", ["[0,1,2]", "[0, 1, 2]", " [0,1,2] "])
    def test_state_key_parsing(self, key):
        assert state_from_key(key) == SkillState(0, 1, 2)

    @pytest.mark.parametrize("key", ["[0,1]", "0,1,2", "[a,b,c]", ""])
    def test_malformed_state_keys(self, key):
        assert state_from_key(key) is None

    def test_table_encoding(self):
        encoded = encode_value_table({SkillState(0, 1, 0): {12: 0.25, 3: -1.0}})
        assert encoded == {"[0,1,0]": {"[3]": -1.0, "[12]": 0.25}}

    def test_decode_skips_bad_entries(self):
        raw = {
            "[0,0,0]": {"[1]": 0.5, "[x]": 1.0, "[2]": "high"},
            "not-a-state": {"[1]": 1.0},
            "[1,0,0]": [1, 2],
        }
        assert decode_value_table(raw) == {SkillState(): {1: 0.5}}


class TestDefaults:
    def test_creates_default_document(self, store):
        assert store.data_path.exists()
        data = json.loads(store.data_path.read_text(encoding="utf-8"))
        assert data == {
            "qtable": {
                "newUser": True,
                "table": {},
                "userState": {"notes": 0, "chords": 0, "scales": 0},
            }
        }
        assert store.is_new_user()
        assert store.load_user_state() == SkillState()
        assert store.load_value_table() == {}


class TestRoundTrip:
    def test_value_table_persists(self, tmp_path):
        table = {SkillState(0, 0, 0): {1: 0.25, 21: -0.25}, SkillState(1, 0, 0): {8: 1.5}}
        LearnerStore(tmp_path).save_value_table(table)

        reloaded = LearnerStore(tmp_path)
        assert reloaded.load_value_table() == table
        # Saving a table means the learner has played before
        assert not reloaded.is_new_user()

    def test_user_state_persists(self, tmp_path):
        LearnerStore(tmp_path).save_user_state(SkillState(2, 1, 0))
        assert LearnerStore(tmp_path).load_user_state() == SkillState(2, 1, 0)

    def test_new_user_flag(self, tmp_path):
        LearnerStore(tmp_path).set_new_user(False)
        assert not LearnerStore(tmp_path).is_new_user()

    def test_reset(self, tmp_path):
        store = LearnerStore(tmp_path)
        store.save_value_table({SkillState(): {1: 1.0}})
        store.save_user_state(SkillState(1, 1, 1))

        assert store.reset()

        reloaded = LearnerStore(tmp_path)
        assert reloaded.is_new_user()
        assert reloaded.load_value_table() == {}
        assert reloaded.load_user_state() == SkillState()


class TestDamagedData:
    def test_corrupt_json_falls_back_to_defaults(self, tmp_path):
        (tmp_path / "data.json").write_text("{broken", encoding="utf-8")
        store = LearnerStore(tmp_path)
        assert store.is_new_user()
        assert store.load_value_table() == {}

    def test_non_object_document(self, tmp_path):
        (tmp_path / "data.json").write_text("[1, 2, 3]", encoding="utf-8")
        assert LearnerStore(tmp_path).load_user_state() == SkillState()

    def test_out_of_range_state_clamped(self, tmp_path):
        document = {"qtable": {"newUser": False, "table": {}, "userState": {"notes": 5, "chords": -1, "scales": 1}}}
        (tmp_path / "data.json").write_text(json.dumps(document), encoding="utf-8")
        assert LearnerStore(tmp_path).load_user_state() == SkillState(2, 0, 1)

    def test_state_clamped_to_lower_max_level(self, tmp_path):
        LearnerStore(tmp_path).save_user_state(SkillState(2, 1, 0))
        assert LearnerStore(tmp_path).load_user_state(max_level=1) == SkillState(1, 1, 0)

    def test_missing_qtable_section(self, tmp_path):
        (tmp_path / "data.json").write_text(json.dumps({"other": 1}), encoding="utf-8")
        store = LearnerStore(tmp_path)
        assert store.is_new_user()
        assert store.load_value_table() == {}


class TestQuizReports:
    def test_missing_report(self, store):
        assert store.load_quiz_report() is None

    def test_report_round_trip(self, store):
        report = QuizReport(score=40.0, accuracy=80.0, total_questions=5, correct_answers=4)
        assert store.save_quiz_report(report)

        assert store.report_path().exists()
        assert store.load_quiz_report() == report

    def test_custom_report_filename(self, store):
        store.save_quiz_report(QuizReport(score=10.0), "other.json")
        assert store.load_quiz_report("other.json").score == 10.0
        assert store.load_quiz_report() is None

    def test_corrupt_report(self, store):
        store.report_path().write_text("nope", encoding="utf-8")
        assert store.load_quiz_report() is None
