"""
Tests for QuizSession: fixed-length runs and end-of-session persistence.
"""

import random

import pytest

from src.adaptive.engine import AdaptiveQuizEngine, EngineConfig
from src.adaptive.skill_state import SkillState
from src.storage.learner_store import LearnerStore
from src.study.quiz_session import DEFAULT_QUESTIONS_PER_QUIZ, QuizSession


@pytest.fixture
def store(tmp_path):
    return LearnerStore(tmp_path)


def _answer(session: QuizSession, correct: bool):
    """Play the current question with the right (or a wrong) answer."""
    expected = session.current_question.expected_input.split("-")
    notes = expected if correct else ["F#"]
    return session.submit(notes)


class TestSessionFlow:
    def test_first_question_selected_on_start(self, notes_catalogue):
        session = QuizSession(AdaptiveQuizEngine(notes_catalogue))
        assert session.current_question is not None
        assert session.current_question.question_id in {1, 2, 3}
        assert session.questions_per_quiz == DEFAULT_QUESTIONS_PER_QUIZ

    def test_submit_checks_notes(self, notes_catalogue, rng):
        session = QuizSession(AdaptiveQuizEngine(notes_catalogue, rng=rng))

        right = _answer(session, correct=True)
        wrong = _answer(session, correct=False)

        assert right.correct
        assert not wrong.correct
        assert session.questions_answered == 2

    def test_octaves_ignored(self, notes_catalogue, rng):
        session = QuizSession(AdaptiveQuizEngine(notes_catalogue, rng=rng))
        expected = session.current_question.expected_input
        assert session.submit([f"{expected}5"]).correct

    def test_ends_after_configured_questions(self, notes_catalogue, rng):
        session = QuizSession(AdaptiveQuizEngine(notes_catalogue, rng=rng), questions_per_quiz=3)

        for _ in range(3):
            assert not session.finished
            session.submit_result(True)

        assert session.finished
        assert session.current_question is None
        assert session.questions_remaining == 0
        with pytest.raises(RuntimeError):
            session.submit_result(True)

    def test_invalid_length(self, notes_catalogue):
        with pytest.raises(ValueError):
            QuizSession(AdaptiveQuizEngine(notes_catalogue), questions_per_quiz=0)


class TestPersistence:
    def test_full_quiz_saves_everything(self, notes_catalogue, store):
        session = QuizSession.from_store(notes_catalogue, store, rng=random.Random(5))

        for index in range(DEFAULT_QUESTIONS_PER_QUIZ):
            _answer(session, correct=index != 2)

        assert session.finished
        reloaded = LearnerStore(store.data_dir)
        report = reloaded.load_quiz_report()

        assert report.total_questions == 10
        assert report.correct_answers == 9
        assert report.accuracy == pytest.approx(90.0)
        assert report.stars == 4
        assert len(report.history) == 10
        assert not reloaded.is_new_user()
        assert reloaded.load_value_table()
        assert reloaded.load_user_state() == session.engine.current_state

    def test_resumes_from_stored_state(self, mixed_catalogue, store):
        store.save_user_state(SkillState(1, 0, 2))
        store.save_value_table({SkillState(1, 0, 2): {42: 3.0}})

        session = QuizSession.from_store(mixed_catalogue, store)

        assert session.engine.current_state == SkillState(1, 0, 2)
        assert session.engine.get_q_value(SkillState(1, 0, 2), 42) == 3.0

    def test_stored_state_clamped_to_engine_max_level(self, mixed_catalogue, store):
        store.save_user_state(SkillState(2, 2, 0))
        session = QuizSession.from_store(mixed_catalogue, store, config=EngineConfig(max_level=1))
        assert session.engine.current_state == SkillState(1, 1, 0)

    def test_initial_state_overrides_store(self, mixed_catalogue, store):
        store.save_user_state(SkillState(2, 2, 2))
        session = QuizSession.from_store(mixed_catalogue, store, initial_state=SkillState(0, 1, 0))
        assert session.engine.current_state == SkillState(0, 1, 0)

    def test_finish_writes_once(self, notes_catalogue, store):
        session = QuizSession.from_store(notes_catalogue, store, questions_per_quiz=5)
        session.submit_result(True)

        first = session.finish()
        store.report_path().unlink()
        second = session.finish()

        assert first is second
        assert session.finished
        assert not store.report_path().exists()

    def test_early_finish_keeps_partial_report(self, notes_catalogue, store):
        session = QuizSession.from_store(notes_catalogue, store)
        session.submit_result(True)
        session.submit_result(False)

        report = session.finish()

        assert report.total_questions == 2
        assert store.load_quiz_report().total_questions == 2

    def test_session_without_store(self, notes_catalogue):
        session = QuizSession(AdaptiveQuizEngine(notes_catalogue), questions_per_quiz=1)
        session.submit_result(True)
        assert session.finish().correct_answers == 1
