"""
Quiz Session: one fixed-length run of the adaptive quiz.

Wires the engine to its collaborators:
- restores the value table and skill state from the learner store
- checks learner input against the current question
- persists the value table, skill state and quiz report once at the end
"""

from __future__ import annotations

import random
from collections.abc import Iterable

from loguru import logger

from src.adaptive.engine import AdaptiveQuizEngine, AnswerOutcome, EngineConfig
from src.adaptive.skill_state import MAX_LEVEL, SkillState
from src.quiz.answer_check import is_correct_answer
from src.quiz.catalogue import QuestionCatalogue, QuestionRecord
from src.storage.learner_store import LearnerStore
from src.study.session_tracker import QuizReport

DEFAULT_QUESTIONS_PER_QUIZ = 10


class QuizSession:
    """A quiz of ``questions_per_quiz`` questions for one learner."""

    def __init__(
        self,
        engine: AdaptiveQuizEngine,
        store: LearnerStore | None = None,
        questions_per_quiz: int = DEFAULT_QUESTIONS_PER_QUIZ,
        report_filename: str = "quiz_report.json",
    ):
        if questions_per_quiz < 1:
            raise ValueError("questions_per_quiz must be at least 1")
        self.engine = engine
        self.store = store
        self.questions_per_quiz = questions_per_quiz
        self.report_filename = report_filename

        self.finished = False
        self._report: QuizReport | None = None
        self.current_question_id: int | None = self.engine.get_next_action()

    @classmethod
    def from_store(
        cls,
        catalogue: QuestionCatalogue,
        store: LearnerStore,
        config: EngineConfig | None = None,
        questions_per_quiz: int = DEFAULT_QUESTIONS_PER_QUIZ,
        rng: random.Random | None = None,
        initial_state: SkillState | None = None,
        report_filename: str = "quiz_report.json",
    ) -> QuizSession:
        """
        Start a session from persisted learner data.

        Args:
            catalogue: Question catalogue
            store: Learner store providing the value table and skill state
            config: Engine parameters
            questions_per_quiz: Questions before the session ends
            rng: Random source for the selection policy
            initial_state: Overrides the stored skill state (first run)
            report_filename: Report file name inside the store directory
        """
        max_level = config.max_level if config else MAX_LEVEL
        state = initial_state or store.load_user_state(max_level)
        engine = AdaptiveQuizEngine(
            catalogue,
            value_table=store.load_value_table(),
            initial_state=state,
            config=config,
            rng=rng,
        )
        logger.info(f"Starting quiz at skill state {state.as_tuple()}")
        return cls(engine, store, questions_per_quiz=questions_per_quiz, report_filename=report_filename)

    @property
    def current_question(self) -> QuestionRecord | None:
        if self.current_question_id is None:
            return None
        return self.engine.get_question(self.current_question_id)

    @property
    def questions_answered(self) -> int:
        return self.engine.total_questions

    @property
    def questions_remaining(self) -> int:
        return max(0, self.questions_per_quiz - self.questions_answered)

    def submit(self, notes: Iterable[str]) -> AnswerOutcome:
        """Check learner notes against the current question and record the result."""
        question = self.current_question
        if question is None:
            raise RuntimeError("Quiz session is already finished")
        correct = is_correct_answer(notes, question.expected_input)
        return self.submit_result(correct)

    def submit_result(self, correct: bool) -> AnswerOutcome:
        """Record an already-judged answer and advance to the next question."""
        if self.current_question_id is None:
            raise RuntimeError("Quiz session is already finished")

        outcome = self.engine.evaluate_response(self.current_question_id, correct)

        if self.questions_answered >= self.questions_per_quiz:
            self.current_question_id = None
            self.finish()
        else:
            self.current_question_id = self.engine.get_next_action()
        return outcome

    def finish(self) -> QuizReport:
        """
        End the session and persist learner data.

        Safe to call repeatedly; data is only written the first time.
        """
        if self._report is not None:
            return self._report

        self.finished = True
        self.current_question_id = None
        self._report = self.engine.report()

        if self.store is not None:
            self.store.save_value_table(self.engine.export_value_table())
            self.store.save_user_state(self.engine.current_state)
            self.store.save_quiz_report(self._report, self.report_filename)
            logger.info(
                f"Quiz finished: score={self._report.score:.0f} "
                f"accuracy={self._report.accuracy:.0f}% state={self.engine.current_state.as_tuple()}"
            )
        return self._report
