"""
Adaptive Quiz Engine: Q-learning driven question selection.

Orchestrates one learner session:
1. get_next_action() picks a question (epsilon-greedy over the value table)
2. the caller checks the learner's answer and reports correctness
3. evaluate_response() records the answer, updates the skill state and
   applies the temporal-difference update to the value table

The engine is synchronous and owns all of its session state; run one
instance per learner session.
"""

from __future__ import annotations

import random
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from loguru import logger

from src.adaptive.progression import ProgressionRule
from src.adaptive.reward import RewardPolicy
from src.adaptive.selection_policy import DEFAULT_EPSILON_SCHEDULE, Selection, SelectionPolicy
from src.adaptive.skill_state import MAX_LEVEL, SkillState, TopicMapping
from src.adaptive.value_table import QTable, ValueTable
from src.study.session_tracker import HistoryEntry, QuizReport, SessionTracker

if TYPE_CHECKING:
    from src.quiz.catalogue import QuestionCatalogue, QuestionRecord

FeedbackListener = Callable[[bool], None]


@dataclass
class EngineConfig:
    """Tunable learning and scoring parameters."""

    learning_rate: float = 0.1
    discount_factor: float = 0.9
    epsilon_schedule: tuple[float, ...] = DEFAULT_EPSILON_SCHEDULE
    correct_threshold: int = 4
    incorrect_threshold: int = 4
    max_level: int = MAX_LEVEL
    rewards: RewardPolicy = field(default_factory=RewardPolicy)
    score_correct_delta: float = 10.0
    score_incorrect_delta: float = 5.0
    clamp_score: bool = True
    topic_mapping: TopicMapping = field(default_factory=TopicMapping)

    def __post_init__(self) -> None:
        if not 0.0 < self.learning_rate < 1.0:
            raise ValueError(f"learning_rate must be in (0, 1), got {self.learning_rate}")
        if not 0.0 < self.discount_factor < 1.0:
            raise ValueError(f"discount_factor must be in (0, 1), got {self.discount_factor}")
        if self.max_level < 0:
            raise ValueError(f"max_level must be non-negative, got {self.max_level}")


@dataclass
class AnswerOutcome:
    """What happened when an answer was evaluated."""

    question_id: int
    correct: bool
    state_before: SkillState
    state_after: SkillState
    reward: float
    q_value: float
    score: float
    accuracy: float

    @property
    def promoted(self) -> bool:
        return self.state_after.improved_over(self.state_before)

    @property
    def demoted(self) -> bool:
        return self.state_before.improved_over(self.state_after)


class AdaptiveQuizEngine:
    """
    Reinforcement-learning quiz engine.

    Tracks learner progress over notes, chords and scales, selects questions
    from the learner's zone of productive difficulty and learns which
    questions pay off at each skill state.
    """

    def __init__(
        self,
        catalogue: QuestionCatalogue,
        value_table: ValueTable | Mapping[SkillState, Mapping[int, float]] | None = None,
        initial_state: SkillState | None = None,
        config: EngineConfig | None = None,
        rng: random.Random | None = None,
        asked: Iterable[int] = (),
    ):
        """
        Initialize the engine.

        Args:
            catalogue: Non-empty question catalogue (read-only)
            value_table: Value table restored from a previous session
            initial_state: Learner skill state at session start
            config: Learning parameters (defaults to EngineConfig())
            rng: Random source for exploration; seed it for reproducibility
            asked: Question ids to treat as already asked this session
        """
        if not catalogue:
            raise ValueError("Question catalogue is empty")

        self.config = config or EngineConfig()
        state = initial_state or SkillState()
        if not state.is_valid(self.config.max_level):
            raise ValueError(f"Skill state {state.as_tuple()} outside [0, {self.config.max_level}]")

        self.catalogue = catalogue
        if isinstance(value_table, ValueTable):
            self.value_table = value_table
        else:
            self.value_table = ValueTable(value_table)
        self._state = state
        self._asked: set[int] = set(asked)
        self._listeners: list[FeedbackListener] = []

        self.policy = SelectionPolicy(
            catalogue,
            self.value_table,
            epsilon_schedule=self.config.epsilon_schedule,
            topic_mapping=self.config.topic_mapping,
            rng=rng,
        )
        self.progression = ProgressionRule(
            correct_threshold=self.config.correct_threshold,
            incorrect_threshold=self.config.incorrect_threshold,
            max_level=self.config.max_level,
            topic_mapping=self.config.topic_mapping,
        )
        self.tracker = SessionTracker(
            correct_delta=self.config.score_correct_delta,
            incorrect_delta=self.config.score_incorrect_delta,
            clamp_score=self.config.clamp_score,
        )
        self.last_selection: Selection | None = None

    # ========================================
    # Selection
    # ========================================

    def get_actions_for_state_level(self, allow_slight_stretch: bool = False) -> list[int]:
        """Question ids matching the learner's current tiers."""
        return self.policy.valid_actions(self._state, allow_stretch=allow_slight_stretch)

    def get_next_action(self) -> int:
        """Select the next question id to present."""
        self.last_selection = self.policy.select(self._state, self._asked)
        return self.last_selection.question_id

    def get_question(self, question_id: int) -> QuestionRecord:
        """Question record for an id; an empty record if unknown."""
        return self.catalogue.get_question(question_id)

    # ========================================
    # Learning
    # ========================================

    def get_reward(self, before: SkillState, after: SkillState, correct: bool) -> float:
        return self.config.rewards.reward(before, after, correct)

    def max_q_value(self, state: SkillState) -> float:
        return self.value_table.max_value(state)

    def get_q_value(self, state: SkillState, question_id: int) -> float:
        return self.value_table.get(state, question_id)

    def update_q_table(
        self, state: SkillState, question_id: int, reward: float, next_state: SkillState
    ) -> float:
        return self.value_table.td_update(
            state,
            question_id,
            reward,
            next_state,
            learning_rate=self.config.learning_rate,
            discount_factor=self.config.discount_factor,
        )

    def add_feedback_listener(self, listener: FeedbackListener) -> None:
        """Register a callback invoked with the correctness of every answer."""
        self._listeners.append(listener)

    def evaluate_response(self, question_id: int, correct: bool) -> AnswerOutcome:
        """
        Process one answered question.

        Args:
            question_id: Id of the answered question (from get_next_action)
            correct: Whether the learner answered correctly

        Returns:
            AnswerOutcome describing the state transition and reward
        """
        question = self.catalogue[question_id]

        self.tracker.record(self._state, question_id, question.description, correct)

        for listener in self._listeners:
            listener(correct)

        before = self._state
        self._state = self.progression.apply(question, correct, before)

        reward = self.get_reward(before, self._state, correct)
        q_value = self.update_q_table(before, question_id, reward, self._state)

        self._asked.add(question_id)

        if self._state != before:
            logger.info(f"Skill state {before.as_tuple()} -> {self._state.as_tuple()}")

        return AnswerOutcome(
            question_id=question_id,
            correct=correct,
            state_before=before,
            state_after=self._state,
            reward=reward,
            q_value=q_value,
            score=self.tracker.score,
            accuracy=self.tracker.accuracy,
        )

    # ========================================
    # Session read-out
    # ========================================

    @property
    def current_state(self) -> SkillState:
        return self._state

    @property
    def asked_this_session(self) -> frozenset[int]:
        return frozenset(self._asked)

    @property
    def score(self) -> float:
        return self.tracker.score

    @property
    def accuracy(self) -> float:
        return self.tracker.accuracy

    @property
    def total_questions(self) -> int:
        return self.tracker.total_questions

    @property
    def correct_answers(self) -> int:
        return self.tracker.correct_answers

    @property
    def history(self) -> tuple[HistoryEntry, ...]:
        return self.tracker.history

    def export_value_table(self) -> QTable:
        """Copy of the value table for persistence."""
        return self.value_table.export()

    def report(self) -> QuizReport:
        return self.tracker.report()
