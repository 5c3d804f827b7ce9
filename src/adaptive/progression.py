"""
Skill progression from answer streaks.

Streaks are counted per question id:
- correct answers add difficulty-weighted points (1/2/3 for tiers 0/1/2)
- wrong answers add one to an incorrect count

Reaching a threshold moves the question's skill dimension up or down one tier
and resets that streak.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from typing import TYPE_CHECKING

from loguru import logger

from src.adaptive.skill_state import MAX_LEVEL, SkillState, TopicMapping

if TYPE_CHECKING:
    from src.quiz.catalogue import QuestionRecord

DIFFICULTY_POINTS: tuple[int, ...] = (1, 2, 3)


@dataclass
class StreakCounters:
    """Per-question streaks for one session."""

    correct: dict[int, int] = field(default_factory=dict)
    incorrect: dict[int, int] = field(default_factory=dict)

    def correct_streak(self, question_id: int) -> int:
        return self.correct.get(question_id, 0)

    def incorrect_streak(self, question_id: int) -> int:
        return self.incorrect.get(question_id, 0)


class ProgressionRule:
    """Promotes or demotes skill tiers based on per-question streaks."""

    def __init__(
        self,
        correct_threshold: int = 4,
        incorrect_threshold: int = 4,
        max_level: int = MAX_LEVEL,
        topic_mapping: TopicMapping | None = None,
        streaks: StreakCounters | None = None,
    ):
        if correct_threshold < 1 or incorrect_threshold < 1:
            raise ValueError("Progression thresholds must be at least 1")
        self.correct_threshold = correct_threshold
        self.incorrect_threshold = incorrect_threshold
        self.max_level = max_level
        self.topic_mapping = topic_mapping or TopicMapping()
        self.streaks = streaks or StreakCounters()

    @staticmethod
    def points_for(difficulty: int) -> int:
        """Weighted points a correct answer is worth."""
        index = max(0, min(difficulty, len(DIFFICULTY_POINTS) - 1))
        return DIFFICULTY_POINTS[index]

    def apply(self, question: QuestionRecord, correct: bool, state: SkillState) -> SkillState:
        """
        Update streaks for one answer and derive the resulting state.

        Args:
            question: The answered question
            correct: Whether the answer was correct
            state: Skill state before the answer

        Returns:
            Skill state after the answer (``state`` itself is left untouched)
        """
        qid = question.question_id
        dimension = self.topic_mapping.dimension_of(question.topic_id)
        current = state.level(dimension)

        if correct:
            self.streaks.correct[qid] = self.streaks.correct_streak(qid) + self.points_for(question.difficulty)
            self.streaks.incorrect[qid] = 0

            if self.streaks.correct[qid] >= self.correct_threshold:
                self.streaks.correct[qid] = 0
                if current < self.max_level:
                    logger.debug(f"Promoting {dimension.value}: {current} -> {current + 1} (question {qid})")
                    return state.with_level(dimension, current + 1, self.max_level)
        else:
            self.streaks.incorrect[qid] = self.streaks.incorrect_streak(qid) + 1
            self.streaks.correct[qid] = 0

            if self.streaks.incorrect[qid] >= self.incorrect_threshold:
                self.streaks.incorrect[qid] = 0
                if current > 0:
                    logger.debug(f"Demoting {dimension.value}: {current} -> {current - 1} (question {qid})")
                    return state.with_level(dimension, current - 1, self.max_level)

        return state
