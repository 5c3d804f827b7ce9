"""
Epsilon-greedy question selection.

The exploration rate depends on the learner's average tier: beginners explore
more, advanced learners exploit the value table more often.

- Explore: random question from a randomly chosen topic family, allowing
  questions one tier above the learner ("slight stretch").
- Exploit: highest-valued question at or below the learner's tiers.

Questions already asked in the session are skipped until the pool runs out,
at which point the asked set is cleared and repetition is allowed again.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from loguru import logger

from src.adaptive.skill_state import SkillDimension, SkillState, TopicMapping
from src.adaptive.value_table import ValueTable

if TYPE_CHECKING:
    from src.quiz.catalogue import QuestionCatalogue

DEFAULT_EPSILON_SCHEDULE: tuple[float, ...] = (0.9, 0.7, 0.5)


@dataclass
class Selection:
    """Outcome of one selection step."""

    question_id: int
    explored: bool
    epsilon: float
    pool_reset: bool = False


class SelectionPolicy:
    """
    Picks the next question for a learner.

    The policy reads the catalogue and value table and only mutates the
    asked set it is handed.
    """

    def __init__(
        self,
        catalogue: QuestionCatalogue,
        value_table: ValueTable,
        epsilon_schedule: Sequence[float] = DEFAULT_EPSILON_SCHEDULE,
        topic_mapping: TopicMapping | None = None,
        rng: random.Random | None = None,
    ):
        """
        Initialize the policy.

        Args:
            catalogue: Question lookup (read-only)
            value_table: Learned values consulted when exploiting
            epsilon_schedule: Exploration rate per average tier; the last
                entry applies to every higher tier
            topic_mapping: Topic id -> skill dimension mapping
            rng: Random source (seed it for reproducible sessions)
        """
        if not epsilon_schedule:
            raise ValueError("epsilon_schedule must not be empty")
        if any(not 0.0 <= eps <= 1.0 for eps in epsilon_schedule):
            raise ValueError(f"epsilon values must lie in [0, 1]: {list(epsilon_schedule)}")
        if any(later > earlier for earlier, later in zip(epsilon_schedule, epsilon_schedule[1:])):
            raise ValueError(f"epsilon_schedule must be non-increasing: {list(epsilon_schedule)}")

        self.catalogue = catalogue
        self.value_table = value_table
        self.epsilon_schedule = tuple(epsilon_schedule)
        self.topic_mapping = topic_mapping or TopicMapping()
        self.rng = rng or random.Random()

    def epsilon_for(self, state: SkillState) -> float:
        """Exploration rate for the state's (floored) average tier."""
        index = min(state.average_level, len(self.epsilon_schedule) - 1)
        return self.epsilon_schedule[index]

    def valid_actions(self, state: SkillState, allow_stretch: bool = False) -> list[int]:
        """
        Question ids suitable for the learner's current tiers.

        Args:
            state: Learner skill state
            allow_stretch: Also accept questions one tier above the learner

        Returns:
            Matching ids in catalogue order
        """
        stretch = 1 if allow_stretch else 0
        return [
            qid
            for qid, question in self.catalogue.items()
            if question.difficulty
            <= state.level(self.topic_mapping.dimension_of(question.topic_id)) + stretch
        ]

    def select(self, state: SkillState, asked: set[int]) -> Selection:
        """
        Choose the next question.

        Args:
            state: Learner skill state
            asked: Ids asked this session; cleared in place when the pool is
                exhausted

        Returns:
            Selection with the chosen id and how it was chosen
        """
        epsilon = self.epsilon_for(state)
        explore = self.rng.random() < epsilon

        candidates = self.valid_actions(state, allow_stretch=explore)
        pool = [qid for qid in candidates if qid not in asked]
        pool_reset = False
        if not pool:
            # Everything suitable has been asked: allow repeats again
            asked.clear()
            pool = candidates
            pool_reset = True

        if not pool:
            fallback = next(iter(self.catalogue))
            logger.debug(f"No suitable questions for {state.as_tuple()}; falling back to {fallback}")
            return Selection(fallback, explored=explore, epsilon=epsilon, pool_reset=pool_reset)

        if explore:
            question_id = self._explore(pool)
        else:
            question_id = self._exploit(state, pool)

        logger.debug(
            f"mode={'explore' if explore else 'exploit'} eps={epsilon:.2f} "
            f"state={state.as_tuple()} pool={len(pool)} -> {question_id}"
        )
        return Selection(question_id, explored=explore, epsilon=epsilon, pool_reset=pool_reset)

    def _explore(self, pool: list[int]) -> int:
        """Uniform pick inside a uniformly chosen non-empty topic family."""
        groups: dict[SkillDimension, list[int]] = {dimension: [] for dimension in SkillDimension}
        for qid in pool:
            topic_id = self.catalogue[qid].topic_id
            groups[self.topic_mapping.dimension_of(topic_id)].append(qid)

        non_empty = [group for group in groups.values() if group]
        if non_empty:
            group = self.rng.choice(non_empty)
            return self.rng.choice(group)
        return self.rng.choice(pool)

    def _exploit(self, state: SkillState, pool: list[int]) -> int:
        """Highest value in the pool; ties go to the first id scanned."""
        best_id = pool[0]
        best_value = float("-inf")
        for qid in pool:
            value = self.value_table.get(state, qid)
            if value > best_value:
                best_value = value
                best_id = qid
        return best_id
