"""
Q-learning value table.

Maps SkillState -> {question_id: value}. Rows and cells are created lazily on
first update; anything absent reads as 0.0. The temporal-difference update is
the only write path.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping

from loguru import logger

from src.adaptive.skill_state import SkillState

QTable = dict[SkillState, dict[int, float]]


class ValueTable:
    """Tabular state/action values for question selection."""

    def __init__(self, table: Mapping[SkillState, Mapping[int, float]] | None = None):
        """
        Initialize from a previously exported table.

        Args:
            table: Mapping of state -> {question_id: value}; copied, never aliased
        """
        self._table: QTable = {}
        for state, actions in (table or {}).items():
            self._table[state] = {int(qid): float(value) for qid, value in actions.items()}

    def get(self, state: SkillState, question_id: int) -> float:
        """Value of a state/action pair; 0.0 when unseen."""
        return self._table.get(state, {}).get(question_id, 0.0)

    def max_value(self, state: SkillState) -> float:
        """
        Highest value recorded for ``state``.

        The running maximum starts at 0.0, so an unseen state, or one whose
        values are all negative, reports 0.0.
        """
        best = 0.0
        for value in self._table.get(state, {}).values():
            if value > best:
                best = value
        return best

    def td_update(
        self,
        state: SkillState,
        question_id: int,
        reward: float,
        next_state: SkillState,
        learning_rate: float,
        discount_factor: float,
    ) -> float:
        """
        Apply Q(s,a) += lr * (reward + df * max Q(s', .) - Q(s,a)).

        Returns:
            The new value stored for (state, question_id)
        """
        old_value = self.get(state, question_id)
        target = reward + discount_factor * self.max_value(next_state)
        new_value = old_value + learning_rate * (target - old_value)
        self._table.setdefault(state, {})[question_id] = new_value

        logger.debug(
            f"Q{state.as_tuple()}[{question_id}]: {old_value:.4f} -> {new_value:.4f} "
            f"(reward={reward:+.2f}, next={next_state.as_tuple()})"
        )
        return new_value

    def export(self) -> QTable:
        """Deep copy of the table for persistence."""
        return {state: dict(actions) for state, actions in self._table.items()}

    def states(self) -> Iterator[SkillState]:
        return iter(sorted(self._table))

    def __len__(self) -> int:
        return sum(len(actions) for actions in self._table.values())

    def __contains__(self, state: object) -> bool:
        return state in self._table
