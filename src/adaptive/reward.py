"""
Reward shaping for the quiz value table.

A correct answer that raised any skill tier earns the big reward, a correct
answer without a tier change earns the small reward and a wrong answer is
penalised.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.adaptive.skill_state import SkillState


@dataclass(frozen=True)
class RewardPolicy:
    """Reward constants; must satisfy big > small > 0 > incorrect."""

    big_correct: float = 5.0
    small_correct: float = 2.5
    incorrect: float = -2.5

    def __post_init__(self) -> None:
        if not self.big_correct > self.small_correct > 0 > self.incorrect:
            raise ValueError(
                "Rewards must satisfy big_correct > small_correct > 0 > incorrect "
                f"(got {self.big_correct}, {self.small_correct}, {self.incorrect})"
            )

    def reward(self, before: SkillState, after: SkillState, correct: bool) -> float:
        if not correct:
            return self.incorrect
        if after.improved_over(before):
            return self.big_correct
        return self.small_correct
