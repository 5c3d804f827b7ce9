"""
Adaptive Quiz Engine.

Q-learning question selection for the piano quiz.

Components:
- SkillState: Learner tiers for notes, chords and scales
- ValueTable: Tabular state/action values with the TD update
- SelectionPolicy: Epsilon-greedy choice with session no-repeat tracking
- ProgressionRule: Streak-based promotion and demotion
- RewardPolicy: Reward shaping from state transitions
- AdaptiveQuizEngine: Main orchestration layer
"""
from src.adaptive.skill_state import MAX_LEVEL, SkillDimension, SkillState, TopicMapping
from src.adaptive.value_table import QTable, ValueTable
from src.adaptive.reward import RewardPolicy
from src.adaptive.progression import ProgressionRule, StreakCounters
from src.adaptive.selection_policy import Selection, SelectionPolicy
from src.adaptive.engine import AdaptiveQuizEngine, AnswerOutcome, EngineConfig

__all__ = [
    # Main engine
    "AdaptiveQuizEngine",
    "AnswerOutcome",
    "EngineConfig",
    # Component classes
    "ProgressionRule",
    "RewardPolicy",
    "SelectionPolicy",
    "ValueTable",
    # Data models
    "MAX_LEVEL",
    "QTable",
    "Selection",
    "SkillDimension",
    "SkillState",
    "StreakCounters",
    "TopicMapping",
]
