"""
Configuration settings for the pianoquiz CLI.

Uses Pydantic Settings for environment variable management with .env file support.
All variables use the PIANOQUIZ_ prefix, e.g. PIANOQUIZ_LEARNING_RATE=0.2.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.adaptive.engine import EngineConfig
from src.adaptive.reward import RewardPolicy
from src.adaptive.skill_state import TopicMapping


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PIANOQUIZ_",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Paths
    # ========================================
    data_dir: Path = Field(
        default=Path.home() / ".pianoquiz",
        description="Directory holding learner data and quiz reports",
    )
    data_file: str = Field(
        default="data.json",
        description="Learner data file (value table, skill state) inside data_dir",
    )
    report_file: str = Field(
        default="quiz_report.json",
        description="Last quiz report file inside data_dir",
    )
    question_bank_path: Path | None = Field(
        default=None,
        description="Question bank JSON (None for the packaged bank)",
    )

    # ========================================
    # Q-Learning
    # ========================================
    learning_rate: float = Field(
        default=0.1,
        gt=0.0,
        lt=1.0,
        description="Temporal-difference learning rate",
    )
    discount_factor: float = Field(
        default=0.9,
        gt=0.0,
        lt=1.0,
        description="Weight of the best value reachable from the next state",
    )
    epsilon_schedule: str = Field(
        default="0.9,0.7,0.5",
        description="Exploration rate per average skill tier (comma-separated, non-increasing)",
    )

    # ========================================
    # Skill Progression
    # ========================================
    correct_threshold: int = Field(
        default=4,
        ge=1,
        description="Weighted correct-streak points needed to promote a skill",
    )
    incorrect_threshold: int = Field(
        default=4,
        ge=1,
        description="Consecutive wrong answers that demote a skill",
    )
    max_level: int = Field(
        default=2,
        ge=0,
        description="Highest skill tier",
    )
    notes_topic_id: int = Field(default=101, description="Topic id of note questions")
    chords_first_topic_id: int = Field(default=102, description="First chord topic id")
    chords_last_topic_id: int = Field(default=103, description="Last chord topic id")

    # ========================================
    # Rewards & Scoring
    # ========================================
    reward_big_correct: float = Field(
        default=5.0,
        description="Reward for a correct answer that raised a skill tier",
    )
    reward_small_correct: float = Field(
        default=2.5,
        description="Reward for a correct answer without a tier change",
    )
    reward_incorrect: float = Field(
        default=-2.5,
        description="Reward for a wrong answer",
    )
    score_correct_delta: float = Field(default=10.0, description="Score added per correct answer")
    score_incorrect_delta: float = Field(default=5.0, description="Score removed per wrong answer")
    clamp_score: bool = Field(default=True, description="Never let the score drop below zero")

    # ========================================
    # Session
    # ========================================
    questions_per_quiz: int = Field(
        default=10,
        ge=1,
        description="Questions in one quiz session",
    )
    seed: int | None = Field(
        default=None,
        description="Random seed for reproducible question selection",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    @field_validator("epsilon_schedule")
    @classmethod
    def _check_epsilon_schedule(cls, value: str) -> str:
        parse_epsilon_schedule(value)
        return value

    def get_epsilon_schedule(self) -> tuple[float, ...]:
        return parse_epsilon_schedule(self.epsilon_schedule)

    def get_engine_config(self) -> EngineConfig:
        """Build the engine configuration from the flat settings."""
        return EngineConfig(
            learning_rate=self.learning_rate,
            discount_factor=self.discount_factor,
            epsilon_schedule=self.get_epsilon_schedule(),
            correct_threshold=self.correct_threshold,
            incorrect_threshold=self.incorrect_threshold,
            max_level=self.max_level,
            rewards=RewardPolicy(
                big_correct=self.reward_big_correct,
                small_correct=self.reward_small_correct,
                incorrect=self.reward_incorrect,
            ),
            score_correct_delta=self.score_correct_delta,
            score_incorrect_delta=self.score_incorrect_delta,
            clamp_score=self.clamp_score,
            topic_mapping=TopicMapping(
                notes_topic=self.notes_topic_id,
                chords_first=self.chords_first_topic_id,
                chords_last=self.chords_last_topic_id,
            ),
        )


def parse_epsilon_schedule(value: str) -> tuple[float, ...]:
    """Parse "0.9,0.7,0.5" into a non-empty, non-increasing tuple in [0, 1]."""
    try:
        schedule = tuple(float(part) for part in value.split(",") if part.strip())
    except ValueError as e:
        raise ValueError(f"epsilon_schedule must be comma-separated numbers: {value!r}") from e
    if not schedule:
        raise ValueError("epsilon_schedule must not be empty")
    if any(not 0.0 <= eps <= 1.0 for eps in schedule):
        raise ValueError(f"epsilon values must lie in [0, 1]: {value!r}")
    if any(later > earlier for earlier, later in zip(schedule, schedule[1:])):
        raise ValueError(f"epsilon_schedule must be non-increasing: {value!r}")
    return schedule


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
