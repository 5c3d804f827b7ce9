"""
Session tracking for quiz runs.

Accumulates the running score, accuracy counters and the full interaction
history of one quiz session, and produces the end-of-session QuizReport.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.adaptive.skill_state import SkillState

MAX_STARS = 5


@dataclass(frozen=True)
class HistoryEntry:
    """One answered question."""

    state: SkillState  # Skill state when the question was asked
    question_id: int
    description: str
    correct: bool

    def to_dict(self) -> dict:
        return {
            "state": self.state.to_dict(),
            "questionID": self.question_id,
            "description": self.description,
            "correct": self.correct,
        }

    @classmethod
    def from_dict(cls, data: dict) -> HistoryEntry:
        from src.adaptive.skill_state import SkillState

        return cls(
            state=SkillState.from_dict(data.get("state") or {}),
            question_id=int(data.get("questionID", -1)),
            description=str(data.get("description", "")),
            correct=bool(data.get("correct", False)),
        )


def compute_accuracy(correct_answers: int, total_questions: int) -> float:
    """Percentage of correct answers; 0.0 when nothing was answered."""
    if total_questions == 0:
        return 0.0
    return correct_answers / total_questions * 100.0


@dataclass
class QuizReport:
    """End-of-session summary handed to reporting."""

    score: float = 0.0
    accuracy: float = 0.0
    total_questions: int = 0
    correct_answers: int = 0
    history: list[HistoryEntry] = field(default_factory=list)

    @property
    def stars(self) -> int:
        """One star per full 20% of accuracy, up to five."""
        return min(MAX_STARS, int(self.accuracy // 20))

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "accuracy": self.accuracy,
            "totalQuestions": self.total_questions,
            "correctAnswers": self.correct_answers,
            "history": [entry.to_dict() for entry in self.history],
        }

    @classmethod
    def from_dict(cls, data: dict) -> QuizReport:
        history = [
            HistoryEntry.from_dict(entry)
            for entry in data.get("history", [])
            if isinstance(entry, dict)
        ]
        return cls(
            score=float(data.get("score", 0.0)),
            accuracy=float(data.get("accuracy", 0.0)),
            total_questions=int(data.get("totalQuestions", 0)),
            correct_answers=int(data.get("correctAnswers", 0)),
            history=history,
        )


class SessionTracker:
    """Running score and history for one session."""

    def __init__(
        self,
        correct_delta: float = 10.0,
        incorrect_delta: float = 5.0,
        clamp_score: bool = True,
    ):
        """
        Args:
            correct_delta: Points added for a correct answer
            incorrect_delta: Points removed for a wrong answer
            clamp_score: Keep the score from going below zero
        """
        self.correct_delta = correct_delta
        self.incorrect_delta = incorrect_delta
        self.clamp_score = clamp_score

        self.score = 0.0
        self.total_questions = 0
        self.correct_answers = 0
        self._history: list[HistoryEntry] = []

    def record(self, state: SkillState, question_id: int, description: str, correct: bool) -> None:
        """Append one interaction and update the counters."""
        self._history.append(HistoryEntry(state, question_id, description, correct))

        self.total_questions += 1
        if correct:
            self.correct_answers += 1
            self.score += self.correct_delta
        else:
            self.score -= self.incorrect_delta
            if self.clamp_score and self.score < 0.0:
                self.score = 0.0

    @property
    def accuracy(self) -> float:
        return compute_accuracy(self.correct_answers, self.total_questions)

    @property
    def history(self) -> tuple[HistoryEntry, ...]:
        """Read-only view; history only grows through record()."""
        return tuple(self._history)

    def report(self) -> QuizReport:
        return QuizReport(
            score=self.score,
            accuracy=self.accuracy,
            total_questions=self.total_questions,
            correct_answers=self.correct_answers,
            history=list(self._history),
        )
