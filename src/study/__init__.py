"""
Study session tracking.

Provides:
- SessionTracker: Running score, accuracy and answer history
- QuizReport: End-of-session summary
- QuizSession: Fixed-length quiz run (import from src.study.quiz_session)
"""

from src.study.session_tracker import HistoryEntry, QuizReport, SessionTracker, compute_accuracy

__all__ = [
    "HistoryEntry",
    "QuizReport",
    "SessionTracker",
    "compute_accuracy",
]
