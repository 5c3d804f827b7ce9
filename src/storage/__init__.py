"""Learner data persistence (value table, skill state, quiz reports)."""

from src.storage.learner_store import LearnerStore, state_from_key, state_to_key

__all__ = ["LearnerStore", "state_from_key", "state_to_key"]
