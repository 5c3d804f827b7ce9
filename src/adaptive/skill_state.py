"""
Skill State for the Adaptive Piano Quiz.

A learner's proficiency is tracked over three independent skill dimensions:
- notes: single-note recognition
- chords: triad construction
- scales: scale fingering

Each dimension holds a tier from 0 (beginner) to MAX_LEVEL (advanced).
SkillState is frozen and ordered so it can be used directly as a key of the
value table.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

MAX_LEVEL = 2


class SkillDimension(str, Enum):
    """Topic families a question can exercise."""

    NOTES = "notes"
    CHORDS = "chords"
    SCALES = "scales"


@dataclass(frozen=True, order=True)
class SkillState:
    """Current tier per skill dimension (ordered notes, chords, scales)."""

    notes: int = 0
    chords: int = 0
    scales: int = 0

    def level(self, dimension: SkillDimension) -> int:
        """Tier of a single dimension."""
        return getattr(self, dimension.value)

    def with_level(self, dimension: SkillDimension, level: int, max_level: int = MAX_LEVEL) -> SkillState:
        """
        Derive a new state with one dimension changed.

        The level is clamped to [0, max_level]; the original instance is
        never modified.
        """
        clamped = max(0, min(max_level, level))
        return replace(self, **{dimension.value: clamped})

    @property
    def average_level(self) -> int:
        """Integer (floor) average of the three tiers."""
        return (self.notes + self.chords + self.scales) // 3

    def is_valid(self, max_level: int = MAX_LEVEL) -> bool:
        return all(0 <= level <= max_level for level in self.as_tuple())

    def clamped(self, max_level: int = MAX_LEVEL) -> SkillState:
        """Copy with every tier forced into [0, max_level]."""
        return SkillState(*(max(0, min(max_level, level)) for level in self.as_tuple()))

    def improved_over(self, other: SkillState) -> bool:
        """True if any dimension is strictly higher than in ``other``."""
        return (
            self.notes > other.notes
            or self.chords > other.chords
            or self.scales > other.scales
        )

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.notes, self.chords, self.scales)

    def to_dict(self) -> dict[str, int]:
        return {"notes": self.notes, "chords": self.chords, "scales": self.scales}

    @classmethod
    def from_dict(cls, data: dict) -> SkillState:
        """Build a state from a mapping; missing dimensions default to 0."""
        return cls(
            notes=int(data.get("notes", 0)),
            chords=int(data.get("chords", 0)),
            scales=int(data.get("scales", 0)),
        )


@dataclass(frozen=True)
class TopicMapping:
    """
    Maps question topic identifiers onto skill dimensions.

    One identifier maps to notes, a contiguous range maps to chords and all
    higher identifiers map to scales. Identifiers below the notes id are
    treated as notes.
    """

    notes_topic: int = 101
    chords_first: int = 102
    chords_last: int = 103

    def __post_init__(self) -> None:
        if not self.notes_topic < self.chords_first <= self.chords_last:
            raise ValueError(
                f"Invalid topic mapping: notes={self.notes_topic}, "
                f"chords={self.chords_first}..{self.chords_last}"
            )

    def dimension_of(self, topic_id: int) -> SkillDimension:
        if topic_id <= self.notes_topic:
            return SkillDimension.NOTES
        if self.chords_first <= topic_id <= self.chords_last:
            return SkillDimension.CHORDS
        if topic_id > self.chords_last:
            return SkillDimension.SCALES
        # Gap between the notes id and the chord range
        return SkillDimension.CHORDS
