"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import random
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.adaptive.skill_state import SkillState  # noqa: E402
from src.quiz.catalogue import QuestionCatalogue, QuestionRecord  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture
def rng():
    """Seeded random source for reproducible selection."""
    return random.Random(1234)


@pytest.fixture
def beginner_state():
    return SkillState(notes=0, chords=0, scales=0)


@pytest.fixture
def notes_catalogue():
    """Catalogue containing only tier-0 note questions."""
    return QuestionCatalogue(
        [
            QuestionRecord(1, 101, 0, "Play C", "Find and play the note C.", "C", "Notes"),
            QuestionRecord(2, 101, 0, "Play D", "Find and play the note D.", "D", "Notes"),
            QuestionRecord(3, 101, 0, "Play E", "Find and play the note E.", "E", "Notes"),
        ]
    )


@pytest.fixture
def mixed_catalogue():
    """Questions across all three families and all three tiers."""
    return QuestionCatalogue(
        [
            # Notes
            QuestionRecord(1, 101, 0, "Play C", "Play C.", "C", "Notes"),
            QuestionRecord(2, 101, 1, "Play C#", "Play C sharp.", "C#", "Notes"),
            QuestionRecord(3, 101, 2, "Third above C", "Major third above C.", "E", "Notes"),
            # Chords
            QuestionRecord(21, 102, 0, "C Major", "Play a C major triad.", "C-E-G", "Major Chords"),
            QuestionRecord(24, 102, 1, "D Major", "Play a D major triad.", "D-F#-A", "Major Chords"),
            QuestionRecord(31, 103, 0, "A Minor", "Play an A minor triad.", "A-C-E", "Minor Chords"),
            QuestionRecord(37, 103, 2, "F# Minor", "Play an F sharp minor triad.", "F#-A-C#", "Minor Chords"),
            # Scales
            QuestionRecord(41, 104, 0, "C Major Scale", "C major scale.", "C-D-E-F-G-A-B", "Major Scales"),
            QuestionRecord(42, 104, 1, "G Major Scale", "G major scale.", "G-A-B-C-D-E-F#", "Major Scales"),
            QuestionRecord(53, 105, 2, "D Minor Scale", "D minor scale.", "D-E-F-G-A-A#-C", "Minor Scales"),
        ]
    )
