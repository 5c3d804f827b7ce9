"""
Quiz module for the question bank and answer checking.

This module provides:
- QuestionCatalogue: Read-only question lookup loaded from the bank file
- answer checking: octave- and order-insensitive note comparison

Topic ids:
- 101: notes
- 102-103: chords
- 104+: scales
"""

from src.quiz.answer_check import is_correct_answer, normalize_notes, parse_note_input
from src.quiz.catalogue import (
    EMPTY_QUESTION,
    QuestionCatalogue,
    QuestionRecord,
    load_question_bank,
)

__all__ = [
    "EMPTY_QUESTION",
    "QuestionCatalogue",
    "QuestionRecord",
    "load_question_bank",
    "is_correct_answer",
    "normalize_notes",
    "parse_note_input",
]
