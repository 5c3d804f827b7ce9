"""
Quiz Visual Components.

Rich panels and tables for the terminal quiz: question cards, answer
feedback, skill tiers and the end-of-quiz summary.
"""

from __future__ import annotations

from rich import box
from rich.panel import Panel
from rich.style import Style
from rich.table import Table
from rich.text import Text

from src.adaptive.engine import AnswerOutcome
from src.adaptive.skill_state import MAX_LEVEL, SkillDimension, SkillState
from src.quiz.catalogue import QuestionCatalogue, QuestionRecord
from src.study.session_tracker import QuizReport

# =============================================================================
# THEME
# =============================================================================

QUIZ_THEME = {
    "primary": "#C8A165",  # Warm brass - main accent
    "secondary": "#8B5A2B",  # Walnut - secondary accent
    "success": "#00FF88",  # Neon Green - correct answers
    "warning": "#FFD700",  # Gold - warnings
    "error": "#FF3366",  # Red - incorrect
    "dim": "#7a6a58",  # Muted brown-gray - secondary text
}

STYLES = {
    "quiz_primary": Style(color=QUIZ_THEME["primary"], bold=True),
    "quiz_success": Style(color=QUIZ_THEME["success"], bold=True),
    "quiz_error": Style(color=QUIZ_THEME["error"], bold=True),
    "quiz_dim": Style(color=QUIZ_THEME["dim"]),
}

TIER_NAMES = ("Beginner", "Intermediate", "Advanced")


def tier_name(level: int) -> str:
    if 0 <= level < len(TIER_NAMES):
        return TIER_NAMES[level]
    return f"Tier {level}"


def render_tier_bar(level: int, max_level: int = MAX_LEVEL) -> Text:
    """Filled/empty pips for a tier, e.g. ●●○."""
    bar = Text()
    bar.append("●" * (level + 1), style=STYLES["quiz_primary"])
    bar.append("○" * max(0, max_level - level), style=STYLES["quiz_dim"])
    return bar


def render_skill_table(state: SkillState, max_level: int = MAX_LEVEL) -> Table:
    table = Table(title="Skill Levels", box=box.ROUNDED, border_style=QUIZ_THEME["secondary"])
    table.add_column("Skill", style="bold")
    table.add_column("Tier", justify="center")
    table.add_column("Level")
    for dimension in SkillDimension:
        level = state.level(dimension)
        table.add_row(dimension.value.title(), render_tier_bar(level, max_level), tier_name(level))
    return table


def render_question_panel(
    question: QuestionRecord,
    number: int,
    total: int,
    score: float,
    accuracy: float,
) -> Panel:
    body = Text()
    body.append(f"{question.title}\n", style=STYLES["quiz_primary"])
    body.append(question.description)
    body.append(f"\n\nScore {score:.0f}  ·  Accuracy {accuracy:.0f}%", style=STYLES["quiz_dim"])
    subtitle = question.topic_name or f"Topic {question.topic_id}"
    return Panel(
        body,
        title=f"Question {number}/{total}",
        subtitle=f"{subtitle} · {tier_name(question.difficulty)}",
        border_style=QUIZ_THEME["primary"],
        box=box.ROUNDED,
    )


def render_feedback(outcome: AnswerOutcome, expected_input: str) -> Text:
    """One-line correctness feedback, plus any tier change."""
    text = Text()
    if outcome.correct:
        text.append("✓ Correct!", style=STYLES["quiz_success"])
    else:
        text.append("✗ Not quite. ", style=STYLES["quiz_error"])
        text.append(f"Expected {expected_input}", style=STYLES["quiz_dim"])

    if outcome.promoted or outcome.demoted:
        for dimension in SkillDimension:
            old, new = outcome.state_before.level(dimension), outcome.state_after.level(dimension)
            if old != new:
                arrow = "▲" if new > old else "▼"
                text.append(f"\n{arrow} {dimension.value.title()}: {tier_name(old)} → {tier_name(new)}")
    return text


def render_report_panel(report: QuizReport, title: str = "Quiz Complete") -> Panel:
    stars = "★" * report.stars + "☆" * (5 - report.stars)
    body = Text()
    body.append(f"{stars}\n\n", style=STYLES["quiz_primary"])
    body.append(f"Score: {report.score:.0f}\n")
    body.append(f"Accuracy: {report.accuracy:.0f}%\n")
    body.append(f"Questions Answered: {report.total_questions}\n")
    body.append(f"Correct Answers: {report.correct_answers}")
    return Panel(body, title=title, border_style=QUIZ_THEME["success"], box=box.DOUBLE)


def render_history_table(report: QuizReport) -> Table:
    table = Table(title="History", box=box.SIMPLE)
    table.add_column("#", justify="right", style="dim")
    table.add_column("State", justify="center")
    table.add_column("Question")
    table.add_column("Result", justify="center")
    for index, entry in enumerate(report.history, start=1):
        result = Text("✓", style=STYLES["quiz_success"]) if entry.correct else Text("✗", style=STYLES["quiz_error"])
        table.add_row(str(index), str(list(entry.state.as_tuple())), entry.description, result)
    return table


def render_catalogue_table(catalogue: QuestionCatalogue, topic_id: int | None = None) -> Table:
    table = Table(title="Question Bank", box=box.ROUNDED)
    table.add_column("ID", justify="right")
    table.add_column("Topic")
    table.add_column("Tier", justify="center")
    table.add_column("Title")
    table.add_column("Answer", style="dim")
    for question in catalogue.values():
        if topic_id is not None and question.topic_id != topic_id:
            continue
        table.add_row(
            str(question.question_id),
            question.topic_name or str(question.topic_id),
            str(question.difficulty),
            question.title,
            question.expected_input,
        )
    return table
