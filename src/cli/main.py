"""
Typer CLI for the adaptive piano quiz.

Commands:
    pianoquiz start              - Play an adaptive quiz session
    pianoquiz start -n 5 --seed 7 - Five questions, reproducible selection
    pianoquiz status             - Show skill tiers and learned values
    pianoquiz report             - Show the last quiz report
    pianoquiz questions          - List the question bank
    pianoquiz reset              - Forget all learner progress

Answers are typed as note names or MIDI numbers, e.g. "C E G", "C4-E4-G4"
or "60 64 67". Octaves and note order are ignored.
"""

from __future__ import annotations

import os
import random
import sys

# Fix Windows encoding issues for Unicode characters (box drawing, stars)
if sys.platform == "win32":
    os.environ.setdefault("PYTHONIOENCODING", "utf-8")
    if hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")

from pathlib import Path
from typing import Annotated, Optional

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt

from config import Settings, get_settings
from src.adaptive.skill_state import SkillDimension, SkillState
from src.delivery import quiz_visuals as ui
from src.quiz.answer_check import parse_note_input
from src.quiz.catalogue import QuestionCatalogue, load_question_bank
from src.storage.learner_store import LearnerStore
from src.study.quiz_session import QuizSession

app = typer.Typer(
    name="pianoquiz",
    help="🎹 Adaptive piano quiz: notes, chords and scales that keep pace with you",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

QUIT_WORDS = {"q", "quit", "exit"}


# ========================================
# Context
# ========================================


class CLIContext:
    """Lazily built collaborators shared by the commands."""

    def __init__(self, settings: Settings, data_dir: Path | None = None):
        self.settings = settings
        self.data_dir = data_dir or settings.data_dir
        self._store: LearnerStore | None = None
        self._catalogue: QuestionCatalogue | None = None

    @property
    def store(self) -> LearnerStore:
        if self._store is None:
            self._store = LearnerStore(self.data_dir, self.settings.data_file)
        return self._store

    @property
    def catalogue(self) -> QuestionCatalogue:
        if self._catalogue is None:
            self._catalogue = load_question_bank(self.settings.question_bank_path)
        return self._catalogue


def configure_logging(settings: Settings, verbose: bool = False) -> None:
    """Route loguru output to stderr (and the optional log file)."""
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        logger.add(settings.log_file, level="DEBUG", rotation="1 MB", retention=3)


@app.callback()
def main_callback(
    ctx: typer.Context,
    data_dir: Annotated[
        Optional[Path], typer.Option("--data-dir", help="Learner data directory")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
) -> None:
    """Adaptive piano quiz driven by Q-learning."""
    settings = get_settings()
    configure_logging(settings, verbose)
    ctx.obj = CLIContext(settings, data_dir)


# ========================================
# Quiz
# ========================================


def prompt_initial_state(max_level: int) -> SkillState:
    """First-run dialog: ask the learner for a starting tier per skill."""
    tiers = [str(level) for level in range(max_level + 1)]
    legend = ", ".join(f"{level} = {ui.tier_name(level)}" for level in range(max_level + 1))
    console.print(
        Panel(
            f"Welcome! Rate yourself for each skill:\n{legend}",
            title="Your Skill Level",
            border_style=ui.QUIZ_THEME["primary"],
        )
    )
    levels = {
        dimension.value: IntPrompt.ask(
            f"{dimension.value.title()} skill level (0-{max_level})",
            choices=tiers,
            default=0,
        )
        for dimension in SkillDimension
    }
    return SkillState.from_dict(levels)


def _ask_for_notes() -> list[str] | None:
    """Prompt until the input parses; None means the learner wants to quit."""
    while True:
        raw = Prompt.ask("[bold]Your notes[/] [dim](q to quit)[/]").strip()
        if raw.lower() in QUIT_WORDS:
            return None
        try:
            notes = parse_note_input(raw)
        except ValueError as e:
            console.print(f"[yellow]{e}[/]")
            continue
        if notes:
            return notes


@app.command()
def start(
    ctx: typer.Context,
    questions: Annotated[
        Optional[int], typer.Option("--questions", "-n", min=1, help="Questions in this quiz")
    ] = None,
    seed: Annotated[
        Optional[int], typer.Option("--seed", help="Random seed for question selection")
    ] = None,
) -> None:
    """
    Start an adaptive quiz session.

    Examples:
        pianoquiz start             # Standard 10-question quiz
        pianoquiz start -n 5        # Short quiz
        pianoquiz start --seed 42   # Reproducible selection
    """
    cli: CLIContext = ctx.obj
    settings = cli.settings

    catalogue = cli.catalogue
    if not catalogue:
        console.print("[red]✗ No questions could be loaded from the question bank.[/]")
        raise typer.Exit(code=1)

    store = cli.store
    initial_state = None
    if store.is_new_user():
        initial_state = prompt_initial_state(settings.max_level)
        store.save_user_state(initial_state)
        store.set_new_user(False)

    seed = seed if seed is not None else settings.seed
    session = QuizSession.from_store(
        catalogue,
        store,
        config=settings.get_engine_config(),
        questions_per_quiz=questions or settings.questions_per_quiz,
        rng=random.Random(seed),
        initial_state=initial_state,
        report_filename=settings.report_file,
    )

    console.print(ui.render_skill_table(session.engine.current_state, settings.max_level))

    while not session.finished:
        question = session.current_question
        console.print(
            ui.render_question_panel(
                question,
                number=session.questions_answered + 1,
                total=session.questions_per_quiz,
                score=session.engine.score,
                accuracy=session.engine.accuracy,
            )
        )

        notes = _ask_for_notes()
        if notes is None:
            if session.questions_answered and Confirm.ask("Save progress so far?", default=True):
                quiz_report = session.finish()
                console.print(ui.render_report_panel(quiz_report, title="Quiz Saved"))
            else:
                console.print("[yellow]Session abandoned; progress not saved.[/]")
            return

        outcome = session.submit(notes)
        console.print(ui.render_feedback(outcome, question.expected_input))

    quiz_report = session.finish()
    console.print(ui.render_report_panel(quiz_report))
    console.print(ui.render_skill_table(session.engine.current_state, settings.max_level))
    console.print("[dim]Your progress has been saved.[/]")


# ========================================
# Inspection
# ========================================


@app.command()
def status(ctx: typer.Context) -> None:
    """Show current skill tiers and the size of the learned value table."""
    cli: CLIContext = ctx.obj
    store = cli.store

    if store.is_new_user():
        console.print("[yellow]No quiz played yet. Run [bold]pianoquiz start[/] to begin.[/]")

    max_level = cli.settings.max_level
    console.print(ui.render_skill_table(store.load_user_state(max_level), max_level))

    table = store.load_value_table()
    entries = sum(len(actions) for actions in table.values())
    console.print(f"Learned values: [bold]{entries}[/] across [bold]{len(table)}[/] skill states")
    console.print(f"[dim]Data file: {store.data_path}[/]")


@app.command()
def report(
    ctx: typer.Context,
    history: Annotated[bool, typer.Option("--history", help="Show every answer")] = False,
) -> None:
    """Show the last saved quiz report."""
    cli: CLIContext = ctx.obj
    quiz_report = cli.store.load_quiz_report(cli.settings.report_file)
    if quiz_report is None:
        console.print("[yellow]No quiz report found.[/]")
        raise typer.Exit(code=1)

    console.print(ui.render_report_panel(quiz_report, title="Last Quiz"))
    if history:
        console.print(ui.render_history_table(quiz_report))


@app.command()
def questions(
    ctx: typer.Context,
    topic: Annotated[Optional[int], typer.Option("--topic", "-t", help="Only this topic id")] = None,
) -> None:
    """List the question bank."""
    cli: CLIContext = ctx.obj
    catalogue = cli.catalogue
    if not catalogue:
        console.print("[red]✗ No questions could be loaded from the question bank.[/]")
        raise typer.Exit(code=1)
    console.print(ui.render_catalogue_table(catalogue, topic))


@app.command()
def reset(
    ctx: typer.Context,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
) -> None:
    """Forget all learner progress (skill tiers and learned values)."""
    cli: CLIContext = ctx.obj
    if not yes and not Confirm.ask("Reset all quiz progress?", default=False):
        console.print("Cancelled.")
        raise typer.Exit()

    if cli.store.reset():
        console.print("[green]✓ Progress reset.[/]")
    else:
        console.print("[red]✗ Could not write learner data.[/]")
        raise typer.Exit(code=1)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
