"""
Adaptive Gating CLI.

A Rich terminal front end for replaying diagnostic attempts against a course
definition and inspecting what the gating engine persisted.

Commands:
- adaptive-gating run      - Start a session and replay a diagnostic result
- adaptive-gating restore  - Start a session only (resume path)
- adaptive-gating status   - Show persisted learner state
- adaptive-gating choose   - Record the diagnostic opt-in / opt-out
- adaptive-gating reset    - Clear persisted learner state
"""
from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table

from config import Settings, get_settings
from src.adaptive import (
    DIAGNOSTIC_OPT_OUT_KEY,
    SCORE_KEY,
    AdaptiveContentEngine,
    PersistedGatingState,
)
from src.assessment.state import AssessmentState
from src.core.events import ASSESSMENT_COMPLETE, COURSE_START, DIAGNOSTIC_COMPLETE, EventBus
from src.course.loader import (
    CourseDefinitionError,
    LoadedCourse,
    load_course,
    load_diagnostic_result,
    record_attempt,
)
from src.course.models import ContentKind
from src.storage import BufferedStorage, StorageError, build_storage

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="adaptive-gating",
    help="Adaptive content gating: replay diagnostics and inspect learner state",
    no_args_is_help=True,
)
console = Console()


# =============================================================================
# Styling
# =============================================================================

STYLES = {
    "pass": "bold green",
    "fail": "bold red",
    "info": "bold cyan",
    "warning": "bold yellow",
    "dim": "dim",
}


def _flag(value: bool) -> str:
    return "[green]yes[/green]" if value else "[dim]no[/dim]"


# =============================================================================
# Helpers
# =============================================================================


@contextmanager
def _storage_errors() -> Iterator[None]:
    """Report an unreadable or unwritable store and exit with code 1."""
    try:
        yield
    except StorageError as e:
        logger.debug(f"Storage failure: {e!r}")
        console.print(f"[{STYLES['fail']}]{escape(str(e))}[/{STYLES['fail']}]")
        raise typer.Exit(code=1)


def _settings_for(learner: str | None) -> Settings:
    settings = get_settings()
    if learner:
        settings = settings.model_copy(update={"learner_id": learner})
    return settings


def _open_storage(learner: str | None) -> BufferedStorage:
    return build_storage(_settings_for(learner))


def _load_course(path: Path) -> LoadedCourse:
    try:
        return load_course(path)
    except (FileNotFoundError, CourseDefinitionError) as e:
        console.print(f"[{STYLES['fail']}]{escape(str(e))}[/{STYLES['fail']}]")
        raise typer.Exit(code=1)


def _start_session(course: LoadedCourse, storage: BufferedStorage) -> AdaptiveContentEngine:
    bus = EventBus()
    engine = AdaptiveContentEngine.for_course(course, storage, bus=bus)
    if not engine.is_enabled:
        console.print(f"[{STYLES['warning']}]Adaptive content is not enabled for this course[/{STYLES['warning']}]")

    bus.on(DIAGNOSTIC_COMPLETE, _show_diagnostic_result)
    engine.attach()
    bus.trigger(COURSE_START)
    return engine


def _show_diagnostic_result(state: AssessmentState) -> None:
    style = STYLES["pass"] if state.is_pass else STYLES["fail"]
    verdict = "PASSED" if state.is_pass else "NOT PASSED"
    if state.is_percentage_based:
        score = f"{state.score_as_percent:g}%"
    else:
        score = f"{state.score:g} / {state.max_score:g}"
    console.print(
        Panel(
            f"[{style}]{verdict}[/{style}]  score {score}  "
            f"({len(state.question_models)} questions)",
            title=f"Diagnostic {state.id}",
            border_style="cyan",
        )
    )


def _render_pages(engine: AdaptiveContentEngine) -> None:
    table = Table(title="Course pages", show_header=True, header_style="bold cyan")
    table.add_column("Page", style="white")
    table.add_column("Title")
    table.add_column("Available", justify="center")
    table.add_column("Optional", justify="center")
    table.add_column("Complete", justify="center")
    table.add_column("Classes", style="dim")

    for page in engine.tree.of_kind(ContentKind.PAGE):
        table.add_row(
            page.id,
            page.title,
            _flag(page.is_available),
            _flag(page.is_optional),
            _flag(page.is_complete),
            page.css_classes,
        )
    console.print(table)

    course = engine.tree.course
    if course is not None:
        console.print(
            f"Course complete: {_flag(course.is_complete)}   "
            f"assessment required: {_flag(engine.criteria.require_assessment_completed)}"
        )


# =============================================================================
# Commands
# =============================================================================


@app.command()
def run(
    course_file: Path = typer.Argument(..., help="Course definition JSON"),
    result_file: Path = typer.Argument(..., help="Recorded diagnostic attempt JSON"),
    learner: Optional[str] = typer.Option(None, "--learner", "-l", help="Learner id"),
    reset: bool = typer.Option(False, "--reset", help="Clear learner state first"),
):
    """Start a session and replay a diagnostic attempt."""
    with _storage_errors():
        storage = _open_storage(learner)
        if reset:
            storage.clear()

        course = _load_course(course_file)
        engine = _start_session(course, storage)

        try:
            result = load_diagnostic_result(result_file)
            state = record_attempt(course, result)
        except (FileNotFoundError, CourseDefinitionError) as e:
            console.print(f"[{STYLES['fail']}]{escape(str(e))}[/{STYLES['fail']}]")
            raise typer.Exit(code=1)

        notified = engine.bus.trigger(ASSESSMENT_COMPLETE, state)

    if not notified and engine.is_enabled:
        console.print(
            f"[{STYLES['warning']}]Earlier decisions were restored; "
            f"the diagnostic was not re-evaluated (use --reset)[/{STYLES['warning']}]"
        )
    elif engine.last_outcome is not None:
        topics = ", ".join(engine.last_outcome.masterable_topics) or "none"
        console.print(f"[{STYLES['info']}]Mastered topics:[/{STYLES['info']}] {topics}")

    _render_pages(engine)


@app.command()
def restore(
    course_file: Path = typer.Argument(..., help="Course definition JSON"),
    learner: Optional[str] = typer.Option(None, "--learner", "-l", help="Learner id"),
):
    """Start a session and show the restored course state."""
    with _storage_errors():
        storage = _open_storage(learner)
        course = _load_course(course_file)
        engine = _start_session(course, storage)
    _render_pages(engine)


@app.command()
def status(
    learner: Optional[str] = typer.Option(None, "--learner", "-l", help="Learner id"),
):
    """Show persisted learner state."""
    settings = _settings_for(learner)

    config_table = Table(title="Storage", show_header=False)
    config_table.add_column("Setting", style="cyan")
    config_table.add_column("Value")
    for name, value in settings.get_storage_config().items():
        config_table.add_row(name, value)
    console.print(config_table)

    with _storage_errors():
        storage = build_storage(settings)
        gated = PersistedGatingState(storage).load()
        score = storage.get_record(SCORE_KEY)
        opt_out = storage.get(DIAGNOSTIC_OPT_OUT_KEY)

    table = Table(title="Offline storage", show_header=True, header_style="bold cyan")
    table.add_column("Key")
    table.add_column("Value")

    table.add_row("gated content", ", ".join(gated) if gated else "[dim]none[/dim]")
    table.add_row(
        "score",
        f"{score.value:g} ({score.minimum:g}-{score.maximum:g}, {score.scaled:.0%})"
        if score
        else "[dim]none[/dim]",
    )
    choice = {True: "opted out", False: "opted in"}.get(opt_out, "[dim]not chosen[/dim]")
    table.add_row("diagnostic", choice)

    console.print(table)


@app.command()
def choose(
    course_file: Path = typer.Argument(..., help="Course definition JSON"),
    decision: str = typer.Argument(..., help="'in' to take the diagnostic, 'out' to skip it"),
    learner: Optional[str] = typer.Option(None, "--learner", "-l", help="Learner id"),
):
    """Record the learner's diagnostic opt-in / opt-out."""
    if decision not in ("in", "out"):
        console.print(f"[{STYLES['fail']}]Decision must be 'in' or 'out'[/{STYLES['fail']}]")
        raise typer.Exit(code=1)

    with _storage_errors():
        storage = _open_storage(learner)
        course = _load_course(course_file)
        engine = AdaptiveContentEngine.for_course(course, storage)
        if engine.choice is None:
            console.print(f"[{STYLES['warning']}]Course has no adaptive content settings[/{STYLES['warning']}]")
            raise typer.Exit(code=1)

        recorded = engine.choice.opt_out() if decision == "out" else engine.choice.opt_in()
        target = engine.choice.navigation_target()

    if not recorded:
        console.print(f"[{STYLES['warning']}]A choice was already recorded[/{STYLES['warning']}]")
    console.print(f"Next page: {target or '[dim]not configured[/dim]'}")


@app.command()
def reset(
    learner: Optional[str] = typer.Option(None, "--learner", "-l", help="Learner id"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Clear persisted learner state."""
    if not yes and not Confirm.ask("Clear all stored adaptive content state?"):
        raise typer.Exit()

    with _storage_errors():
        _open_storage(learner).clear()
    console.print(f"[{STYLES['pass']}]Learner state cleared[/{STYLES['pass']}]")


# =============================================================================
# Entry Point
# =============================================================================


def configure_logging() -> None:
    settings = get_settings()
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        logger.add(settings.log_file, level=settings.log_level, rotation="10 MB", retention=5)


def main() -> None:
    """CLI entry point."""
    configure_logging()
    app()


if __name__ == "__main__":
    main()
