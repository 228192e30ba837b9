"""
Command-Line Interface for the CV coach.

This module provides the CLI commands using Click:
- login / logout / whoami: manage the local sign-in
- extract: show the text that would be sent for a résumé file
- run: score, optimize and prepare interview questions in one go

Usage:
    python run.py <command> [options]
"""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import MEDIA_TEXT, Config, load_config_yaml
from .errors import CVCoachError
from .extraction import extract_document, extract_file, media_kind_for_path
from .models import InterviewQuestionSet, MatchReport, Stage
from .session import SessionContext
from .workflow import WorkflowOrchestrator

# Rich console for pretty output
console = Console()

DEFAULT_SESSION_FILE = Path.home() / ".cvcoach" / "session.json"

THROUGH_STAGES = {
    "scored": Stage.SCORED,
    "optimized": Stage.OPTIMIZED,
    "interview": Stage.INTERVIEW_READY,
}


# ── Logging Setup ──
def setup_logging(verbose: bool = False):
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _session(config: Config) -> SessionContext:
    return SessionContext(config.session.session_file or DEFAULT_SESSION_FILE)


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              default=None, help="YAML profile overriding the default settings")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def main(ctx: click.Context, config_path: Path | None, verbose: bool):
    """
    CV coach - score your résumé against a job, optimize it, and prepare for the interview.
    """
    setup_logging(verbose)
    config = load_config_yaml(config_path) if config_path else Config()
    ctx.obj = Config.from_env(config)


# ════════════════════════════════════════════════════════════════════════════
# SESSION COMMANDS
# ════════════════════════════════════════════════════════════════════════════


@main.command()
@click.argument("email")
@click.pass_obj
def login(config: Config, email: str):
    """Sign in with EMAIL; requests are tagged with your user id."""
    session = _session(config)
    try:
        user = session.login(email)
    except CVCoachError as e:
        console.print(f"[red]{escape(str(e))}[/]")
        sys.exit(1)
    console.print(f"[green]Signed in as[/] {escape(user.email)} [dim](user id {user.id})[/]")


@main.command()
@click.pass_obj
def logout(config: Config):
    """Sign out."""
    _session(config).logout()
    console.print("Signed out.")


@main.command()
@click.pass_obj
def whoami(config: Config):
    """Show the signed-in user."""
    session = _session(config)
    if session.user:
        console.print(f"{escape(session.user.email)} [dim](user id {session.user.id})[/]")
    else:
        console.print(f"[yellow]Not signed in[/] - requests are sent as '{config.service.anonymous_user_id}'")


# ════════════════════════════════════════════════════════════════════════════
# EXTRACTION
# ════════════════════════════════════════════════════════════════════════════


@main.command()
@click.argument("document", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--quiet", "-q", is_flag=True, help="Only print the extracted text")
@click.pass_obj
def extract(config: Config, document: Path, quiet: bool):
    """
    Extract the text of a .txt or .pdf résumé.

    Example:
        python run.py extract my_cv.pdf
    """
    try:
        doc = extract_file(document, config.extraction)
    except CVCoachError as e:
        console.print(f"[red]{escape(str(e))}[/]")
        sys.exit(1)

    if quiet:
        click.echo(doc.text)
        return

    table = Table(title=f"Extracted: {escape(doc.filename or '')}")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Type", doc.media_kind)
    table.add_row("Method", doc.extraction_method)
    table.add_row("Pages", str(doc.page_count or "-"))
    table.add_row("Characters", f"{doc.char_count:,}")
    table.add_row("Words", f"{doc.word_count:,}")
    console.print(table)
    console.print(escape(doc.text_preview))


# ════════════════════════════════════════════════════════════════════════════
# FULL PIPELINE
# ════════════════════════════════════════════════════════════════════════════


@main.command()
@click.option("--resume", "resume_path", default=None,
              type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Résumé as .txt or .pdf")
@click.option("--resume-text", default=None, metavar="TEXT",
              help="Résumé pasted as text ('-' reads it from stdin)")
@click.option("--jd", "jd_path", required=True,
              type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Job description as a UTF-8 text file")
@click.option("--through", type=click.Choice(list(THROUGH_STAGES)), default="interview",
              show_default=True, help="Last stage to run")
@click.option("--export-dir", type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Directory for the optimized CV (default: current directory)")
@click.pass_obj
def run(
    config: Config,
    resume_path: Path | None,
    resume_text: str | None,
    jd_path: Path,
    through: str,
    export_dir: Path | None,
):
    """
    Run the pipeline: ATS analysis, CV optimization, interview questions.

    Example:
        python run.py run --resume my_cv.pdf --jd job.txt
        python run.py run --resume my_cv.txt --jd job.txt --through scored
        pbpaste | python run.py run --resume-text - --jd job.txt
    """
    if (resume_path is None) == (resume_text is None):
        raise click.UsageError("Give exactly one of --resume or --resume-text.")

    try:
        jd = extract_document(jd_path.read_bytes(), MEDIA_TEXT, filename=jd_path.name,
                              config=config.extraction)
        media_kind = media_kind_for_path(resume_path) if resume_path else None
    except CVCoachError as e:
        console.print(f"[red]{escape(str(e))}[/]")
        sys.exit(1)

    session = _session(config)
    orchestrator = WorkflowOrchestrator.from_config(config, session)
    target = THROUGH_STAGES[through]

    if resume_path is not None:
        with console.status("Reading résumé..."):
            ok = orchestrator.load_resume_document(resume_path.read_bytes(), media_kind, resume_path.name)
    else:
        if resume_text == "-":
            resume_text = click.get_text_stream("stdin").read()
        ok = orchestrator.set_resume_text(resume_text)
    ok = ok and orchestrator.set_job_description(jd.text)
    _exit_on_failure(orchestrator, ok)

    steps = [
        (Stage.SCORED, "Analyzing ATS match...", orchestrator.run_scoring),
        (Stage.OPTIMIZED, "Optimizing CV...", orchestrator.run_optimization),
        (Stage.INTERVIEW_READY, "Generating interview questions...", orchestrator.run_interview_prep),
    ]
    for stage, message, transition in steps:
        if not target.at_least(stage):
            break
        with console.status(message):
            ok = transition()
        _exit_on_failure(orchestrator, ok)

        state = orchestrator.state
        if stage == Stage.SCORED:
            _print_match_report(state.match_report)
        elif stage == Stage.OPTIMIZED:
            path = orchestrator.export_optimized_resume(export_dir)
            _exit_on_failure(orchestrator, path is not None)
            console.print(f"[green]✓ Optimized CV saved to[/] {escape(str(path))}")
        else:
            _print_question_set(state.interview_question_set)


def _exit_on_failure(orchestrator: WorkflowOrchestrator, ok: bool):
    if ok:
        return
    message = orchestrator.state.last_error or "Another operation is already running"
    console.print(f"[bold red]Error:[/] {escape(message)}")
    sys.exit(1)


def _print_match_report(report: MatchReport):
    console.print(f"\n[bold]ATS match score:[/] [bold blue]{report.ats_score}/100[/]")

    table = Table(show_header=True)
    table.add_column("✓ Matched keywords", style="green")
    table.add_column("✗ Missing keywords", style="red")
    rows = max(len(report.matched_keywords), len(report.missing_keywords))
    for i in range(rows):
        table.add_row(
            escape(report.matched_keywords[i]) if i < len(report.matched_keywords) else "",
            escape(report.missing_keywords[i]) if i < len(report.missing_keywords) else "",
        )
    console.print(table)

    if report.has_analysis:
        for title, items, style in (
            ("Strengths", report.strengths, "green"),
            ("Needs work", report.weaknesses, "yellow"),
        ):
            console.print(f"[bold {style}]{title}[/]")
            for item in items:
                console.print(f"  • {escape(item)}")

    if report.suggestions:
        console.print("[bold]Suggestions[/]")
        for i, suggestion in enumerate(report.suggestions, 1):
            console.print(f"  {i}. {escape(suggestion)}")


def _print_question_set(question_set: InterviewQuestionSet):
    if question_set.summary:
        s = question_set.summary
        console.print(
            f"\n[bold]{s.total_questions} questions:[/] "
            f"technical {s.technical_count} • behavioral {s.behavioral_count} • "
            f"situational {s.situational_count}"
        )

    for i, q in enumerate(question_set.technical_questions, 1):
        tags = " / ".join(t for t in (q.difficulty, q.category) if t)
        console.print(f"\n[blue]T{i}.[/] {escape(q.question)}" + (f" [dim]({escape(tags)})[/]" if tags else ""))
        for point in q.answer_points:
            console.print(f"    - {escape(point)}")

    for i, q in enumerate(question_set.behavioral_questions, 1):
        console.print(f"\n[green]B{i}.[/] {escape(q.question)}")
        for point in q.answer_points:
            console.print(f"    - {escape(point)}")

    for i, q in enumerate(question_set.situational_questions, 1):
        console.print(f"\n[magenta]S{i}.[/] {escape(q.question)}")
        if q.expected_approach:
            console.print(f"    [dim]Approach:[/] {escape(q.approach_text)}")
        for point in q.answer_points:
            console.print(f"    - {escape(point)}")

    if question_set.preparation_tips:
        console.print("\n[bold yellow]Preparation tips[/]")
        for tip in question_set.preparation_tips:
            console.print(f"  • {escape(tip)}")


if __name__ == "__main__":
    main()
