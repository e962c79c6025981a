"""
CLI Main - Typer command-line interface.
========================================

Commands:
- gems: Find and rank hidden-gem courses
- catalog: List courses offered in the AY catalog
- course: Show one catalog course
- info: Show configured sources and their status
"""

from typing import Optional

import typer
from rich.panel import Panel
from rich.table import Table

from gem_miner.shared.logging import get_console, get_logger
from gem_miner.shared.utils import truncate_text

logger = get_logger(__name__)

app = typer.Typer(
    name="gem-miner",
    help="""💎 Gem Miner - Find hidden-gem courses

Joins Q-Report evaluations with the academic-year course catalog and
ranks courses by GemScore (rating, workload and student comments).

━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

COMMANDS OVERVIEW:

  gems     Rank courses by GemScore
           -d, --department   Department name or code (cs, econ, gened)
           -w, --max-hours    Maximum weekly workload hours
           --no-final         Skip courses known to have a final exam
           -t, --time         Preferred meeting time (repeatable)

  catalog  List courses offered this year
           --term, --subject, --weekdays, --code

  course   Show one course from the catalog (CS 50, COMPSCI 50, ...)

  info     Show data paths and record counts

━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

QUICK START:

  gem-miner gems -d econ -w 5          # Light ECON courses
  gem-miner gems -d gened --no-final   # GenEds without a final
  gem-miner course "CS 50"             # Is CS 50 offered?

Use 'gem-miner <command> --help' for detailed command options.
""",
    add_completion=False,
    rich_markup_mode="rich",
)

console = get_console()


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level", "-l",
        help="Log level override (DEBUG, INFO, WARNING, ERROR).",
    ),
):
    """Configure logging from settings before any command runs."""
    from gem_miner.shared.config import get_settings
    from gem_miner.shared.logging import setup_logging

    settings = get_settings()
    setup_logging(
        level=log_level or settings.get_effective_log_level(),
        use_rich=settings.logging.rich_console,
        log_file=settings.logging.file or None,
        log_format=settings.logging.format,
        force=True,
    )


def _fmt(value: Optional[float], pattern: str = "{:.2f}") -> str:
    return pattern.format(value) if value is not None else "-"


# ─────────────────────────────────────────────────────────────────────────────
# Gems Command
# ─────────────────────────────────────────────────────────────────────────────


@app.command()
def gems(
    department: Optional[str] = typer.Option(
        None,
        "--department", "-d",
        help="Department name or code (cs, econ, psychology, gened).",
    ),
    keyword: Optional[str] = typer.Option(
        None,
        "--keyword", "-k",
        help="Keyword to look for in titles and descriptions.",
    ),
    min_rating: Optional[float] = typer.Option(
        None,
        "--min-rating", "-r",
        help="Minimum mean course rating (0-5).",
    ),
    max_hours: Optional[float] = typer.Option(
        None,
        "--max-hours", "-w",
        help="Maximum weekly workload hours. Courses without workload data pass.",
    ),
    no_final: bool = typer.Option(
        False,
        "--no-final",
        help="Exclude courses known to have a final exam.",
    ),
    course_code: Optional[str] = typer.Option(
        None,
        "--code", "-c",
        help="Exact course code, e.g. 'COMPSCI 50'.",
    ),
    gen_ed_category: Optional[str] = typer.Option(
        None,
        "--gened-category", "-g",
        help="GenEd category, e.g. 'Ethics and Civics'.",
    ),
    preferred_times: Optional[list[str]] = typer.Option(
        None,
        "--time", "-t",
        help="Preferred meeting time text (repeatable), e.g. 'Tue/Thu'.",
    ),
    limit: int = typer.Option(
        10,
        "--limit", "-n",
        help="Number of courses to show.",
    ),
):
    """
    💎 Rank courses by GemScore.

    Examples:
        gem-miner gems -d econ -w 5
        gem-miner gems -d gened -g "Ethics and Civics"
        gem-miner gems -k "data" -t "Tue/Thu" -n 20
    """
    from gem_miner.gems.departments import map_department
    from gem_miner.gems.miner import create_gem_miner
    from gem_miner.shared.schemas import EvaluationFilters, GemQuery

    title_search = keyword
    post_department = None
    if department:
        match = map_department(department)
        post_department = match.department
        title_search = title_search or match.title_search

    query = GemQuery(
        filters=EvaluationFilters(title_search=title_search, min_rating=min_rating),
        max_hrs_per_week=max_hours,
        no_final=no_final,
        department=post_department,
        course_code=course_code,
        gen_ed_category=gen_ed_category,
        preferred_times=preferred_times or [],
    )

    miner = create_gem_miner()
    ranked = miner.find_gems(query)

    if not ranked:
        console.print("[yellow]No courses matched.[/yellow]")
        raise typer.Exit(0)

    if ranked[0].using_defaults:
        console.print(
            "[yellow]⚠ No Q-Report data loaded: ratings and workloads are defaults, "
            "not student evaluations.[/yellow]\n"
        )

    table = Table(title=f"💎 Top {min(limit, len(ranked))} of {len(ranked)} courses")
    table.add_column("Score", justify="right", style="bold green")
    table.add_column("Course", style="cyan")
    table.add_column("Title")
    table.add_column("Rating", justify="right")
    table.add_column("Hrs/wk", justify="right")
    table.add_column("Meeting")
    table.add_column("Fit", justify="center")

    for course in ranked[:limit]:
        table.add_row(
            str(course.score),
            course.course_id,
            truncate_text(course.title, 40),
            _fmt(course.rating),
            _fmt(course.workload_hours, "{:.1f}"),
            course.meeting_time or "-",
            "✓" if course.logistics_fit else "",
        )

    console.print(table)

    best = ranked[0]
    if best.best_comment:
        console.print(Panel(best.best_comment, title=f"💬 {best.course_id}", border_style="green"))


# ─────────────────────────────────────────────────────────────────────────────
# Catalog Command
# ─────────────────────────────────────────────────────────────────────────────


@app.command()
def catalog(
    term: Optional[str] = typer.Option(None, "--term", help="Term text, e.g. 'Fall 2025'."),
    subject: Optional[str] = typer.Option(None, "--subject", "-s", help="Subject code, e.g. ECON."),
    weekdays: Optional[str] = typer.Option(None, "--weekdays", help="Weekday pattern, e.g. 'Tue/Thu'."),
    course_code: Optional[str] = typer.Option(None, "--code", "-c", help="Exact course code."),
    limit: int = typer.Option(25, "--limit", "-n", help="Number of courses to show."),
):
    """
    📚 List courses offered in the AY catalog.

    Examples:
        gem-miner catalog --subject ECON
        gem-miner catalog --weekdays "Mon/Wed" --term "Spring 2026"
    """
    from gem_miner.gems.miner import create_gem_miner
    from gem_miner.shared.schemas import CatalogFilters

    miner = create_gem_miner()
    courses = miner.get_all_available_courses(
        CatalogFilters(term=term, subject=subject, weekdays=weekdays, course_code=course_code)
    )

    if not courses:
        console.print("[yellow]No catalog courses matched.[/yellow]")
        raise typer.Exit(0)

    table = Table(title=f"📚 {len(courses)} catalog courses")
    table.add_column("Course", style="cyan")
    table.add_column("Title")
    table.add_column("Term")
    table.add_column("Meeting")
    table.add_column("Instructors")

    for entry in courses[:limit]:
        table.add_row(
            entry.course_id,
            truncate_text(entry.title, 40),
            entry.term,
            entry.meeting.raw,
            entry.instructors,
        )

    console.print(table)


# ─────────────────────────────────────────────────────────────────────────────
# Course Command
# ─────────────────────────────────────────────────────────────────────────────


@app.command()
def course(
    course_id: str = typer.Argument(..., help="Course identifier, e.g. 'CS 50' or 'COMPSCI 50'."),
):
    """
    🔎 Show one course from the catalog.

    Department aliases are understood, so "CS 50" finds "COMPSCI 50".
    """
    from gem_miner.gems.miner import create_gem_miner

    miner = create_gem_miner()
    described = miner.describe_course(course_id)

    if described is None:
        console.print(f"[red]✗ {course_id} is not in the AY catalog.[/red]")
        raise typer.Exit(1)

    lines = [
        f"[bold]{described.course_id}[/bold] - {described.title}",
        f"Term: {described.term or '-'}",
        f"Meeting: {described.meeting_time or '-'}",
        f"Instructors: {described.instructors or '-'}",
    ]
    if described.gen_ed_category:
        lines.append(f"GenEd: {described.gen_ed_category}")
    if described.final_exam is not None:
        lines.append(f"Final exam: {'yes' if described.final_exam else 'no'}")
    if described.description:
        lines.append(f"\n{described.description}")

    console.print(Panel("\n".join(lines), title="🔎 Course", border_style="cyan"))


# ─────────────────────────────────────────────────────────────────────────────
# Info Command
# ─────────────────────────────────────────────────────────────────────────────


@app.command()
def info():
    """
    ℹ️ Show configuration and data-source status.

    Displays:
      • Version information
      • Data paths and their existence status
      • Record counts per source
    """
    from gem_miner import __version__
    from gem_miner.gems.miner import create_gem_miner
    from gem_miner.shared.config import get_settings

    settings = get_settings()

    console.print(Panel(
        f"[bold]Gem Miner[/bold]\n"
        f"Version: {__version__}\n"
        f"Config: config/settings.yaml",
        title="ℹ️ Info",
    ))

    console.print("\n[bold]Data Paths:[/bold]")
    resolved_paths = settings.resolved_paths
    path_dict = {
        "qreport_file": resolved_paths.qreport_file,
        "catalog_file": resolved_paths.catalog_file,
        "signals_file": resolved_paths.signals_file,
    }
    for name, path in path_dict.items():
        exists = "✓" if path.exists() else "✗"
        console.print(f"  {name}: {path} [{exists}]")

    counts = create_gem_miner(settings).warm()

    table = Table(title="Records")
    table.add_column("Source")
    table.add_column("Count", justify="right")
    for source, count in counts.items():
        table.add_row(source, str(count))
    console.print(table)


# ─────────────────────────────────────────────────────────────────────────────
# Entry Point
# ─────────────────────────────────────────────────────────────────────────────


def cli():
    """CLI entry point."""
    app()


if __name__ == "__main__":
    cli()
