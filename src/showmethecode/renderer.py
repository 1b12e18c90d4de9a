"""Rich-based terminal report renderer with JSON support."""

from __future__ import annotations

import io
import json
import textwrap
from dataclasses import asdict

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .llm import MODEL
from .models import AnalysisResult, LanguageStats, Seniority

WRAP_WIDTH = 58
BAR_WIDTH = 30
CHART_LANGUAGES = 8

SENIORITY_STYLES: dict[Seniority, str] = {
    Seniority.JUNIOR: "green",
    Seniority.MID_LEVEL: "yellow",
    Seniority.SENIOR: "magenta",
    Seniority.PRINCIPAL_STAFF: "red",
    Seniority.SUPERSTAR: "cyan",
}


def _format_number(n: int) -> str:
    return f"{n:,}"


def make_bar(percentage: float, max_percentage: float, width: int = BAR_WIDTH) -> str:
    """Bar scaled so that ``max_percentage`` fills the whole width."""
    filled = round(percentage / max_percentage * width) if max_percentage > 0 else 0
    return "█" * filled + "░" * (width - filled)


def wrap_words(
    text: str,
    width: int = WRAP_WIDTH,
    indent: str = "  ",
    subsequent_indent: str | None = None,
) -> list[str]:
    """Word-wrap ``text`` so no line is wider than ``width``.

    Lines break only between words. A word longer than the width is kept
    whole on a line of its own.
    """
    return textwrap.wrap(
        text,
        width=width,
        initial_indent=indent,
        subsequent_indent=indent if subsequent_indent is None else subsequent_indent,
        break_long_words=False,
        break_on_hyphens=False,
    )


def _write_to_file(content: str, output_file: str) -> None:
    """Write content to a file and print confirmation."""
    with open(output_file, "w", encoding="utf-8") as f:
        f.write(content)
    Console().print(f"Saved to {escape(output_file)}")


def _section(console: Console, title: str) -> None:
    console.print(f"[bold cyan]{title}[/bold cyan]")
    console.print()


def _render_tech_stack(console: Console, stats: list[LanguageStats]) -> None:
    shown = stats[:CHART_LANGUAGES]
    max_percentage = max(s.percentage for s in shown)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Language")
    table.add_column("Bar", style="cyan")
    table.add_column("Percentage", justify="right", style="yellow")
    table.add_column("Repos", justify="right", style="dim")
    for s in shown:
        table.add_row(
            escape(s.language),
            make_bar(s.percentage, max_percentage),
            f"{s.percentage}%",
            f"({s.project_count} repos)",
        )
    console.print(table)
    console.print()


def render_report(result: AnalysisResult, output_file: str | None = None) -> None:
    """Render an AnalysisResult to the terminal using rich."""
    if output_file:
        string_io = io.StringIO()
        console = Console(file=string_io, force_terminal=False, width=120)
    else:
        console = Console()

    user = result.user

    console.print(Panel(
        Text(f"Show Me The Code: @{user.login}", justify="center"),
        style="bold cyan",
    ))
    console.print()

    # Profile, absent fields skipped
    _section(console, "Developer Profile")
    profile = Table(show_header=False, box=None, padding=(0, 2))
    profile.add_column("label", style="dim")
    profile.add_column("value")
    profile.add_row("Username", f"[bold green]@{escape(user.login)}[/bold green]")
    for label, value, style in (
        ("Name", user.name, "yellow"),
        ("Bio", user.bio, "bright_black"),
        ("Company", user.company, "magenta"),
        ("Location", user.location, "blue"),
        ("Blog", user.blog, "blue"),
    ):
        if value:
            profile.add_row(label, f"[{style}]{escape(value)}[/{style}]")
    profile.add_row("GitHub Age", f"[cyan]{result.experience_years} years[/cyan]")
    profile.add_row("Followers", f"[yellow]{_format_number(user.followers)}[/yellow]")
    console.print(profile)
    console.print()

    _section(console, "Repository Statistics")
    summary = Table(show_header=False, box=None, padding=(0, 2))
    summary.add_column("label", style="dim")
    summary.add_column("value", style="bold")
    summary.add_row("Total Repos", _format_number(result.total_repositories))
    summary.add_row("Total Stars", _format_number(result.total_stars))
    console.print(summary)
    console.print()

    _section(console, "Seniority Assessment")
    style = SENIORITY_STYLES[result.seniority]
    console.print(f"  Level: [bold {style}]★ {result.seniority.value} ★[/bold {style}]")
    console.print()
    for line in wrap_words(result.reasoning):
        console.print(Text(line, style="bright_black"))
    console.print()

    if result.tech_stack:
        _section(console, "Tech Stack")
        _render_tech_stack(console, result.tech_stack)

    if result.specializations:
        _section(console, "Specializations")
        for area in result.specializations:
            console.print(f"  • [green]{escape(area)}[/green]")
        console.print()

    if result.insights:
        _section(console, "Key Insights")
        for insight in result.insights:
            for line in wrap_words(insight, indent="  → ", subsequent_indent="    "):
                console.print(Text(line))
        console.print()

    console.print(Text("─" * 63, style="bright_black"))
    console.print(Text(f"  Analysis powered by Groq AI ({MODEL})", style="bright_black"))
    console.print(Text(f"  Profile: https://github.com/{user.login}", style="bright_black"))
    console.print()

    if output_file:
        _write_to_file(string_io.getvalue(), output_file)


def render_json(result: AnalysisResult, output_file: str | None = None) -> None:
    """Render an AnalysisResult as JSON."""
    content = json.dumps(asdict(result), indent=2, ensure_ascii=False, default=str)
    if output_file:
        _write_to_file(content, output_file)
    else:
        print(content)


def render_error(message: str, console: Console | None = None) -> None:
    console = console or Console(stderr=True)
    console.print()
    console.print(f"[bold red]Error:[/bold red] [red]{escape(message)}[/red]")
    console.print()
