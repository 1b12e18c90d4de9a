"""Command-line entry point."""

from __future__ import annotations

import asyncio
import logging
import sys

import click
import httpx
from dotenv import load_dotenv
from rich.logging import RichHandler

from . import __version__
from .errors import ShowMeTheCodeError
from .github.client import DEFAULT_TIMEOUT
from .orchestrator import run
from .renderer import render_error

logger = logging.getLogger(__name__)

EPILOG = """\b
Examples:
  showmethecode octocat
  showmethecode sindresorhus --github-token ghp_xxxx
  showmethecode torvalds --groq-key gsk_xxxx
"""


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )
    if not verbose:
        return
    # httpx and openai are chatty at DEBUG
    for name in ("httpx", "httpcore", "openai"):
        logging.getLogger(name).setLevel(logging.WARNING)


@click.command(
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog=EPILOG,
)
@click.argument("username", required=False)
@click.option(
    "--github-token",
    envvar="GITHUB_TOKEN",
    help="GitHub token for private repos & higher rate limits (or set GITHUB_TOKEN).",
)
@click.option(
    "--groq-key",
    envvar="GROQ_API_KEY",
    help="Groq API key (or set GROQ_API_KEY).",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    show_default=True,
    help="Output format.",
)
@click.option("--output", "output_file", default=None, help="Write the report to a file.")
@click.option(
    "--concurrency",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Repositories analyzed in parallel.",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=DEFAULT_TIMEOUT,
    show_default=True,
    help="HTTP timeout in seconds for GitHub requests.",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.version_option(version=__version__)
def main(
    username: str | None,
    github_token: str | None,
    groq_key: str | None,
    output_format: str,
    output_file: str | None,
    concurrency: int,
    timeout: float,
    verbose: bool,
) -> None:
    """Analyze a GitHub developer's repositories and estimate their seniority."""
    _configure_logging(verbose)
    ctx = click.get_current_context()

    if not username:
        render_error("Please provide a GitHub username")
        click.echo(ctx.get_help(), err=True)
        sys.exit(1)

    if not groq_key:
        render_error("Groq API key is required. Set GROQ_API_KEY env var or use --groq-key <key>")
        click.echo(ctx.get_help(), err=True)
        sys.exit(1)

    try:
        asyncio.run(run(
            username=username,
            github_token=github_token or None,
            groq_key=groq_key,
            output_format=output_format,
            output_file=output_file,
            concurrency=concurrency,
            timeout=timeout,
        ))
    except (ShowMeTheCodeError, httpx.HTTPError) as exc:
        render_error(str(exc) or exc.__class__.__name__)
        sys.exit(1)
    except Exception as exc:
        logger.debug("Unexpected failure", exc_info=True)
        render_error(str(exc) or exc.__class__.__name__)
        sys.exit(1)


def entrypoint() -> None:
    """Console script: load ``.env`` before click reads the environment."""
    load_dotenv()
    main()
