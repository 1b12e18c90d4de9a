"""Run the full fetch, analyze, assess and render pipeline."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from rich.console import Console
from rich.markup import escape

from .aggregator import analyze_repositories, compute_language_stats, top_languages
from .errors import NoRepositoriesError
from .github.client import DEFAULT_TIMEOUT, GitHubClient
from .llm import GroqClient
from .models import AnalysisResult, RawRepository, UserProfile
from .prompt import build_prompt, build_result, parse_assessment
from .renderer import render_json, render_report

logger = logging.getLogger(__name__)


async def analyze_user(
    username: str,
    github_token: str | None,
    groq_key: str,
    *,
    concurrency: int = 1,
    timeout: float = DEFAULT_TIMEOUT,
    console: Console | None = None,
) -> AnalysisResult:
    """Fetch ``username``'s profile and repositories and ask the model about them.

    Raises NoRepositoriesError before any model request when the user owns
    no non-fork repositories.
    """
    console = console or Console(stderr=True)
    now = datetime.now(timezone.utc)

    async with GitHubClient(github_token, timeout=timeout) as client:
        with console.status(f"Fetching profile for @{escape(username)}...") as status:
            user = UserProfile.from_api(await client.get_user(username))
            console.print(f"[green]✔[/green] Found user: {escape(user.name or user.login)}")

            status.update("Fetching repositories (excluding forks)...")
            repos = [RawRepository.from_api(r) for r in await client.list_repos(username)]
            console.print(f"[green]✔[/green] Found {len(repos)} original repositories")
            if not repos:
                raise NoRepositoriesError(username)

            status.update("Analyzing repository complexity...")
            analyzed = await analyze_repositories(
                client,
                username,
                repos,
                now=now,
                concurrency=concurrency,
                on_progress=lambda current, total: status.update(
                    f"Analyzing repositories... ({current}/{total})"
                ),
            )
            console.print("[green]✔[/green] Repository analysis complete")

    stats = top_languages(compute_language_stats(analyzed))
    prompt = build_prompt(user, analyzed, stats, now)

    async with GroqClient(groq_key) as llm:
        with console.status("Generating AI analysis with Groq..."):
            response = await llm.complete(prompt)
    console.print("[green]✔[/green] AI analysis complete")

    assessment = parse_assessment(response, stats)
    logger.debug("Assessed @%s as %s", username, assessment.seniority.value)
    return build_result(user, analyzed, stats, assessment, now)


async def run(
    username: str,
    github_token: str | None,
    groq_key: str,
    output_format: str = "table",
    output_file: str | None = None,
    concurrency: int = 1,
    timeout: float = DEFAULT_TIMEOUT,
) -> None:
    result = await analyze_user(
        username,
        github_token,
        groq_key,
        concurrency=concurrency,
        timeout=timeout,
    )
    if output_format == "json":
        render_json(result, output_file=output_file)
    else:
        render_report(result, output_file=output_file)
