"""Normalize fetched repositories and aggregate their language statistics."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta, timezone

from .github.client import GitHubClient
from .models import AnalyzedRepository, LanguageStats, RawRepository

logger = logging.getLogger(__name__)

CI_CHECK_WINDOW_DAYS = 365
TOP_LANGUAGES = 10

ProgressCallback = Callable[[int, int], None]


def _days_between(earlier: datetime, later: datetime) -> int:
    return (later - earlier) // timedelta(days=1)


async def analyze_repository(
    client: GitHubClient,
    owner: str,
    repo: RawRepository,
    now: datetime,
) -> AnalyzedRepository:
    languages = await client.get_languages(repo.languages_url)
    last_activity = _days_between(repo.pushed_at, now)

    # Probing costs up to five requests, so stale repositories are skipped.
    has_ci = False
    if last_activity < CI_CHECK_WINDOW_DAYS:
        has_ci = await client.has_ci(owner, repo.name, ref=repo.default_branch)

    return AnalyzedRepository(
        name=repo.name,
        description=repo.description,
        primary_language=repo.language,
        languages=languages,
        stars=repo.stargazers_count,
        forks=repo.forks_count,
        topics=list(repo.topics),
        size=repo.size,
        age_in_days=_days_between(repo.created_at, now),
        last_activity_days=last_activity,
        has_ci=has_ci,
        open_issues=repo.open_issues_count,
    )


async def analyze_repositories(
    client: GitHubClient,
    owner: str,
    repos: list[RawRepository],
    *,
    now: datetime | None = None,
    concurrency: int = 1,
    on_progress: ProgressCallback | None = None,
) -> list[AnalyzedRepository]:
    """Analyze ``repos`` in order.

    With the default ``concurrency=1`` every request is awaited before the
    next is issued. Larger values allow that many repositories in flight at
    once; the returned list keeps the input order either way.
    """
    now = now or datetime.now(timezone.utc)
    total = len(repos)

    if concurrency <= 1:
        analyzed = []
        for i, repo in enumerate(repos, 1):
            if on_progress:
                on_progress(i, total)
            analyzed.append(await analyze_repository(client, owner, repo, now))
        return analyzed

    semaphore = asyncio.Semaphore(concurrency)
    done = 0

    async def _bounded(repo: RawRepository) -> AnalyzedRepository:
        nonlocal done
        async with semaphore:
            result = await analyze_repository(client, owner, repo, now)
        done += 1
        if on_progress:
            on_progress(done, total)
        return result

    logger.debug("Analyzing %d repositories with concurrency %d", total, concurrency)
    tasks = [asyncio.ensure_future(_bounded(r)) for r in repos]
    try:
        return list(await asyncio.gather(*tasks))
    finally:
        # One failure must not leave siblings running against a closed client
        pending = [t for t in tasks if not t.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)


def aggregate_languages(repos: Iterable[AnalyzedRepository]) -> dict[str, int]:
    totals: dict[str, int] = {}
    for repo in repos:
        for language, count in repo.languages.items():
            totals[language] = totals.get(language, 0) + count
    return totals


def compute_language_stats(repos: list[AnalyzedRepository]) -> list[LanguageStats]:
    """Rank every language by its share of the total bytes.

    Returns an empty list when no repository reports any bytes.
    """
    totals = aggregate_languages(repos)
    total_bytes = sum(totals.values())
    if total_bytes == 0:
        return []

    stats = [
        LanguageStats(
            language=language,
            bytes=count,
            percentage=round(count / total_bytes * 1000) / 10,
            project_count=sum(1 for r in repos if language in r.languages),
        )
        for language, count in totals.items()
    ]
    stats.sort(key=lambda s: s.percentage, reverse=True)
    return stats


def top_languages(stats: list[LanguageStats], n: int = TOP_LANGUAGES) -> list[LanguageStats]:
    return stats[:n]
