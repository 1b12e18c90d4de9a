"""Tests for the aggregator module."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from showmethecode.aggregator import (
    aggregate_languages,
    analyze_repositories,
    compute_language_stats,
    top_languages,
)
from showmethecode.github.client import GitHubClient
from showmethecode.models import AnalyzedRepository, RawRepository

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def _raw(name: str, pushed_days_ago: int = 10, created_days_ago: int = 400, **kwargs) -> RawRepository:
    defaults = dict(
        name=name,
        languages_url=f"https://api.github.com/repos/alice/{name}/languages",
        created_at=NOW - timedelta(days=created_days_ago),
        pushed_at=NOW - timedelta(days=pushed_days_ago),
        stargazers_count=3,
        forks_count=1,
        topics=["cli"],
        size=120,
        default_branch="main",
    )
    defaults.update(kwargs)
    return RawRepository(**defaults)


def _analyzed(name: str, languages: dict[str, int]) -> AnalyzedRepository:
    return AnalyzedRepository(
        name=name,
        description=None,
        primary_language=None,
        languages=languages,
        stars=0,
        forks=0,
        topics=[],
        size=0,
        age_in_days=0,
        last_activity_days=0,
    )


@pytest.fixture
def mock_client():
    client = AsyncMock(spec=GitHubClient)
    client.get_languages.return_value = {"Python": 5000, "JavaScript": 3000}
    client.has_ci.return_value = True
    return client


@pytest.mark.asyncio
async def test_analyze_repositories(mock_client):
    repos = [_raw("repo1"), _raw("repo2")]
    analyzed = await analyze_repositories(mock_client, "alice", repos, now=NOW)

    assert [r.name for r in analyzed] == ["repo1", "repo2"]
    first = analyzed[0]
    assert first.languages == {"Python": 5000, "JavaScript": 3000}
    assert first.age_in_days == 400
    assert first.last_activity_days == 10
    assert first.has_ci is True
    assert first.stars == 3
    assert first.topics == ["cli"]
    mock_client.has_ci.assert_any_call("alice", "repo1", ref="main")


@pytest.mark.asyncio
async def test_age_is_floored_to_whole_days(mock_client):
    repo = _raw("repo1", created_at=NOW - timedelta(days=3, hours=23))
    analyzed = await analyze_repositories(mock_client, "alice", [repo], now=NOW)
    assert analyzed[0].age_in_days == 3


@pytest.mark.asyncio
async def test_stale_repo_skips_ci_probe(mock_client):
    """Repositories idle for a year or more are never probed for CI."""
    repos = [_raw("old", pushed_days_ago=365), _raw("older", pushed_days_ago=900)]
    analyzed = await analyze_repositories(mock_client, "alice", repos, now=NOW)

    assert all(r.has_ci is False for r in analyzed)
    assert mock_client.has_ci.call_count == 0
    assert mock_client.get_languages.call_count == 2


@pytest.mark.asyncio
async def test_ci_probe_boundary(mock_client):
    repos = [_raw("fresh", pushed_days_ago=364), _raw("stale", pushed_days_ago=365)]
    analyzed = await analyze_repositories(mock_client, "alice", repos, now=NOW)

    assert analyzed[0].has_ci is True
    assert analyzed[1].has_ci is False
    mock_client.has_ci.assert_called_once_with("alice", "fresh", ref="main")


@pytest.mark.asyncio
async def test_progress_callback(mock_client):
    seen = []
    repos = [_raw("a"), _raw("b"), _raw("c")]
    await analyze_repositories(
        mock_client, "alice", repos, now=NOW, on_progress=lambda c, t: seen.append((c, t))
    )
    assert seen == [(1, 3), (2, 3), (3, 3)]


@pytest.mark.asyncio
async def test_concurrent_analysis_keeps_order(mock_client):
    async def languages_side_effect(url):
        return {url.rsplit("/", 2)[-2]: 100}

    mock_client.get_languages.side_effect = languages_side_effect
    repos = [_raw(f"repo{i}") for i in range(6)]
    analyzed = await analyze_repositories(mock_client, "alice", repos, now=NOW, concurrency=3)

    assert [r.name for r in analyzed] == [f"repo{i}" for i in range(6)]
    assert [list(r.languages) for r in analyzed] == [[f"repo{i}"] for i in range(6)]


def test_aggregate_languages_sums_bytes():
    repos = [
        _analyzed("a", {"Python": 100, "Go": 50}),
        _analyzed("b", {"Python": 25, "Rust": 10}),
    ]
    assert aggregate_languages(repos) == {"Python": 125, "Go": 50, "Rust": 10}


def test_language_stats_typescript_python_split():
    repos = [
        _analyzed("web", {"TypeScript": 600, "Python": 0}),
        _analyzed("api", {"TypeScript": 200, "Python": 200}),
    ]
    stats = compute_language_stats(repos)

    assert [(s.language, s.percentage) for s in stats] == [("TypeScript", 80.0), ("Python", 20.0)]
    assert stats[0].bytes == 800
    # A zero-byte entry still counts as the language being present
    assert stats[1].project_count == 2
    assert stats[0].project_count == 2


def test_language_stats_project_count_by_key_presence():
    repos = [
        _analyzed("a", {"Python": 10}),
        _analyzed("b", {"Python": 10, "Shell": 1}),
        _analyzed("c", {"Go": 10}),
    ]
    counts = {s.language: s.project_count for s in compute_language_stats(repos)}
    assert counts == {"Python": 2, "Shell": 1, "Go": 1}


def test_language_stats_percentages_sum_to_100():
    languages = {f"Lang{i}": (i + 1) * 137 for i in range(15)}
    stats = compute_language_stats([_analyzed("a", languages)])

    assert len(stats) == 15
    assert sum(s.percentage for s in stats) == pytest.approx(100.0, abs=0.05 * len(stats))
    percentages = [s.percentage for s in stats]
    assert percentages == sorted(percentages, reverse=True)


def test_language_stats_empty_when_no_bytes():
    assert compute_language_stats([_analyzed("a", {}), _analyzed("b", {})]) == []
    assert compute_language_stats([_analyzed("a", {"Python": 0})]) == []


def test_top_languages_truncates_after_percentages():
    languages = {f"Lang{i}": 100 for i in range(12)}
    stats = compute_language_stats([_analyzed("a", languages)])
    top = top_languages(stats)

    assert len(top) == 10
    # Shares stay relative to all twelve languages
    assert all(s.percentage == 8.3 for s in top)


@pytest.mark.asyncio
async def test_concurrent_failure_cancels_remaining_repositories(mock_client):
    cancelled = []

    async def languages_side_effect(url):
        name = url.rsplit("/", 2)[-2]
        if name == "broken":
            raise RuntimeError("API error")
        try:
            await asyncio.sleep(30)
        except asyncio.CancelledError:
            cancelled.append(name)
            raise
        return {}

    mock_client.get_languages.side_effect = languages_side_effect
    repos = [_raw("slow1"), _raw("broken"), _raw("slow2")]

    with pytest.raises(RuntimeError, match="API error"):
        await analyze_repositories(mock_client, "alice", repos, now=NOW, concurrency=3)

    assert sorted(cancelled) == ["slow1", "slow2"]
