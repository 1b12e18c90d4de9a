"""Async GitHub REST API client."""

from __future__ import annotations

import logging

import httpx

from .. import __version__
from ..errors import GitHubAPIError, RateLimitError, UserNotFoundError
from .rate_limit import RateLimitMonitor

logger = logging.getLogger(__name__)

GITHUB_API_BASE = "https://api.github.com"
REPOS_PER_PAGE = 100
DEFAULT_TIMEOUT = 30.0

# Probed in this order; the first hit wins.
CI_MARKERS = (
    ".github/workflows",
    ".travis.yml",
    "Jenkinsfile",
    ".circleci/config.yml",
    "azure-pipelines.yml",
)


class GitHubClient:
    """Thin wrapper over ``httpx.AsyncClient`` for the endpoints we need.

    Use as an async context manager::

        async with GitHubClient(token) as client:
            user = await client.get_user("octocat")
    """

    def __init__(
        self,
        token: str | None = None,
        *,
        base_url: str = GITHUB_API_BASE,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": f"showmethecode/{__version__}",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )
        self.rate_limit = RateLimitMonitor()

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def _get(self, url: str, **kwargs) -> httpx.Response:
        response = await self._client.get(url, **kwargs)
        logger.debug("GET %s -> %d", response.request.url, response.status_code)
        self.rate_limit.update(response)
        return response

    def _raise_for_status(self, response: httpx.Response) -> None:
        if response.is_success:
            return
        if response.status_code == 403:
            raise RateLimitError(self.rate_limit.reset_label)
        raise GitHubAPIError(response.status_code, response.reason_phrase)

    async def get_user(self, username: str) -> dict:
        response = await self._get(f"/users/{username}")
        if response.status_code == 404:
            raise UserNotFoundError(username)
        self._raise_for_status(response)
        return response.json()

    async def list_repos(self, username: str) -> list[dict]:
        """Return every repository the user owns, forks excluded."""
        repos: list[dict] = []
        page = 1
        while True:
            response = await self._get(
                f"/users/{username}/repos",
                params={
                    "per_page": REPOS_PER_PAGE,
                    "page": page,
                    "sort": "updated",
                    "type": "owner",
                },
            )
            self._raise_for_status(response)
            batch = response.json()
            if not batch:
                break
            repos.extend(r for r in batch if not r.get("fork"))
            if len(batch) < REPOS_PER_PAGE:
                break
            page += 1
        return repos

    async def get_languages(self, languages_url: str) -> dict[str, int]:
        response = await self._get(languages_url)
        if not response.is_success:
            return {}
        return response.json()

    async def path_exists(
        self, owner: str, repo: str, path: str, ref: str | None = None
    ) -> bool:
        params = {"ref": ref} if ref else None
        response = await self._get(f"/repos/{owner}/{repo}/contents/{path}", params=params)
        return response.is_success

    async def has_ci(self, owner: str, repo: str, ref: str | None = None) -> bool:
        for marker in CI_MARKERS:
            if await self.path_exists(owner, repo, marker, ref=ref):
                return True
        return False
