"""Exceptions raised by the analysis pipeline."""

from __future__ import annotations


class ShowMeTheCodeError(Exception):
    """Base class for errors that end a run with a user-facing message."""


class GitHubError(ShowMeTheCodeError):
    pass


class UserNotFoundError(GitHubError):
    def __init__(self, username: str) -> None:
        super().__init__(f"User '{username}' not found on GitHub")
        self.username = username


class RateLimitError(GitHubError):
    def __init__(self, reset_at: str | None = None) -> None:
        message = "GitHub API rate limit exceeded. Consider using a GitHub token with --github-token"
        if reset_at:
            message += f" (limit resets at {reset_at})"
        super().__init__(message)
        self.reset_at = reset_at


class GitHubAPIError(GitHubError):
    def __init__(self, status_code: int, reason: str = "") -> None:
        super().__init__(f"GitHub API error: {status_code} {reason}".rstrip())
        self.status_code = status_code


class NoRepositoriesError(ShowMeTheCodeError):
    def __init__(self, username: str) -> None:
        super().__init__("No repositories found for this user")
        self.username = username


class LLMError(ShowMeTheCodeError):
    pass
