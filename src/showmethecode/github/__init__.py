from .client import CI_MARKERS, GitHubClient

__all__ = ["CI_MARKERS", "GitHubClient"]
