"""Data models for showmethecode."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


def parse_timestamp(value: str) -> datetime:
    """Parse a GitHub ISO-8601 timestamp (``2020-01-02T03:04:05Z``)."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class Seniority(str, Enum):
    JUNIOR = "Junior"
    MID_LEVEL = "Mid-Level"
    SENIOR = "Senior"
    PRINCIPAL_STAFF = "Principal/Staff"
    SUPERSTAR = "Superstar"


@dataclass(frozen=True)
class UserProfile:
    login: str
    created_at: datetime
    name: str | None = None
    bio: str | None = None
    company: str | None = None
    location: str | None = None
    blog: str | None = None
    followers: int = 0
    following: int = 0
    public_repos: int = 0

    @classmethod
    def from_api(cls, data: dict) -> UserProfile:
        return cls(
            login=data["login"],
            created_at=parse_timestamp(data["created_at"]),
            name=data.get("name"),
            bio=data.get("bio"),
            company=data.get("company"),
            location=data.get("location"),
            blog=data.get("blog") or None,
            followers=data.get("followers", 0),
            following=data.get("following", 0),
            public_repos=data.get("public_repos", 0),
        )


@dataclass(frozen=True)
class RawRepository:
    name: str
    languages_url: str
    created_at: datetime
    pushed_at: datetime
    description: str | None = None
    language: str | None = None
    stargazers_count: int = 0
    forks_count: int = 0
    topics: list[str] = field(default_factory=list)
    size: int = 0
    fork: bool = False
    default_branch: str | None = None
    open_issues_count: int = 0

    @classmethod
    def from_api(cls, data: dict) -> RawRepository:
        # pushed_at is null for repositories that never received a push
        pushed = data.get("pushed_at") or data["created_at"]
        return cls(
            name=data["name"],
            languages_url=data["languages_url"],
            created_at=parse_timestamp(data["created_at"]),
            pushed_at=parse_timestamp(pushed),
            description=data.get("description"),
            language=data.get("language"),
            stargazers_count=data.get("stargazers_count", 0),
            forks_count=data.get("forks_count", 0),
            topics=list(data.get("topics") or []),
            size=data.get("size", 0),
            fork=data.get("fork", False),
            default_branch=data.get("default_branch"),
            open_issues_count=data.get("open_issues_count", 0),
        )


@dataclass
class AnalyzedRepository:
    name: str
    description: str | None
    primary_language: str | None
    languages: dict[str, int]
    stars: int
    forks: int
    topics: list[str]
    size: int
    age_in_days: int
    last_activity_days: int
    has_ci: bool = False
    open_issues: int = 0


@dataclass
class LanguageStats:
    language: str
    bytes: int
    percentage: float
    project_count: int = 0


@dataclass(frozen=True)
class Assessment:
    """What the model concluded about the developer."""

    seniority: Seniority
    reasoning: str
    insights: list[str] = field(default_factory=list)
    specializations: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class AnalysisResult:
    user: UserProfile
    seniority: Seniority
    reasoning: str
    total_repositories: int
    total_stars: int
    experience_years: int
    tech_stack: list[LanguageStats] = field(default_factory=list)
    insights: list[str] = field(default_factory=list)
    specializations: list[str] = field(default_factory=list)
