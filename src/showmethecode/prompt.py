"""Build the model prompt and turn its reply into an Assessment."""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timedelta

from .models import (
    AnalysisResult,
    AnalyzedRepository,
    Assessment,
    LanguageStats,
    Seniority,
    UserProfile,
)

logger = logging.getLogger(__name__)

NOT_PROVIDED = "Not provided"
MAX_TOPICS = 50

FALLBACK_REASONING = (
    "Unable to parse AI response. Based on repository count and language "
    "diversity, estimated as Mid-Level."
)
FALLBACK_INSIGHT = "Analysis incomplete - please try again"

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)

_RESPONSE_FORMAT = """\
{
  "seniorityLevel": "Junior" | "Mid-Level" | "Senior" | "Principal/Staff" | "Superstar",
  "seniorityReasoning": "Detailed explanation of why this seniority level was assigned, mentioning specific evidence from their profile",
  "keyInsights": ["insight1", "insight2", "insight3", "insight4", "insight5"],
  "specializations": ["area1", "area2", "area3"]
}"""

_SENIORITY_GUIDE = """\
Consider these factors for seniority (focus on TECHNICAL SKILL, not popularity - stars/forks measure impact, not ability):
- Junior: 1-2 languages, simple single-purpose projects, basic code patterns, limited documentation
- Mid-Level: 3-4 languages, multi-component projects, good code organization, README documentation
- Senior: 5+ languages, complex architectures (microservices, monorepos), well-designed patterns, meaningful topics/tags, evidence of collaboration
- Principal/Staff: 7+ languages with depth, framework/library creation, advanced architectural patterns, comprehensive documentation, mentorship evidence
- Superstar: A Senior or Principal level developer who ALSO has significant community impact (high stars, many forks, popular projects). This is a parallel recognition of popularity, not a higher technical level."""


def account_age_years(created_at: datetime, now: datetime) -> int:
    return (now - created_at) // timedelta(days=365)


def unique_topics(repos: list[AnalyzedRepository]) -> list[str]:
    return list(dict.fromkeys(t for r in repos for t in r.topics))


def _repo_summary(repo: AnalyzedRepository) -> dict:
    return {
        "name": repo.name,
        "description": repo.description,
        "primaryLanguage": repo.primary_language,
        "stars": repo.stars,
        "forks": repo.forks,
        "topics": repo.topics,
        "sizeKB": repo.size,
        "ageInDays": repo.age_in_days,
        "lastActivityDays": repo.last_activity_days,
    }


def build_prompt(
    user: UserProfile,
    repos: list[AnalyzedRepository],
    stats: list[LanguageStats],
    now: datetime,
) -> str:
    """Describe the developer in a prompt that asks for a JSON verdict.

    ``stats`` is expected to be the already truncated top-N list.
    """
    topics = unique_topics(repos)
    language_lines = "\n".join(
        f"- {s.language}: {s.percentage}% ({s.project_count} projects)" for s in stats
    )
    summary = json.dumps([_repo_summary(r) for r in repos], indent=2)

    return f"""You are an expert at analyzing developer profiles. Analyze this GitHub developer and provide a detailed assessment.

## Developer Profile
- Username: {user.login}
- Name: {user.name or NOT_PROVIDED}
- Bio: {user.bio or NOT_PROVIDED}
- Company: {user.company or NOT_PROVIDED}
- Location: {user.location or NOT_PROVIDED}
- GitHub account age: {account_age_years(user.created_at, now)} years
- Followers: {user.followers}
- Following: {user.following}

## Repository Statistics
- Total repositories (non-fork): {len(repos)}
- Total stars received: {sum(r.stars for r in repos)}
- Total forks received: {sum(r.forks for r in repos)}
- Unique topics/tags used: {len(topics)}

## Language Distribution (by code volume)
{language_lines}

## Repositories (sorted by most recent activity)
{summary}

## Unique Topics Across All Repos
{", ".join(topics[:MAX_TOPICS])}

---

Based on this data, provide your analysis in the following JSON format ONLY (no other text):

{_RESPONSE_FORMAT}

{_SENIORITY_GUIDE}"""


def fallback_assessment(stats: list[LanguageStats]) -> Assessment:
    return Assessment(
        seniority=Seniority.MID_LEVEL,
        reasoning=FALLBACK_REASONING,
        insights=[FALLBACK_INSIGHT],
        specializations=[s.language for s in stats[:3]],
    )


def _string_list(value) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"expected a list of strings, got {value!r}")
    return value


def _assessment_from_json(data) -> Assessment:
    if not isinstance(data, dict):
        raise ValueError("response is not a JSON object")
    reasoning = data["seniorityReasoning"]
    if not isinstance(reasoning, str):
        raise ValueError("seniorityReasoning is not a string")
    return Assessment(
        seniority=Seniority(data["seniorityLevel"]),
        reasoning=reasoning,
        insights=_string_list(data["keyInsights"]),
        specializations=_string_list(data["specializations"]),
    )


def parse_assessment(text: str, stats: list[LanguageStats]) -> Assessment:
    """Pull the JSON object out of free-form model output.

    Takes everything from the first ``{`` to the last ``}``. Anything that
    does not decode into a complete assessment yields
    :func:`fallback_assessment` instead of an error.
    """
    match = _JSON_OBJECT.search(text)
    if match is None:
        logger.warning("No JSON object in model response, using fallback")
        return fallback_assessment(stats)
    try:
        return _assessment_from_json(json.loads(match.group(0)))
    except (ValueError, KeyError) as exc:
        # json.JSONDecodeError is a ValueError subclass
        logger.warning("Could not parse model response (%s), using fallback", exc)
        return fallback_assessment(stats)


def build_result(
    user: UserProfile,
    repos: list[AnalyzedRepository],
    stats: list[LanguageStats],
    assessment: Assessment,
    now: datetime,
) -> AnalysisResult:
    return AnalysisResult(
        user=user,
        seniority=assessment.seniority,
        reasoning=assessment.reasoning,
        total_repositories=len(repos),
        total_stars=sum(r.stars for r in repos),
        experience_years=account_age_years(user.created_at, now),
        tech_stack=list(stats),
        insights=list(assessment.insights),
        specializations=list(assessment.specializations),
    )
