"""Recommendation strategies: deterministic rules and Gemini enrichment.

The rules engine is always available. The Gemini strategy wraps it: any
failure on the remote path (disabled, timeout, API error, unparseable reply)
returns the rules result instead, so callers never see an exception from
recommendation generation.
"""

import logging
import re
from abc import ABC, abstractmethod

from models.responses import Recommendations, ScoreBreakdown
from models.schemas.keyword_match import KeywordMatch
from services import gemini_client, prompt_builder
from services.gemini_client import EnrichmentUnavailableError
from services.keyword_extractor import MAX_MISSING_DISPLAY

logger = logging.getLogger(__name__)

MAX_IMPROVEMENTS = 5
MAX_BULLET_REWRITES = 3
MAX_MISSING_SKILLS = 5

GENERIC_IMPROVEMENTS = [
    "Consider adding more specific keywords from the job description.",
    "Ensure your experience sections emphasize impact over duties.",
    "Tailor your professional summary to this specific role.",
]

EXAMPLE_BULLET_REWRITES = [
    "Collaborated with a cross-functional team to improve project delivery efficiency by 20%.",
    "Implemented a new monitoring system that reduced unplanned downtime by 15 hours per week.",
    "Led the migration of legacy services to the cloud, cutting hosting costs by $40,000 per year.",
]

ATS_TIPS = [
    "Use a standard font like Arial or Calibri.",
    "Keep your resume to 1-2 pages maximum.",
    "Avoid images, charts, and complex columns.",
    "Use standard section headings such as Experience, Education, and Skills.",
]


def score_status(score: int) -> str:
    if score >= 80:
        return "Excellent"
    if score >= 60:
        return "Good"
    if score >= 40:
        return "Needs Work"
    return "Poor"


class BaseRecommender(ABC):
    """Produces Recommendations from the scored inputs of one analysis."""

    name: str = ""

    @abstractmethod
    async def generate(
        self,
        resume_text: str,
        job_description: str,
        scores: ScoreBreakdown,
        match: KeywordMatch,
    ) -> Recommendations:
        """Return fully populated recommendations. Must not raise."""


# ---------------------------------------------------------------------------
# Deterministic rules
# ---------------------------------------------------------------------------

def _build_summary(scores: ScoreBreakdown, match: KeywordMatch) -> str:
    parts = [
        "This is an automated analysis of your resume against the job description.",
        f"Overall ATS compatibility: {scores.overall}/100 ({score_status(scores.overall)}).",
    ]
    if match.total == 0:
        parts.append("The job description did not contain enough distinct keywords to compare.")
    else:
        parts.append(
            f"{match.matched_count} of {match.total} job description keywords were found in your resume."
        )
    return " ".join(parts)


def _build_improvements(scores: ScoreBreakdown, match: KeywordMatch) -> list[str]:
    items: list[str] = []

    if match.missing:
        items.append(
            "Add these job description keywords where they reflect your experience: "
            f"{', '.join(match.missing[:MAX_MISSING_SKILLS])}."
        )
    if scores.semantic < 30:
        items.append("Mirror key phrases from the job description in your summary and experience bullets.")
    if scores.impact < 70:
        items.append("Quantify achievements with numbers, percentages, or dollar amounts.")
    if scores.format < 85:
        items.append("Organize your resume under standard headings: Summary, Experience, Education, Skills, Projects.")
    items.extend(GENERIC_IMPROVEMENTS)

    return items[:MAX_IMPROVEMENTS]


def build_rule_recommendations(scores: ScoreBreakdown, match: KeywordMatch) -> Recommendations:
    return Recommendations(
        summary=_build_summary(scores, match),
        improvements=_build_improvements(scores, match),
        bullet_rewrites=EXAMPLE_BULLET_REWRITES[:MAX_BULLET_REWRITES],
        missing_skills=match.missing[:MAX_MISSING_SKILLS],
        tips=list(ATS_TIPS),
        source="rules",
    )


class RuleBasedRecommender(BaseRecommender):
    name = "rules"

    async def generate(
        self,
        resume_text: str,
        job_description: str,
        scores: ScoreBreakdown,
        match: KeywordMatch,
    ) -> Recommendations:
        return build_rule_recommendations(scores, match)


# ---------------------------------------------------------------------------
# Gemini enrichment
# ---------------------------------------------------------------------------

_PARAGRAPH_SPLIT_RE = re.compile(r"\n\s*\n")
_LIST_MARKER_RE = re.compile(r"^\s*(?:[-*•·]|\d{1,2}[.)])\s*")

# Heading keyword -> Recommendations field, checked in order
SECTION_KEYWORDS: list[tuple[str, str]] = [
    ("improvement", "improvements"),
    ("bullet", "bullet_rewrites"),
    ("skill", "missing_skills"),
    ("tip", "tips"),
]


def _classify(heading: str) -> str | None:
    lower = heading.lower()
    for word, field in SECTION_KEYWORDS:
        if word in lower:
            return field
    return None


def _list_items(lines: list[str]) -> list[str]:
    items = []
    for line in lines:
        cleaned = _LIST_MARKER_RE.sub("", line).strip()
        if cleaned:
            items.append(cleaned)
    return items


def parse_recommendations(
    raw: str, fallback: Recommendations, missing: list[str]
) -> Recommendations:
    """Parse a blank-line-delimited critique into Recommendations.

    A paragraph is a section when its first line names one ("Key
    improvements:") and either carries a colon or is followed by list
    lines. The first remaining prose paragraph is the summary. Sections the
    reply lacks are taken from ``fallback``.

    ``missing`` is the displayed list of absent keywords; missing skills are
    restricted to it and reported in its spelling, without duplicates.

    Raises ValueError if no section can be recognized.
    """
    sections: dict[str, list[str]] = {field: [] for _, field in SECTION_KEYWORDS}
    summary = ""

    for paragraph in _PARAGRAPH_SPLIT_RE.split(raw.strip()):
        lines = [line for line in paragraph.strip().splitlines() if line.strip()]
        if not lines:
            continue
        heading, body = lines[0].strip(), lines[1:]
        field = _classify(heading)
        if field and (body or ":" in heading):
            items = _list_items(body)
            if not items and ":" in heading:
                tail = heading.split(":", 1)[1]
                items = [t.strip() for t in tail.split(",") if t.strip()]
            sections[field].extend(items)
        elif not summary:
            summary = " ".join(line.strip() for line in lines)

    if not any(sections.values()):
        raise ValueError("no recognizable sections in enrichment response")

    canonical = {kw.lower(): kw for kw in missing}
    skills: list[str] = []
    for item in sections["missing_skills"]:
        keyword = canonical.get(item.lower())
        if keyword and keyword not in skills:
            skills.append(keyword)

    return Recommendations(
        summary=summary or fallback.summary,
        improvements=(sections["improvements"] or fallback.improvements)[:MAX_IMPROVEMENTS],
        bullet_rewrites=(sections["bullet_rewrites"] or fallback.bullet_rewrites)[:MAX_BULLET_REWRITES],
        missing_skills=(skills or fallback.missing_skills)[:MAX_MISSING_SKILLS],
        tips=sections["tips"] or fallback.tips,
        raw=raw,
        source="gemini",
    )


class GeminiRecommender(BaseRecommender):
    name = "gemini"

    def __init__(self, fallback: RuleBasedRecommender | None = None) -> None:
        self._fallback = fallback or RuleBasedRecommender()

    async def generate(
        self,
        resume_text: str,
        job_description: str,
        scores: ScoreBreakdown,
        match: KeywordMatch,
    ) -> Recommendations:
        fallback = await self._fallback.generate(resume_text, job_description, scores, match)
        prompt = prompt_builder.build_recommendation_prompt(resume_text, job_description)

        try:
            raw = await gemini_client.generate_text(prompt)
            return parse_recommendations(raw, fallback, match.missing[:MAX_MISSING_DISPLAY])
        except EnrichmentUnavailableError as e:
            logger.warning("Gemini recommendations unavailable, using rules: %s", e)
        except Exception as e:
            logger.warning("Could not use Gemini recommendations, using rules: %s", e)
        return fallback


def get_recommender() -> BaseRecommender:
    """Gemini enrichment when configured, otherwise the rules engine."""
    if gemini_client.is_configured():
        return GeminiRecommender()
    return RuleBasedRecommender()
