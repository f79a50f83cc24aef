"""ATS sub-score calculators and the weighted overall score.

Every scorer is a pure function of its inputs and returns an int in [0, 100]
for any string, including the empty string. None of them share state, so
they can be evaluated in any order.
"""

import math
import re

from models.responses import ScoreBreakdown
from models.schemas.keyword_match import KeywordMatch

# Weights for the overall score (sum to 1.0)
W_KEYWORD = 0.40
W_SEMANTIC = 0.30
W_FORMAT = 0.15
W_IMPACT = 0.15

# --- Format heuristic ---
FORMAT_BASE = 70
SECTION_BONUS = 5
EXPECTED_SECTIONS = ("experience", "education", "skills", "summary", "projects")
BULLET_MARKERS = frozenset("•*-·")

# --- Impact heuristic ---
IMPACT_BASE = 50
NUMBER_POINTS = 2
NUMBER_POINTS_CAP = 20
ACTION_VERB_POINTS = 2
PERCENT_POINTS = 3
CURRENCY_POINTS = 4
ACTION_VERBS = (
    "achieved", "improved", "increased", "decreased", "managed",
    "led", "developed", "created", "implemented", "designed",
)

_NUMBER_RE = re.compile(r"\d+(?:[.,]\d+)*")
_PERCENT_RE = re.compile(r"\d+(?:[.,]\d+)*\s?%")
_CURRENCY_RE = re.compile(r"[$£€]\s?\d+(?:[.,]\d+)*")


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    return min(100, max(0, round_half_up(value)))


def keyword_score(match: KeywordMatch) -> int:
    """Percentage of JD keywords found in the resume; 0 for a degenerate JD."""
    if match.total == 0:
        return 0
    return clamp_score(match.matched_count / match.total * 100)


def _trigrams(text: str) -> set[tuple[str, str, str]]:
    words = text.lower().split()
    return {tuple(words[i:i + 3]) for i in range(len(words) - 2)}


def semantic_score(resume_text: str, job_description: str) -> int:
    """Trigram overlap, normalized by the smaller trigram set.

    A cheap lexical proxy for semantic similarity, not an embedding model.
    """
    resume_grams = _trigrams(resume_text)
    jd_grams = _trigrams(job_description)
    if not resume_grams or not jd_grams:
        return 0
    shared = len(resume_grams & jd_grams)
    return clamp_score(shared / min(len(resume_grams), len(jd_grams)) * 100)


def format_score(resume_text: str) -> int:
    """Structural heuristic: sections present, bullet usage and length."""
    lower = resume_text.lower()
    score = FORMAT_BASE

    score += SECTION_BONUS * sum(1 for section in EXPECTED_SECTIONS if section in lower)

    bullet_count = sum(1 for ch in resume_text if ch in BULLET_MARKERS)
    if bullet_count > 10:
        score += 25
    elif bullet_count > 5:
        score += 10

    word_count = len(resume_text.split())
    if 300 < word_count < 800:
        score += 10
    elif 800 <= word_count <= 1200:
        score += 5
    elif word_count > 1200:
        score -= 10

    return clamp_score(score)


def impact_score(resume_text: str) -> int:
    """Reward quantified, action-oriented achievement statements."""
    lower = resume_text.lower()
    score = IMPACT_BASE

    numbers = len(_NUMBER_RE.findall(resume_text))
    score += min(NUMBER_POINTS_CAP, NUMBER_POINTS * numbers)
    score += ACTION_VERB_POINTS * sum(1 for verb in ACTION_VERBS if verb in lower)
    score += PERCENT_POINTS * len(_PERCENT_RE.findall(resume_text))
    score += CURRENCY_POINTS * len(_CURRENCY_RE.findall(resume_text))

    return clamp_score(score)


def compute_overall(keyword: int, semantic: int, format_: int, impact: int) -> int:
    """Weighted blend of the four sub-scores. Returns 0-100."""
    raw = (
        W_KEYWORD * keyword
        + W_SEMANTIC * semantic
        + W_FORMAT * format_
        + W_IMPACT * impact
    )
    return clamp_score(raw)


def score_resume(
    resume_text: str, job_description: str, match: KeywordMatch
) -> ScoreBreakdown:
    """Run all four sub-scores and blend them into a ScoreBreakdown."""
    keyword = keyword_score(match)
    semantic = semantic_score(resume_text, job_description)
    fmt = format_score(resume_text)
    impact = impact_score(resume_text)

    return ScoreBreakdown(
        overall=compute_overall(keyword, semantic, fmt, impact),
        keyword=keyword,
        semantic=semantic,
        format=fmt,
        impact=impact,
    )
