"""Keyword extraction and matching for resume-JD analysis.

Extraction is a plain frequency ranking over normalized tokens: no stemming,
no synonyms, no fuzzy matching. Matching is a case-insensitive substring test
against the resume text. Both are deterministic so that identical inputs
always produce identical keyword sets and scores.
"""

import logging
import re
from collections import Counter

from models.schemas.keyword_match import KeywordMatch

logger = logging.getLogger(__name__)

# Keyword set caps
MAX_DOCUMENT_KEYWORDS = 50
MAX_JD_KEYWORDS = 30

# Display caps applied when building a KeywordAnalysis
MAX_MATCHED_DISPLAY = 15
MAX_MISSING_DISPLAY = 10

MIN_KEYWORD_LENGTH = 4

STOP_WORDS: frozenset[str] = frozenset({
    "the", "a", "an", "and", "or", "but",
    "in", "on", "at", "to", "for", "of", "with", "by",
    "this", "that", "from", "your", "will",
})

# Anything that is not a letter or digit, underscore included
_PUNCTUATION_RE = re.compile(r"[\W_]")
# Integers and exponent forms ("2024", "1e6") count as numbers
_NUMERIC_RE = re.compile(r"[0-9]+(?:e[0-9]+)?")


def _tokenize(text: str) -> list[str]:
    return _PUNCTUATION_RE.sub(" ", text.lower()).split()


def _is_keyword(token: str) -> bool:
    if len(token) < MIN_KEYWORD_LENGTH:
        return False
    if token in STOP_WORDS:
        return False
    if token.isdecimal():
        return False
    return _NUMERIC_RE.fullmatch(token) is None


def extract_keywords(text: str, max_count: int = MAX_DOCUMENT_KEYWORDS) -> list[str]:
    """Return the ``max_count`` most frequent keywords in ``text``.

    Ties keep first-occurrence order: ``Counter`` remembers insertion order
    and ``most_common`` sorts stably.
    """
    if max_count <= 0:
        return []
    counts = Counter(tok for tok in _tokenize(text) if _is_keyword(tok))
    return [word for word, _ in counts.most_common(max_count)]


def match_keywords(job_keywords: list[str], resume_text: str) -> KeywordMatch:
    """Partition JD keywords into those contained in the resume and the rest.

    Containment is a raw substring check on the lowercased resume, so "team"
    also matches inside "teammate".
    """
    resume_lower = resume_text.lower()

    matched: list[str] = []
    missing: list[str] = []
    for kw in job_keywords:
        if kw in resume_lower:
            matched.append(kw)
        else:
            missing.append(kw)

    return KeywordMatch(
        matched=matched,
        missing=missing,
        matched_count=len(matched),
        total=len(job_keywords),
    )


def compute_keyword_density(
    resume_text: str, keywords: list[str]
) -> dict[str, float]:
    """Compute keyword density (frequency / total words) for each keyword.

    Returns dict of keyword -> density percentage.
    ATS optimal range: 1-3% per primary keyword.
    """
    words = _tokenize(resume_text)
    total_words = len(words)
    if total_words == 0:
        return {}

    word_counts = Counter(words)
    return {
        kw: round((word_counts.get(kw, 0) / total_words) * 100, 2)
        for kw in keywords
    }
