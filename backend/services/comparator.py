"""Progress tracking across a user's analyses: pairwise deltas and aggregates."""

import asyncio

import numpy as np

from models.responses import (
    Analysis,
    AnalysisStats,
    ComparisonResult,
    KeywordStats,
    ScoreDifferences,
    ScoreHistoryPoint,
)
from services.repository import BaseRepository
from services.scoring import round_half_up

HISTORY_POINTS = 10


def compare_analyses(first: Analysis, second: Analysis) -> ComparisonResult:
    """Deltas are ``second - first``; ``second`` is the later analysis. No clamping."""
    return ComparisonResult(
        first=first,
        second=second,
        differences=ScoreDifferences(
            score_change=second.scores.overall - first.scores.overall,
            keyword_improvement=second.keywords.matched_count - first.keywords.matched_count,
            format_improvement=second.scores.format - first.scores.format,
            impact_improvement=second.scores.impact - first.scores.impact,
        ),
    )


async def compare_by_id(
    repository: BaseRepository,
    first_id: str,
    second_id: str,
    user_id: str | None = None,
) -> ComparisonResult:
    """Resolve both analyses and compare them.

    Raises NotFoundError if either id cannot be resolved.
    """
    first, second = await asyncio.gather(
        repository.get(first_id, user_id),
        repository.get(second_id, user_id),
    )
    return compare_analyses(first, second)


def compute_stats(analyses: list[Analysis]) -> AnalysisStats:
    """Aggregate score statistics; ``analyses`` is expected newest first."""
    if not analyses:
        return AnalysisStats()

    scores = [a.scores.overall for a in analyses]
    history = [
        ScoreHistoryPoint(date=a.created_at.date().isoformat(), score=a.scores.overall)
        for a in analyses[:HISTORY_POINTS]
    ]
    history.reverse()

    matched_counts = [a.keywords.matched_count for a in analyses]
    missing_counts = [len(a.keywords.missing) for a in analyses]

    return AnalysisStats(
        total=len(analyses),
        average_score=round_half_up(float(np.mean(scores))),
        best_score=max(scores),
        worst_score=min(scores),
        score_history=history,
        keyword_stats=KeywordStats(
            average_matched=round_half_up(float(np.mean(matched_counts))),
            average_missing=round_half_up(float(np.mean(missing_counts))),
        ),
    )
