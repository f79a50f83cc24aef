from datetime import datetime, timedelta, timezone

import pytest

from models.responses import Analysis, KeywordAnalysis, ScoreBreakdown
from services.comparator import compare_analyses, compare_by_id, compute_stats
from services.repository import NotFoundError

BASE_TIME = datetime(2026, 3, 1, tzinfo=timezone.utc)


def _analysis(
    analysis_id: str,
    overall: int,
    format_: int = 70,
    impact: int = 50,
    matched_count: int = 0,
    missing: list[str] | None = None,
    day: int = 0,
    user_id: str = "user-1",
) -> Analysis:
    return Analysis(
        id=analysis_id,
        user_id=user_id,
        job_description="Python engineer",
        scores=ScoreBreakdown(overall=overall, format=format_, impact=impact),
        keywords=KeywordAnalysis(matched_count=matched_count, missing=missing or []),
        created_at=BASE_TIME + timedelta(days=day),
    )


class TestCompareAnalyses:
    def test_differences_are_second_minus_first(self):
        first = _analysis("a1", overall=40, format_=75, impact=50, matched_count=3)
        second = _analysis("a2", overall=65, format_=90, impact=62, matched_count=7)

        result = compare_analyses(first, second)
        assert result.first == first
        assert result.second == second
        assert result.differences.score_change == 25
        assert result.differences.keyword_improvement == 4
        assert result.differences.format_improvement == 15
        assert result.differences.impact_improvement == 12

    def test_regression_is_negative(self):
        first = _analysis("a1", overall=80, format_=95)
        second = _analysis("a2", overall=60, format_=70)

        result = compare_analyses(first, second)
        assert result.differences.score_change == -20
        assert result.differences.format_improvement == -25

    def test_same_analysis(self):
        a = _analysis("a1", overall=50)
        assert compare_analyses(a, a).differences.score_change == 0


class TestCompareById:
    @pytest.mark.asyncio
    async def test_resolves_from_repository(self, analysis_repo):
        await analysis_repo.create(_analysis("a1", overall=30))
        await analysis_repo.create(_analysis("a2", overall=45))

        result = await compare_by_id(analysis_repo, "a1", "a2", "user-1")
        assert result.differences.score_change == 15

    @pytest.mark.asyncio
    async def test_missing_analysis_raises(self, analysis_repo):
        await analysis_repo.create(_analysis("a1", overall=30))

        with pytest.raises(NotFoundError):
            await compare_by_id(analysis_repo, "a1", "nope", "user-1")

    @pytest.mark.asyncio
    async def test_other_users_analysis_not_found(self, analysis_repo):
        await analysis_repo.create(_analysis("a1", overall=30))
        await analysis_repo.create(_analysis("a2", overall=45, user_id="user-2"))

        with pytest.raises(NotFoundError):
            await compare_by_id(analysis_repo, "a1", "a2", "user-1")


class TestComputeStats:
    def test_empty(self):
        stats = compute_stats([])
        assert stats.total == 0
        assert stats.average_score == 0
        assert stats.best_score == 0
        assert stats.worst_score == 100
        assert stats.score_history == []

    def test_aggregates(self):
        # newest first, as the repository returns them
        analyses = [
            _analysis("a3", overall=90, matched_count=9, missing=["x"], day=2),
            _analysis("a2", overall=61, matched_count=6, missing=["x", "y"], day=1),
            _analysis("a1", overall=40, matched_count=2, missing=["x", "y", "z"], day=0),
        ]
        stats = compute_stats(analyses)
        assert stats.total == 3
        assert stats.average_score == 64  # 63.67
        assert stats.best_score == 90
        assert stats.worst_score == 40
        assert stats.keyword_stats.average_matched == 6  # 5.67
        assert stats.keyword_stats.average_missing == 2
        assert [p.score for p in stats.score_history] == [40, 61, 90]
        assert stats.score_history[0].date == "2026-03-01"

    def test_history_limited_to_ten_most_recent(self):
        analyses = [_analysis(f"a{i}", overall=i, day=-i) for i in range(15)]
        stats = compute_stats(analyses)
        assert len(stats.score_history) == 10
        assert stats.score_history[-1].score == 0
        assert stats.score_history[0].score == 9
