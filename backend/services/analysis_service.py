"""Orchestrator: resume vs. job description ATS analysis.

Pipeline:
1. Keyword extraction from the JD (and the resume, for reference)
2. Keyword matching against the resume text
3. Sub-scores: keyword, semantic (trigram overlap), format, impact
4. Weighted overall score
5. Recommendations (rules, optionally enriched by Gemini)
6. Persist the result as an Analysis owned by the requesting user
"""

import logging
import uuid
from datetime import datetime, timezone

from models.responses import (
    Analysis,
    AnalysisListResponse,
    AnalysisStats,
    KeywordAnalysis,
    Recommendations,
    ScoreBreakdown,
    UserFeedback,
)
from models.schemas.keyword_match import KeywordMatch
from services import keyword_extractor
from services.comparator import compute_stats
from services.recommendations import BaseRecommender, RuleBasedRecommender
from services.repository import BaseRepository
from services.scoring import score_resume

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10


def build_keyword_analysis(
    match: KeywordMatch, resume_text: str, resume_keywords: list[str]
) -> KeywordAnalysis:
    """Apply display caps to a full keyword match."""
    return KeywordAnalysis(
        matched=match.matched[: keyword_extractor.MAX_MATCHED_DISPLAY],
        missing=match.missing[: keyword_extractor.MAX_MISSING_DISPLAY],
        total=match.total,
        matched_count=match.matched_count,
        keyword_density=keyword_extractor.compute_keyword_density(
            resume_text, match.matched + match.missing
        ),
        resume_keywords=resume_keywords,
    )


def evaluate(
    resume_text: str, job_description: str
) -> tuple[ScoreBreakdown, KeywordMatch, KeywordAnalysis]:
    """Deterministic part of the analysis. Never raises for str inputs."""
    jd_keywords = keyword_extractor.extract_keywords(
        job_description, keyword_extractor.MAX_JD_KEYWORDS
    )
    resume_keywords = keyword_extractor.extract_keywords(
        resume_text, keyword_extractor.MAX_DOCUMENT_KEYWORDS
    )
    match = keyword_extractor.match_keywords(jd_keywords, resume_text)
    if match.total == 0:
        logger.info("Job description yielded no keywords; keyword score defaults to 0")

    scores = score_resume(resume_text, job_description, match)
    return scores, match, build_keyword_analysis(match, resume_text, resume_keywords)


async def analyze(
    resume_text: str,
    job_description: str,
    recommender: BaseRecommender | None = None,
) -> tuple[ScoreBreakdown, KeywordAnalysis, Recommendations]:
    """Score the resume and generate recommendations."""
    recommender = recommender or RuleBasedRecommender()
    scores, match, keywords = evaluate(resume_text, job_description)
    recommendations = await recommender.generate(resume_text, job_description, scores, match)
    return scores, keywords, recommendations


async def create_analysis(
    repository: BaseRepository,
    user_id: str,
    resume_text: str,
    job_description: str,
    resume_id: str = "",
    job_description_id: str = "",
    recommender: BaseRecommender | None = None,
) -> Analysis:
    """Run the analysis and store it under a fresh id."""
    scores, keywords, recommendations = await analyze(
        resume_text, job_description, recommender
    )
    analysis = Analysis(
        id=f"analysis_{uuid.uuid4().hex}",
        user_id=user_id,
        resume_id=resume_id,
        job_description_id=job_description_id,
        job_description=job_description,
        scores=scores,
        keywords=keywords,
        recommendations=recommendations,
        created_at=datetime.now(timezone.utc),
    )
    await repository.create(analysis)
    logger.info(
        "Analysis %s completed: overall=%d (%s recommendations)",
        analysis.id, scores.overall, recommendations.source,
    )
    return analysis


async def get_analysis(repository: BaseRepository, analysis_id: str, user_id: str) -> Analysis:
    return await repository.get(analysis_id, user_id)


async def list_analyses(
    repository: BaseRepository, user_id: str, limit: int = DEFAULT_PAGE_SIZE
) -> AnalysisListResponse:
    """Newest-first page of the user's analyses."""
    analyses = await repository.list_by_owner(user_id, limit + 1)
    return AnalysisListResponse(
        analyses=analyses[:limit],
        has_more=len(analyses) > limit,
    )


async def delete_analysis(repository: BaseRepository, analysis_id: str, user_id: str) -> None:
    await repository.delete(analysis_id, user_id)


async def submit_feedback(
    repository: BaseRepository,
    analysis_id: str,
    user_id: str,
    rating: int,
    comment: str = "",
    helpful: bool = True,
) -> Analysis:
    """Attach (or replace) the user's feedback; the only mutation an Analysis allows."""
    feedback = UserFeedback(
        rating=rating,
        comment=comment,
        helpful=helpful,
        submitted_at=datetime.now(timezone.utc),
    )
    return await repository.modify(
        analysis_id,
        user_id,
        lambda analysis: analysis.model_copy(update={"user_feedback": feedback}),
    )


async def get_stats(repository: BaseRepository, user_id: str) -> AnalysisStats:
    return compute_stats(await repository.list_by_owner(user_id))
