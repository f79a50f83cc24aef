from datetime import datetime

from pydantic import BaseModel

from models.schemas.resume_document import ResumeMetadata


class ScoreBreakdown(BaseModel):
    overall: int = 0
    keyword: int = 0
    semantic: int = 0
    format: int = 0
    impact: int = 0


class KeywordAnalysis(BaseModel):
    matched: list[str] = []  # display-capped, JD rank order
    missing: list[str] = []  # display-capped, JD rank order
    total: int = 0
    matched_count: int = 0  # before display capping
    keyword_density: dict[str, float] = {}
    resume_keywords: list[str] = []


class Recommendations(BaseModel):
    summary: str = ""
    improvements: list[str] = []
    bullet_rewrites: list[str] = []
    missing_skills: list[str] = []
    tips: list[str] = []
    raw: str | None = None
    source: str = "rules"  # "rules" | "gemini"


class UserFeedback(BaseModel):
    rating: int
    comment: str = ""
    helpful: bool = True
    submitted_at: datetime


class Analysis(BaseModel):
    id: str
    user_id: str
    resume_id: str = ""  # stored ResumeDocument, if any
    job_description_id: str = ""  # saved JobDescription, if any
    job_description: str
    scores: ScoreBreakdown = ScoreBreakdown()
    keywords: KeywordAnalysis = KeywordAnalysis()
    recommendations: Recommendations = Recommendations()
    created_at: datetime
    status: str = "completed"
    user_feedback: UserFeedback | None = None


class AnalysisListResponse(BaseModel):
    analyses: list[Analysis] = []
    has_more: bool = False


class ScoreDifferences(BaseModel):
    score_change: int = 0
    keyword_improvement: int = 0
    format_improvement: int = 0
    impact_improvement: int = 0


class ComparisonResult(BaseModel):
    first: Analysis
    second: Analysis
    differences: ScoreDifferences


class ScoreHistoryPoint(BaseModel):
    date: str
    score: int


class KeywordStats(BaseModel):
    average_matched: int = 0
    average_missing: int = 0


class AnalysisStats(BaseModel):
    total: int = 0
    average_score: int = 0
    best_score: int = 0
    worst_score: int = 100
    score_history: list[ScoreHistoryPoint] = []
    keyword_stats: KeywordStats = KeywordStats()


class ParsedResumeResponse(BaseModel):
    file_name: str
    text: str
    bullets: list[str] = []
    metadata: ResumeMetadata = ResumeMetadata()
