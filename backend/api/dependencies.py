"""Shared dependencies for API routes."""

from fastapi import Header

from config import settings
from models.responses import Analysis
from models.schemas.job_description import JobDescription
from models.schemas.resume_document import ResumeDocument
from services import recommendations
from services.repository import BaseRepository, create_repository

_analysis_repository: BaseRepository | None = None
_job_description_repository: BaseRepository | None = None
_resume_repository: BaseRepository | None = None


def get_user_id(x_user_id: str = Header(..., min_length=1, max_length=128)) -> str:
    """Opaque id of the caller, supplied by the upstream auth layer."""
    return x_user_id


def get_analysis_repository() -> BaseRepository:
    global _analysis_repository
    if _analysis_repository is None:
        _analysis_repository = create_repository(Analysis, "analysis", settings.storage_path)
    return _analysis_repository


def get_job_description_repository() -> BaseRepository:
    global _job_description_repository
    if _job_description_repository is None:
        _job_description_repository = create_repository(
            JobDescription, "job description", settings.job_descriptions_path
        )
    return _job_description_repository


def get_resume_repository() -> BaseRepository:
    global _resume_repository
    if _resume_repository is None:
        _resume_repository = create_repository(ResumeDocument, "resume", settings.resumes_path)
    return _resume_repository


def get_recommender() -> recommendations.BaseRecommender:
    return recommendations.get_recommender()
