"""Internal record contracts shared between services."""

from models.schemas.job_description import JobDescription, JobDescriptionMetadata
from models.schemas.keyword_match import KeywordMatch
from models.schemas.resume_document import ResumeDocument, ResumeMetadata

__all__ = [
    "JobDescription",
    "JobDescriptionMetadata",
    "KeywordMatch",
    "ResumeDocument",
    "ResumeMetadata",
]
