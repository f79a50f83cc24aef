"""Saved job description records."""

from datetime import datetime

from pydantic import BaseModel


class JobDescriptionMetadata(BaseModel):
    word_count: int = 0
    character_count: int = 0
    extracted_keywords: list[str] = []  # keyword set capped at 30


class JobDescription(BaseModel):
    id: str
    user_id: str
    title: str
    company: str = ""
    description: str
    created_at: datetime
    updated_at: datetime
    is_active: bool = True
    analyses_count: int = 0
    metadata: JobDescriptionMetadata = JobDescriptionMetadata()
