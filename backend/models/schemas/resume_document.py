"""Stored resume records and the metadata derived from their text."""

from datetime import datetime

from pydantic import BaseModel


class ResumeMetadata(BaseModel):
    word_count: int = 0
    character_count: int = 0
    line_count: int = 0
    bullet_points: int = 0
    email: str | None = None
    phone: str | None = None


class ResumeDocument(BaseModel):
    id: str
    user_id: str
    file_name: str
    file_type: str = ""  # lowercased extension, e.g. ".pdf"
    file_size: int = 0  # bytes
    text: str
    uploaded_at: datetime
    updated_at: datetime
    is_active: bool = True
    analyses_count: int = 0
    last_analyzed: datetime | None = None
    metadata: ResumeMetadata = ResumeMetadata()
