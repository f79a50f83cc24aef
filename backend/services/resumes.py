"""Stored resumes: the text extracted from an upload plus its metadata."""

import logging
import uuid
from datetime import datetime, timezone
from pathlib import PurePath

from models.schemas.resume_document import ResumeDocument
from services import document_parser
from services.repository import BaseRepository

logger = logging.getLogger(__name__)

DEFAULT_RESUME_LIMIT = 10


async def save_resume(
    repository: BaseRepository,
    user_id: str,
    file_name: str,
    text: str,
    file_size: int = 0,
) -> ResumeDocument:
    now = datetime.now(timezone.utc)
    resume = ResumeDocument(
        id=f"resume_{uuid.uuid4().hex}",
        user_id=user_id,
        file_name=file_name,
        file_type=PurePath(file_name).suffix.lower(),
        file_size=file_size,
        text=text,
        uploaded_at=now,
        updated_at=now,
        metadata=document_parser.extract_metadata(text),
    )
    return await repository.create(resume)


async def get_resume(repository: BaseRepository, resume_id: str, user_id: str) -> ResumeDocument:
    return await repository.get(resume_id, user_id)


async def list_resumes(
    repository: BaseRepository, user_id: str, limit: int = DEFAULT_RESUME_LIMIT
) -> list[ResumeDocument]:
    """Active resumes, newest first."""
    resumes = await repository.list_by_owner(user_id)
    return [r for r in resumes if r.is_active][:limit]


async def get_latest_resume(repository: BaseRepository, user_id: str) -> ResumeDocument | None:
    latest = await list_resumes(repository, user_id, limit=1)
    return latest[0] if latest else None


async def record_analysis(
    repository: BaseRepository, resume_id: str, user_id: str
) -> ResumeDocument:
    """Count one more analysis of a stored resume and stamp its time."""

    def bump(resume: ResumeDocument) -> ResumeDocument:
        return resume.model_copy(
            update={
                "analyses_count": resume.analyses_count + 1,
                "last_analyzed": datetime.now(timezone.utc),
            }
        )

    return await repository.modify(resume_id, user_id, bump)


async def delete_resume(repository: BaseRepository, resume_id: str, user_id: str) -> None:
    await repository.delete(resume_id, user_id)
