"""Saved job descriptions with their extracted keyword sets."""

import logging
import uuid
from datetime import datetime, timezone

from models.schemas.job_description import JobDescription, JobDescriptionMetadata
from services import keyword_extractor
from services.repository import BaseRepository

logger = logging.getLogger(__name__)


def build_metadata(description: str) -> JobDescriptionMetadata:
    return JobDescriptionMetadata(
        word_count=len(description.split()),
        character_count=len(description),
        extracted_keywords=keyword_extractor.extract_keywords(
            description, keyword_extractor.MAX_JD_KEYWORDS
        ),
    )


async def save_job_description(
    repository: BaseRepository,
    user_id: str,
    title: str,
    description: str,
    company: str = "",
) -> JobDescription:
    now = datetime.now(timezone.utc)
    job = JobDescription(
        id=f"jd_{uuid.uuid4().hex}",
        user_id=user_id,
        title=title,
        company=company,
        description=description,
        created_at=now,
        updated_at=now,
        metadata=build_metadata(description),
    )
    return await repository.create(job)


async def get_job_description(
    repository: BaseRepository, jd_id: str, user_id: str
) -> JobDescription:
    return await repository.get(jd_id, user_id)


async def list_job_descriptions(
    repository: BaseRepository, user_id: str, limit: int = 20
) -> list[JobDescription]:
    """Active job descriptions, newest first."""
    jobs = await repository.list_by_owner(user_id)
    return [jd for jd in jobs if jd.is_active][:limit]


async def search_job_descriptions(
    repository: BaseRepository, user_id: str, term: str
) -> list[JobDescription]:
    """Active job descriptions whose title, company or text contains ``term``."""
    needle = term.lower()
    return [
        jd
        for jd in await list_job_descriptions(repository, user_id, limit=repository.limit)
        if needle in jd.title.lower()
        or needle in jd.company.lower()
        or needle in jd.description.lower()
    ]


async def update_job_description(
    repository: BaseRepository,
    jd_id: str,
    user_id: str,
    title: str | None = None,
    description: str | None = None,
    company: str | None = None,
    is_active: bool | None = None,
) -> JobDescription:
    """Apply the given changes; a new description refreshes the metadata.

    Setting ``is_active`` to False archives the record: it stays readable by
    id but drops out of listings and search.
    """
    changes: dict = {"updated_at": datetime.now(timezone.utc)}
    if title is not None:
        changes["title"] = title
    if company is not None:
        changes["company"] = company
    if is_active is not None:
        changes["is_active"] = is_active
    if description is not None:
        changes["description"] = description
        changes["metadata"] = build_metadata(description)
    return await repository.modify(jd_id, user_id, lambda job: job.model_copy(update=changes))


async def record_analysis(repository: BaseRepository, jd_id: str, user_id: str) -> JobDescription:
    """Count one more analysis run against a saved job description."""
    updated = await repository.modify(
        jd_id,
        user_id,
        lambda job: job.model_copy(update={"analyses_count": job.analyses_count + 1}),
    )
    logger.info("Job description %s used in %d analyses", jd_id, updated.analyses_count)
    return updated


async def delete_job_description(repository: BaseRepository, jd_id: str, user_id: str) -> None:
    await repository.delete(jd_id, user_id)
