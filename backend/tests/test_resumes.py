import pytest

from services.repository import NotFoundError
from services.resumes import (
    delete_resume,
    get_latest_resume,
    get_resume,
    list_resumes,
    record_analysis,
    save_resume,
)

RESUME_TEXT = """Jane Doe
jane.doe@email.com
Experience
- Built data pipelines in Python
- Cut batch runtime by 40%"""


@pytest.mark.asyncio
async def test_save_resume(resume_repo):
    saved = await save_resume(resume_repo, "u", "Jane_Doe.PDF", RESUME_TEXT, file_size=2048)

    assert saved.id.startswith("resume_")
    assert saved.file_type == ".pdf"
    assert saved.file_size == 2048
    assert saved.text == RESUME_TEXT
    assert saved.analyses_count == 0
    assert saved.last_analyzed is None
    assert saved.metadata.email == "jane.doe@email.com"
    assert saved.metadata.bullet_points == 2
    assert saved.metadata.line_count == 5


@pytest.mark.asyncio
async def test_get_resume_is_owner_scoped(resume_repo):
    saved = await save_resume(resume_repo, "u", "cv.txt", RESUME_TEXT)

    assert (await get_resume(resume_repo, saved.id, "u")).id == saved.id
    with pytest.raises(NotFoundError):
        await get_resume(resume_repo, saved.id, "intruder")


@pytest.mark.asyncio
async def test_list_and_latest(resume_repo):
    assert await get_latest_resume(resume_repo, "u") is None

    first = await save_resume(resume_repo, "u", "v1.txt", RESUME_TEXT)
    second = await save_resume(resume_repo, "u", "v2.txt", RESUME_TEXT)
    await save_resume(resume_repo, "other", "theirs.txt", RESUME_TEXT)

    assert [r.id for r in await list_resumes(resume_repo, "u")] == [second.id, first.id]
    assert [r.id for r in await list_resumes(resume_repo, "u", limit=1)] == [second.id]
    assert (await get_latest_resume(resume_repo, "u")).id == second.id


@pytest.mark.asyncio
async def test_list_skips_inactive(resume_repo):
    saved = await save_resume(resume_repo, "u", "cv.txt", RESUME_TEXT)
    await resume_repo.update(saved.model_copy(update={"is_active": False}))

    assert await list_resumes(resume_repo, "u") == []
    assert await get_latest_resume(resume_repo, "u") is None


@pytest.mark.asyncio
async def test_record_analysis(resume_repo):
    saved = await save_resume(resume_repo, "u", "cv.txt", RESUME_TEXT)

    await record_analysis(resume_repo, saved.id, "u")
    updated = await record_analysis(resume_repo, saved.id, "u")

    assert updated.analyses_count == 2
    assert updated.last_analyzed is not None
    assert (await get_resume(resume_repo, saved.id, "u")).analyses_count == 2


@pytest.mark.asyncio
async def test_delete(resume_repo):
    saved = await save_resume(resume_repo, "u", "cv.txt", RESUME_TEXT)
    with pytest.raises(NotFoundError):
        await delete_resume(resume_repo, saved.id, "intruder")

    await delete_resume(resume_repo, saved.id, "u")
    with pytest.raises(NotFoundError):
        await get_resume(resume_repo, saved.id, "u")
