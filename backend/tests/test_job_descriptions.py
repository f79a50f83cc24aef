import pytest

from services.job_descriptions import (
    build_metadata,
    delete_job_description,
    get_job_description,
    list_job_descriptions,
    record_analysis,
    save_job_description,
    search_job_descriptions,
    update_job_description,
)
from services.repository import NotFoundError

JD_TEXT = (
    "Data engineer to build Spark and Airflow pipelines. Spark experience required; "
    "Airflow, Python and Snowflake are a plus. Spark on AWS."
)


def test_build_metadata():
    meta = build_metadata(JD_TEXT)
    assert meta.word_count == len(JD_TEXT.split())
    assert meta.character_count == len(JD_TEXT)
    assert meta.extracted_keywords[:2] == ["spark", "airflow"]
    assert len(meta.extracted_keywords) <= 30


@pytest.mark.asyncio
async def test_save_and_list(jd_repo):
    saved = await save_job_description(jd_repo, "u", "Data Engineer", JD_TEXT, company="Acme")
    assert saved.id.startswith("jd_")
    assert saved.company == "Acme"
    assert saved.is_active is True

    listed = await list_job_descriptions(jd_repo, "u")
    assert [jd.id for jd in listed] == [saved.id]
    assert await list_job_descriptions(jd_repo, "someone-else") == []


@pytest.mark.asyncio
async def test_list_skips_inactive(jd_repo):
    saved = await save_job_description(jd_repo, "u", "Data Engineer", JD_TEXT)
    await jd_repo.update(saved.model_copy(update={"is_active": False}))
    assert await list_job_descriptions(jd_repo, "u") == []


@pytest.mark.asyncio
async def test_delete(jd_repo):
    saved = await save_job_description(jd_repo, "u", "Data Engineer", JD_TEXT)
    with pytest.raises(NotFoundError):
        await delete_job_description(jd_repo, saved.id, "intruder")
    await delete_job_description(jd_repo, saved.id, "u")
    assert await list_job_descriptions(jd_repo, "u") == []


@pytest.mark.asyncio
async def test_get_by_id_is_owner_scoped(jd_repo):
    saved = await save_job_description(jd_repo, "u", "Data Engineer", JD_TEXT)
    assert (await get_job_description(jd_repo, saved.id, "u")).title == "Data Engineer"
    with pytest.raises(NotFoundError):
        await get_job_description(jd_repo, saved.id, "intruder")


@pytest.mark.asyncio
async def test_update_refreshes_metadata(jd_repo):
    saved = await save_job_description(jd_repo, "u", "Data Engineer", JD_TEXT, company="Acme")
    new_text = "Platform engineer running Kubernetes and Terraform. Kubernetes on GCP, Terraform modules."

    updated = await update_job_description(
        jd_repo, saved.id, "u", title="Platform Engineer", description=new_text
    )

    assert updated.title == "Platform Engineer"
    assert updated.company == "Acme"
    assert updated.description == new_text
    assert updated.metadata.extracted_keywords[:2] == ["kubernetes", "terraform"]
    assert updated.updated_at >= saved.updated_at
    assert updated.created_at == saved.created_at


@pytest.mark.asyncio
async def test_deactivate_hides_from_listing_and_search(jd_repo):
    saved = await save_job_description(jd_repo, "u", "Data Engineer", JD_TEXT)

    await update_job_description(jd_repo, saved.id, "u", is_active=False)

    assert await list_job_descriptions(jd_repo, "u") == []
    assert await search_job_descriptions(jd_repo, "u", "spark") == []
    assert (await get_job_description(jd_repo, saved.id, "u")).is_active is False


@pytest.mark.asyncio
async def test_update_other_users_record_raises(jd_repo):
    saved = await save_job_description(jd_repo, "u", "Data Engineer", JD_TEXT)
    with pytest.raises(NotFoundError):
        await update_job_description(jd_repo, saved.id, "intruder", is_active=False)
    assert (await get_job_description(jd_repo, saved.id, "u")).is_active is True


@pytest.mark.asyncio
async def test_search_matches_title_company_and_text(jd_repo):
    spark = await save_job_description(jd_repo, "u", "Data Engineer", JD_TEXT, company="Acme")
    web = await save_job_description(
        jd_repo, "u", "Frontend Developer", "React and TypeScript single page applications " * 2,
        company="Globex",
    )
    await save_job_description(jd_repo, "other", "Data Engineer", JD_TEXT)

    assert [jd.id for jd in await search_job_descriptions(jd_repo, "u", "DATA")] == [spark.id]
    assert [jd.id for jd in await search_job_descriptions(jd_repo, "u", "globex")] == [web.id]
    assert [jd.id for jd in await search_job_descriptions(jd_repo, "u", "airflow")] == [spark.id]
    assert await search_job_descriptions(jd_repo, "u", "cobol") == []


@pytest.mark.asyncio
async def test_record_analysis_increments_count(jd_repo):
    saved = await save_job_description(jd_repo, "u", "Data Engineer", JD_TEXT)

    await record_analysis(jd_repo, saved.id, "u")
    updated = await record_analysis(jd_repo, saved.id, "u")

    assert updated.analyses_count == 2
    assert (await get_job_description(jd_repo, saved.id, "u")).analyses_count == 2
