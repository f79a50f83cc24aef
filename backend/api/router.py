from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, UploadFile
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import (
    get_analysis_repository,
    get_job_description_repository,
    get_recommender,
    get_resume_repository,
    get_user_id,
)
from config import settings
from models.requests import (
    MAX_JD_LENGTH,
    MIN_JD_LENGTH,
    FeedbackRequest,
    JobDescriptionRequest,
    JobDescriptionUpdateRequest,
    QuickAnalyzeRequest,
)
from models.responses import (
    Analysis,
    AnalysisListResponse,
    AnalysisStats,
    ComparisonResult,
    ParsedResumeResponse,
)
from models.schemas.job_description import JobDescription
from models.schemas.resume_document import ResumeDocument
from services import analysis_service, document_parser, gemini_client, job_descriptions, resumes
from services.comparator import compare_by_id
from services.recommendations import BaseRecommender
from services.repository import BaseRepository

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


@router.get("/health")
async def health():
    return {
        "status": "ok",
        "gemini_configured": gemini_client.is_configured(),
        "storage_backend": settings.storage_backend,
    }


async def _read_resume_upload(resume_file: UploadFile) -> tuple[str, str, int]:
    """Validate an upload and return (file name, extracted text, size in bytes)."""
    filename = resume_file.filename or ""
    if not filename.lower().endswith(document_parser.SUPPORTED_EXTENSIONS):
        raise HTTPException(status_code=400, detail="Only PDF, DOCX or TXT files are accepted")

    # Read and validate size
    content = await resume_file.read()
    max_bytes = settings.max_upload_size_mb * 1024 * 1024
    if len(content) > max_bytes:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Max size: {settings.max_upload_size_mb}MB",
        )

    try:
        text = document_parser.extract_text(content, filename)
    except document_parser.DocumentParseError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not text.strip():
        raise HTTPException(status_code=400, detail="No text could be extracted from the file")
    return filename, text, len(content)


async def _check_links(
    user_id: str,
    resume_id: str,
    jd_id: str,
    resume_repository: BaseRepository,
    jd_repository: BaseRepository,
) -> None:
    """Referenced resume and job description must exist and belong to the caller."""
    if resume_id:
        await resumes.get_resume(resume_repository, resume_id, user_id)
    if jd_id:
        await job_descriptions.get_job_description(jd_repository, jd_id, user_id)


async def _record_links(
    analysis: Analysis,
    resume_repository: BaseRepository,
    jd_repository: BaseRepository,
) -> None:
    if analysis.resume_id:
        await resumes.record_analysis(resume_repository, analysis.resume_id, analysis.user_id)
    if analysis.job_description_id:
        await job_descriptions.record_analysis(
            jd_repository, analysis.job_description_id, analysis.user_id
        )


@router.post("/resumes/parse", response_model=ParsedResumeResponse)
@limiter.limit(settings.rate_limit)
async def parse_resume(request: Request, resume_file: UploadFile = File(...)):
    filename, text, _ = await _read_resume_upload(resume_file)
    return ParsedResumeResponse(
        file_name=filename,
        text=text,
        bullets=document_parser.extract_bullets(text),
        metadata=document_parser.extract_metadata(text),
    )


@router.post("/resumes", response_model=ResumeDocument)
@limiter.limit(settings.rate_limit)
async def upload_resume(
    request: Request,
    resume_file: UploadFile = File(...),
    user_id: str = Depends(get_user_id),
    repository: BaseRepository = Depends(get_resume_repository),
):
    filename, text, size = await _read_resume_upload(resume_file)
    return await resumes.save_resume(repository, user_id, filename, text, file_size=size)


@router.get("/resumes", response_model=list[ResumeDocument])
async def list_resumes(
    limit: int = Query(resumes.DEFAULT_RESUME_LIMIT, ge=1, le=50),
    user_id: str = Depends(get_user_id),
    repository: BaseRepository = Depends(get_resume_repository),
):
    return await resumes.list_resumes(repository, user_id, limit)


@router.get("/resumes/latest", response_model=ResumeDocument)
async def latest_resume(
    user_id: str = Depends(get_user_id),
    repository: BaseRepository = Depends(get_resume_repository),
):
    resume = await resumes.get_latest_resume(repository, user_id)
    if resume is None:
        raise HTTPException(status_code=404, detail="No resumes uploaded yet")
    return resume


@router.get("/resumes/{resume_id}", response_model=ResumeDocument)
async def get_resume(
    resume_id: str,
    user_id: str = Depends(get_user_id),
    repository: BaseRepository = Depends(get_resume_repository),
):
    return await resumes.get_resume(repository, resume_id, user_id)


@router.delete("/resumes/{resume_id}")
async def delete_resume(
    resume_id: str,
    user_id: str = Depends(get_user_id),
    repository: BaseRepository = Depends(get_resume_repository),
):
    await resumes.delete_resume(repository, resume_id, user_id)
    return {"success": True}


@router.post("/analyze", response_model=Analysis)
@limiter.limit(settings.rate_limit)
async def analyze(
    request: Request,
    resume_file: UploadFile = File(...),
    job_description: str = Form(...),
    job_description_id: str = Form(""),
    user_id: str = Depends(get_user_id),
    repository: BaseRepository = Depends(get_analysis_repository),
    resume_repository: BaseRepository = Depends(get_resume_repository),
    jd_repository: BaseRepository = Depends(get_job_description_repository),
    recommender: BaseRecommender = Depends(get_recommender),
):
    if not MIN_JD_LENGTH <= len(job_description) <= MAX_JD_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Job description must be {MIN_JD_LENGTH}-{MAX_JD_LENGTH} characters",
        )

    filename, resume_text, size = await _read_resume_upload(resume_file)
    await _check_links(user_id, "", job_description_id, resume_repository, jd_repository)

    # The upload is kept so later analyses can refer to it
    resume = await resumes.save_resume(
        resume_repository, user_id, filename, resume_text, file_size=size
    )
    analysis = await analysis_service.create_analysis(
        repository,
        user_id,
        resume_text,
        job_description,
        resume_id=resume.id,
        job_description_id=job_description_id,
        recommender=recommender,
    )
    await _record_links(analysis, resume_repository, jd_repository)
    return analysis


@router.post("/analyze/quick", response_model=Analysis)
@limiter.limit(settings.rate_limit)
async def analyze_quick(
    request: Request,
    body: QuickAnalyzeRequest,
    user_id: str = Depends(get_user_id),
    repository: BaseRepository = Depends(get_analysis_repository),
    resume_repository: BaseRepository = Depends(get_resume_repository),
    jd_repository: BaseRepository = Depends(get_job_description_repository),
    recommender: BaseRecommender = Depends(get_recommender),
):
    if not body.resume_text.strip():
        raise HTTPException(status_code=400, detail="Resume text is empty")
    await _check_links(
        user_id, body.resume_id, body.job_description_id, resume_repository, jd_repository
    )

    analysis = await analysis_service.create_analysis(
        repository,
        user_id,
        body.resume_text,
        body.job_description,
        resume_id=body.resume_id,
        job_description_id=body.job_description_id,
        recommender=recommender,
    )
    await _record_links(analysis, resume_repository, jd_repository)
    return analysis


@router.get("/analyses", response_model=AnalysisListResponse)
async def list_analyses(
    limit: int = Query(analysis_service.DEFAULT_PAGE_SIZE, ge=1, le=50),
    user_id: str = Depends(get_user_id),
    repository: BaseRepository = Depends(get_analysis_repository),
):
    return await analysis_service.list_analyses(repository, user_id, limit)


@router.get("/analyses/stats", response_model=AnalysisStats)
async def analysis_stats(
    user_id: str = Depends(get_user_id),
    repository: BaseRepository = Depends(get_analysis_repository),
):
    return await analysis_service.get_stats(repository, user_id)


@router.get("/analyses/compare", response_model=ComparisonResult)
async def compare_analyses(
    first: str = Query(...),
    second: str = Query(...),
    user_id: str = Depends(get_user_id),
    repository: BaseRepository = Depends(get_analysis_repository),
):
    return await compare_by_id(repository, first, second, user_id)


@router.get("/analyses/{analysis_id}", response_model=Analysis)
async def get_analysis(
    analysis_id: str,
    user_id: str = Depends(get_user_id),
    repository: BaseRepository = Depends(get_analysis_repository),
):
    return await analysis_service.get_analysis(repository, analysis_id, user_id)


@router.delete("/analyses/{analysis_id}")
async def delete_analysis(
    analysis_id: str,
    user_id: str = Depends(get_user_id),
    repository: BaseRepository = Depends(get_analysis_repository),
):
    await analysis_service.delete_analysis(repository, analysis_id, user_id)
    return {"success": True}


@router.put("/analyses/{analysis_id}/feedback", response_model=Analysis)
async def submit_feedback(
    analysis_id: str,
    body: FeedbackRequest,
    user_id: str = Depends(get_user_id),
    repository: BaseRepository = Depends(get_analysis_repository),
):
    return await analysis_service.submit_feedback(
        repository,
        analysis_id,
        user_id,
        rating=body.rating,
        comment=body.comment,
        helpful=body.helpful,
    )


@router.post("/job-descriptions", response_model=JobDescription)
async def save_job_description(
    body: JobDescriptionRequest,
    user_id: str = Depends(get_user_id),
    repository: BaseRepository = Depends(get_job_description_repository),
):
    return await job_descriptions.save_job_description(
        repository, user_id, body.title, body.description, body.company
    )


@router.get("/job-descriptions", response_model=list[JobDescription])
async def list_job_descriptions(
    limit: int = Query(20, ge=1, le=50),
    user_id: str = Depends(get_user_id),
    repository: BaseRepository = Depends(get_job_description_repository),
):
    return await job_descriptions.list_job_descriptions(repository, user_id, limit)


@router.get("/job-descriptions/search", response_model=list[JobDescription])
async def search_job_descriptions(
    q: str = Query(..., min_length=1, max_length=200),
    user_id: str = Depends(get_user_id),
    repository: BaseRepository = Depends(get_job_description_repository),
):
    return await job_descriptions.search_job_descriptions(repository, user_id, q)


@router.get("/job-descriptions/{jd_id}", response_model=JobDescription)
async def get_job_description(
    jd_id: str,
    user_id: str = Depends(get_user_id),
    repository: BaseRepository = Depends(get_job_description_repository),
):
    return await job_descriptions.get_job_description(repository, jd_id, user_id)


@router.put("/job-descriptions/{jd_id}", response_model=JobDescription)
async def update_job_description(
    jd_id: str,
    body: JobDescriptionUpdateRequest,
    user_id: str = Depends(get_user_id),
    repository: BaseRepository = Depends(get_job_description_repository),
):
    return await job_descriptions.update_job_description(
        repository,
        jd_id,
        user_id,
        title=body.title,
        description=body.description,
        company=body.company,
        is_active=body.is_active,
    )


@router.delete("/job-descriptions/{jd_id}")
async def delete_job_description(
    jd_id: str,
    user_id: str = Depends(get_user_id),
    repository: BaseRepository = Depends(get_job_description_repository),
):
    await job_descriptions.delete_job_description(repository, jd_id, user_id)
    return {"success": True}
