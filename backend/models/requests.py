from pydantic import BaseModel, Field

# Job description bounds enforced at the API boundary only
MIN_JD_LENGTH = 50
MAX_JD_LENGTH = 5000


class QuickAnalyzeRequest(BaseModel):
    resume_text: str = Field(..., min_length=1, max_length=50000, description="Plain text resume content")
    job_description: str = Field(
        ..., min_length=MIN_JD_LENGTH, max_length=MAX_JD_LENGTH, description="Job description text"
    )
    resume_id: str = Field("", max_length=200, description="Stored resume this text came from, if any")
    job_description_id: str = Field("", max_length=200, description="Saved job description, if any")


class FeedbackRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field("", max_length=2000)
    helpful: bool = True


class JobDescriptionRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=MIN_JD_LENGTH, max_length=MAX_JD_LENGTH)
    company: str = Field("", max_length=200)


class JobDescriptionUpdateRequest(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, min_length=MIN_JD_LENGTH, max_length=MAX_JD_LENGTH)
    company: str | None = Field(None, max_length=200)
    is_active: bool | None = None
