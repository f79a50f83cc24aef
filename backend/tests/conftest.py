"""Shared test configuration, pytest markers and fixtures."""

import pytest

from api.router import limiter
from config import settings
from models.responses import Analysis
from models.schemas.job_description import JobDescription
from models.schemas.resume_document import ResumeDocument
from services.repository import InMemoryRepository


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: exercises the HTTP layer end to end"
    )


@pytest.fixture(autouse=True)
def _offline(monkeypatch):
    """No rate limiting and no Gemini calls unless a test opts in."""
    monkeypatch.setattr(limiter, "enabled", False)
    monkeypatch.setattr(settings, "gemini_api_key", "")


@pytest.fixture
def analysis_repo():
    return InMemoryRepository(Analysis, "analysis")


@pytest.fixture
def jd_repo():
    return InMemoryRepository(JobDescription, "job description")


@pytest.fixture
def resume_repo():
    return InMemoryRepository(ResumeDocument, "resume")
