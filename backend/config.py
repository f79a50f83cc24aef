import os
from pydantic_settings import BaseSettings


def _parse_cors_origins() -> list[str] | None:
    """Parse CORS_ORIGINS env var as comma-separated string or JSON list."""
    raw = os.environ.get("CORS_ORIGINS")
    if not raw:
        return None
    if raw.startswith("["):
        import json
        return json.loads(raw)
    return [o.strip() for o in raw.split(",") if o.strip()]


class Settings(BaseSettings):
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    max_upload_size_mb: int = 5
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]
    rate_limit: str = "10/minute"
    debug: bool = False

    # Recommendation enrichment (Gemini); rules are used whenever this is off or fails
    enrichment_enabled: bool = True
    enrichment_timeout_seconds: float = 15.0

    # Persistence
    storage_backend: str = "memory"  # "memory" | "json"
    storage_path: str = "data/analyses.json"
    job_descriptions_path: str = "data/job_descriptions.json"
    resumes_path: str = "data/resumes.json"
    record_limit: int = 50  # newest records kept per store

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


_cors_override = _parse_cors_origins()
settings = Settings(**{"cors_origins": _cors_override} if _cors_override else {})
