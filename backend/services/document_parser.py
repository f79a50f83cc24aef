"""Resume text extraction from uploaded documents, plus text metadata."""

import io
import logging
import re
from pathlib import PurePath

import pdfplumber
from docx import Document

from models.schemas.resume_document import ResumeMetadata

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".pdf", ".docx", ".txt")

# Characters counted as bullet markers in resume text
BULLET_MARKERS = frozenset("•-*·")
# Lines treated as list items when extracting bullets
_LINE_MARKERS = "•-–—►▪*·○◆■●"

EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
PHONE_RE = re.compile(r"(?:\+\d{1,3}[-.]?)?\d{10,}")


class DocumentParseError(ValueError):
    """The upload could not be read as a document of its declared type."""


def extract_text_pdf(pdf_bytes: bytes) -> str:
    """Extract all text from a PDF file."""
    with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
        pages = [page.extract_text() or "" for page in pdf.pages]
    return "\n".join(pages).strip()


def extract_text_docx(docx_bytes: bytes) -> str:
    """Extract all text from a DOCX file."""
    doc = Document(io.BytesIO(docx_bytes))
    return "\n".join(p.text for p in doc.paragraphs).strip()


def extract_text(content: bytes, filename: str) -> str:
    """Extract plain text from a PDF, DOCX or UTF-8 text upload.

    Raises DocumentParseError for unsupported or unreadable files.
    """
    suffix = PurePath(filename).suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        raise DocumentParseError(f"Unsupported file type: {suffix or filename}")

    try:
        if suffix == ".pdf":
            return extract_text_pdf(content)
        if suffix == ".docx":
            return extract_text_docx(content)
        return content.decode("utf-8").strip()
    except Exception as e:
        logger.warning("Could not parse %s: %s", filename, e)
        raise DocumentParseError(f"Could not parse {suffix[1:].upper()} file") from e


def extract_bullets(text: str) -> list[str]:
    """Extract bullet-point lines from resume text."""
    bullets = []
    for line in text.split("\n"):
        stripped = line.strip()
        if not stripped:
            continue
        if stripped[0] in _LINE_MARKERS:
            cleaned = stripped.lstrip(_LINE_MARKERS + " ").strip()
            if cleaned:
                bullets.append(cleaned)
        # Numbered bullets: "1.", "12.", "1)", "12)"
        elif re.match(r"^\d{1,2}[.)]\s", stripped):
            cleaned = re.sub(r"^\d{1,2}[.)]\s*", "", stripped).strip()
            if cleaned:
                bullets.append(cleaned)
    return bullets


def extract_metadata(text: str) -> ResumeMetadata:
    """Word/line/bullet counts and first contact details found in the text."""
    email = EMAIL_RE.search(text)
    phone = PHONE_RE.search(text)
    return ResumeMetadata(
        word_count=len(text.split()),
        character_count=len(text),
        line_count=len(text.split("\n")) if text else 0,
        bullet_points=sum(1 for ch in text if ch in BULLET_MARKERS),
        email=email.group(0) if email else None,
        phone=phone.group(0) if phone else None,
    )
