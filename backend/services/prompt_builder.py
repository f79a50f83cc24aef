"""Prompt templates for Gemini API calls."""

# Prefix bounds keep the prompt small and the latency predictable
RESUME_PROMPT_CHARS = 3000
JD_PROMPT_CHARS = 1500


def build_recommendation_prompt(resume_text: str, job_description: str) -> str:
    """Ask for a structured critique that splits cleanly on blank lines.

    Each section starts with a heading containing the word the parser
    classifies on: "improvement", "bullet", "skill" or "tip".
    """
    resume_excerpt = resume_text[:RESUME_PROMPT_CHARS]
    jd_excerpt = job_description[:JD_PROMPT_CHARS]

    return f"""You are an expert ATS (Applicant Tracking System) and resume analyst.

Review this resume against the job description and write a structured critique.

RESUME:
---
{resume_excerpt}
---

JOB DESCRIPTION:
---
{jd_excerpt}
---

Respond in plain text (no markdown, no code fences) with exactly these five
sections, separated by a single blank line, in this order:

1. A 2-3 sentence summary paragraph of how well the resume fits the role.
2. A section headed "Key improvements:" followed by up to 5 lines, each one short imperative suggestion.
3. A section headed "Bullet rewrites:" followed by up to 3 lines, each one rewritten achievement statement with a metric.
4. A section headed "Missing skills:" followed by up to 5 lines, each one skill from the job description absent from the resume.
5. A section headed "ATS tips:" followed by up to 5 lines, each one formatting tip.

Start every list line with "- "."""
