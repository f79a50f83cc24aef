"""Keyword Matcher output: JD keywords partitioned against a resume."""

from pydantic import BaseModel


class KeywordMatch(BaseModel):
    """Full, uncapped result of matching JD keywords against resume text.

    ``matched`` and ``missing`` together hold every JD keyword exactly once,
    both in JD frequency-rank order. Display caps are applied later when the
    match is turned into a ``KeywordAnalysis``.
    """
    matched: list[str] = []
    missing: list[str] = []
    matched_count: int = 0
    total: int = 0

    @property
    def match_rate(self) -> float:
        if self.total == 0:
            return 0.0
        return self.matched_count / self.total
