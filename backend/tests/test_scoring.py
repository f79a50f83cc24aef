import pytest

from models.schemas.keyword_match import KeywordMatch
from services.scoring import (
    compute_overall,
    format_score,
    impact_score,
    keyword_score,
    round_half_up,
    score_resume,
    semantic_score,
)


def test_round_half_up():
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(12.5) == 13
    assert round_half_up(1.49) == 1


# --- Keyword score ---

def test_keyword_score():
    assert keyword_score(KeywordMatch(matched_count=3, total=4)) == 75
    assert keyword_score(KeywordMatch(matched_count=1, total=8)) == 13


def test_keyword_score_zero_total():
    assert keyword_score(KeywordMatch(matched_count=0, total=0)) == 0


# --- Semantic score ---

def test_semantic_score_identical_texts():
    text = "Senior Python developer with Django experience"
    assert semantic_score(text, text) == 100


def test_semantic_score_partial_overlap():
    resume = "python developer with django skills"
    jd = "Senior Python developer with Django experience"
    # 2 shared trigrams out of min(3, 4)
    assert semantic_score(resume, jd) == 67


def test_semantic_score_no_trigrams():
    assert semantic_score("two words", "a much longer job description text") == 0
    assert semantic_score("", "") == 0


def test_semantic_score_no_overlap():
    assert semantic_score("alpha beta gamma delta", "one two three four") == 0


# --- Format score ---

def test_format_score_base():
    assert format_score("") == 70


def test_format_score_sections():
    assert format_score("Summary Experience Education Skills Projects") == 95


def test_format_score_bullets():
    assert format_score("- " * 6) == 80
    assert format_score("• " * 11) == 95


@pytest.mark.parametrize(
    "word_count,expected",
    [(300, 70), (301, 80), (799, 80), (800, 75), (1200, 75), (1201, 60)],
)
def test_format_score_word_count(word_count, expected):
    assert format_score("word " * word_count) == expected


def test_format_score_clamped():
    text = "Summary Experience Education Skills Projects " + "* " * 20 + "word " * 400
    assert format_score(text) == 100


# --- Impact score ---

def test_impact_score_base():
    assert impact_score("") == 50
    assert impact_score("Responsible for the codebase") == 50


def test_impact_score_quantified():
    # 2 numbers (+4), "increased" (+2), one percentage (+3), one currency amount (+4)
    assert impact_score("Increased revenue by 25% and saved $1,200,000") == 63


def test_impact_score_number_contribution_capped():
    text = " ".join(str(n) for n in range(15))
    assert impact_score(text) == 70


def test_impact_score_currency_symbols():
    assert impact_score("£500") == 56
    assert impact_score("€500") == 56


def test_impact_score_upper_clamp():
    text = " ".join(f"achieved improved increased {n}% ${n}" for n in range(30))
    assert impact_score(text) == 100


# --- Aggregator ---

def test_compute_overall_weights():
    assert compute_overall(100, 100, 100, 100) == 100
    assert compute_overall(0, 0, 0, 0) == 0
    assert compute_overall(0, 0, 70, 50) == 18
    assert compute_overall(100, 0, 0, 0) == 40
    assert compute_overall(0, 100, 0, 0) == 30


def test_score_resume_bounds():
    resume = "Experience\n" + "- Increased sales by 40% ($2M)\n" * 30
    jd = "Sales manager with proven experience increasing revenue"
    scores = score_resume(resume, jd, KeywordMatch(matched_count=2, total=5))
    for value in scores.model_dump().values():
        assert 0 <= value <= 100
