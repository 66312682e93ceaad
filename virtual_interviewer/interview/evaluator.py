"""
Rule-based answer evaluator.

Scores an answer against a JobTemplate with three explainable components:
skill keywords (up to 50 points), stated years of experience (up to 30) and
answer length as a fluency proxy (up to 20). No state, no I/O.
"""
import math
import re
from typing import Optional

from .models import JobTemplate
from .schemas import EvaluationResult
from ..config import (
    SKILL_POINTS, POINTS_PER_YEAR, EXPERIENCE_CAP,
    FLUENCY_CAP, WORDS_PER_FLUENCY_POINT
)

YEARS_PATTERN = re.compile(r"([0-9]+)\s+years")
# Any longer run of significant digits already saturates the experience cap
MAX_YEAR_DIGITS = 3


def round_half_up(value: float) -> int:
    """Round .5 upwards; the scores are defined with this rule, not banker's rounding."""
    return int(math.floor(value + 0.5))


def _parse_years(years_text: Optional[str]) -> int:
    if not years_text:
        return 0
    digits = years_text.lstrip("0")
    if len(digits) > MAX_YEAR_DIGITS:
        return 10 ** MAX_YEAR_DIGITS
    return int(digits or "0")


def evaluate(answer_text: Optional[str], job: JobTemplate) -> EvaluationResult:
    """
    Score one answer.

    Args:
        answer_text: Captured answer; None is treated as an empty answer
        job: Template whose skills are matched

    Returns:
        EvaluationResult with total score, rationale and found/missing skills
    """
    text = (answer_text or "").lower()
    skills = list(job.skills)

    found = [s for s in skills if s in text]
    missing = [s for s in skills if s not in text]
    skill_score = round_half_up(len(found) / max(1, len(skills)) * SKILL_POINTS)

    match = YEARS_PATTERN.search(text)
    years_text = match.group(1) if match else None
    years = _parse_years(years_text)
    exp_score = min(EXPERIENCE_CAP, years * POINTS_PER_YEAR)

    words = len(text.split())
    # Outer clamp is redundant but kept to reproduce the reference scores exactly
    fluency_score = min(FLUENCY_CAP, round_half_up(min(FLUENCY_CAP, words / WORDS_PER_FLUENCY_POINT)))

    total = round_half_up(skill_score + exp_score + fluency_score)
    rationale = (
        f"Matched {len(found)}/{len(skills)} skills ({','.join(found) or 'none'}). "
        f"Words:{words}. Years:{years_text or 'n/a'}."
    )
    return EvaluationResult(
        score=total,
        rationale=rationale,
        found_skills=found,
        missing_skills=missing,
    )
