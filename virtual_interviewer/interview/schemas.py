"""
Structured schemas and state definitions for the interview system.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, Field, ValidationError, field_validator

from .models import JobTemplate


class InterviewPhase(str, Enum):
    """Phases of the interview state machine."""
    IDLE = "idle"
    GREETING = "greeting"
    ASKING_QUESTION = "asking_question"
    CAPTURING_ANSWER = "capturing_answer"
    EVALUATING = "evaluating"
    FOLLOWUP_DECISION = "followup_decision"
    ASKING_FOLLOWUP = "asking_followup"
    CAPTURING_FOLLOWUP_ANSWER = "capturing_followup_answer"
    EVALUATING_FOLLOWUP = "evaluating_followup"
    NEXT_QUESTION_OR_FINALIZE = "next_question_or_finalize"
    COMPLETED = "completed"
    STOPPED = "stopped"

    @property
    def is_terminal(self) -> bool:
        return self in (InterviewPhase.COMPLETED, InterviewPhase.STOPPED)


@dataclass(frozen=True)
class EvaluationResult:
    """Outcome of scoring one answer."""
    score: int
    rationale: str
    found_skills: List[str] = field(default_factory=list)
    missing_skills: List[str] = field(default_factory=list)


class JobTemplateSchema(BaseModel):
    """Validation schema for one entry of a job configuration mapping."""
    title: str = Field(min_length=1)
    skills: List[str] = Field(default_factory=list)
    questions: List[str] = Field(min_length=1)

    @field_validator("skills")
    @classmethod
    def normalize_skills(cls, value: List[str]) -> List[str]:
        skills = [s.strip().lower() for s in value]
        if any(not s for s in skills):
            raise ValueError("skills must be non-empty strings")
        return skills

    @field_validator("questions")
    @classmethod
    def check_questions(cls, value: List[str]) -> List[str]:
        if any(not q.strip() for q in value):
            raise ValueError("questions must be non-empty strings")
        return value

    def to_template(self) -> JobTemplate:
        return JobTemplate(
            title=self.title,
            skills=tuple(self.skills),
            questions=tuple(self.questions),
        )


def parse_job_templates(raw: Any) -> Dict[str, JobTemplate]:
    """
    Validate a raw job configuration mapping into JobTemplates.

    Args:
        raw: Mapping of role key -> {title, skills, questions}

    Returns:
        Dict of role key -> JobTemplate, in the mapping's order

    Raises:
        ValueError: If the mapping or any entry is malformed
    """
    if not isinstance(raw, dict) or not raw:
        raise ValueError("Job configuration must be a non-empty mapping of role key to template")

    templates: Dict[str, JobTemplate] = {}
    for key, entry in raw.items():
        if not isinstance(key, str) or not key.strip():
            raise ValueError(f"Invalid job key: {key!r}")
        try:
            templates[key] = JobTemplateSchema.model_validate(entry).to_template()
        except ValidationError as e:
            raise ValueError(f"Invalid job template '{key}': {e}")
    return templates
