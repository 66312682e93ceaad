"""
Virtual Interviewer: scripted, voice-driven mock interviews with rule-based scoring.

Asks role-specific questions, captures spoken (or typed) answers, scores them
against the role's skills and asks one follow-up per missing skill.
"""

__version__ = "1.0.0"

# Main entry points
from .interview.controller import SessionController
from .interview.catalog import JobCatalog
from .interview.evaluator import evaluate
from .interview.models import Session, Step, JobTemplate

__all__ = ["SessionController", "JobCatalog", "evaluate", "Session", "Step", "JobTemplate"]
