"""Interview system components.

This module contains the business logic for conducting a scripted mock
interview: the job catalog, the rule-based evaluator, answer capture and the
session controller state machine.
"""

# Data models
from .models import JobTemplate, Session, Step

# Structured schemas and state
from .schemas import InterviewPhase, EvaluationResult, JobTemplateSchema, parse_job_templates

# Catalog and scoring
from .catalog import JobCatalog, JobConfigurationError
from .evaluator import evaluate

# Collaborator contracts
from .capabilities import (
    SpeechOutput, SpeechInput, ManualInput, TranscriptEvent,
    ConsoleSpeechOutput, ConsoleManualInput
)

# Capture and orchestration
from .capture import AnswerCapture
from .controller import SessionController, finalize

# Event system
from .events import (
    InterviewEventBus, EventLogger, InterviewMetrics,
    EventType, InterviewEvent
)

# Presentation
from .presenter import ConsolePresenter
from .report import render_transcript, render_final_report

__all__ = [
    # Data models
    "JobTemplate", "Session", "Step",

    # Schemas and state
    "InterviewPhase", "EvaluationResult", "JobTemplateSchema", "parse_job_templates",

    # Catalog and scoring
    "JobCatalog", "JobConfigurationError", "evaluate",

    # Capabilities
    "SpeechOutput", "SpeechInput", "ManualInput", "TranscriptEvent",
    "ConsoleSpeechOutput", "ConsoleManualInput",

    # Orchestration
    "AnswerCapture", "SessionController", "finalize",

    # Events
    "InterviewEventBus", "EventLogger", "InterviewMetrics",
    "EventType", "InterviewEvent",

    # Presentation
    "ConsolePresenter", "render_transcript", "render_final_report",
]
