"""
Virtual Interviewer Configuration
=================================

This file contains ALL configuration for the virtual interviewer.
- User settings at the top (things users might want to change)
- Internal constants below (technical defaults)
- The built-in job catalog at the bottom
"""
import os
from dataclasses import dataclass
from typing import Optional


# =============================================================================
# USER SETTINGS - Edit these to customize the interviewer
# =============================================================================

# Optional: path to a Google service account JSON (otherwise default credentials)
GOOGLE_APPLICATION_CREDENTIALS = None

# Interview settings
ANSWER_TIMEOUT_SECONDS = 20.0
INTERVIEWER_NAME = "Aisha"
JOBS_FILE = None  # Optional JSON file replacing the built-in job catalog
EXPORT_DIR = "./_sessions"

# Speech settings
ENABLE_TTS = True
ENABLE_STT = True
TTS_VOICE = "en-US-Neural2-F"
SPEAKER_VOLUME = 1.0
LANGUAGE_CODE = "en-US"

# Logging
LOG_FILE = "./_sessions/interview.log"
LOG_LEVEL = "INFO"


# =============================================================================
# INTERNAL CONSTANTS - Don't change these unless you know what you're doing
# =============================================================================

# Audio capture
SAMPLE_RATE_CAPTURE = 48000
SAMPLE_RATE_TARGET = 16000
CHANNELS = 1
FRAME_MS = 100
MIC_GAIN = 1.0

# Audio playback
SPEAKER_SAMPLE_RATE = 16000
SPEAKER_CHUNK_SAMPLES = 1600

# Scoring weights
SKILL_POINTS = 50
POINTS_PER_YEAR = 6
EXPERIENCE_CAP = 30
FLUENCY_CAP = 20
WORDS_PER_FLUENCY_POINT = 3


# =============================================================================
# JOB CATALOG - Role key -> {title, skills, questions}
# =============================================================================

DEFAULT_JOB_TEMPLATES = {
    "junior_dev": {
        "title": "Junior Developer",
        "skills": ["javascript", "react", "node", "html", "css"],
        "questions": [
            "Tell me about a programming project you built.",
            "Which technologies did you use and why?",
            "How do you debug problems in your code?",
        ],
    },
    "qa": {
        "title": "QA Engineer",
        "skills": ["testing", "automation", "selenium", "jest", "api"],
        "questions": [
            "Describe a time you found a critical bug and how you reported it.",
            "What is your experience with automation testing?",
            "How do you design test cases for a new feature?",
        ],
    },
    "support": {
        "title": "Support Executive",
        "skills": ["communication", "troubleshooting", "crm", "email"],
        "questions": [
            "Tell me about a difficult customer interaction and how you handled it.",
            "How do you prioritize tickets when several high-priority issues arrive?",
            "What tools have you used for customer support?",
        ],
    },
}


# =============================================================================
# MAIN CONFIG OBJECT
# =============================================================================

@dataclass
class Config:
    """Main configuration object."""
    google_application_credentials: Optional[str] = GOOGLE_APPLICATION_CREDENTIALS
    answer_timeout_seconds: float = ANSWER_TIMEOUT_SECONDS
    interviewer_name: str = INTERVIEWER_NAME
    jobs_file: Optional[str] = JOBS_FILE
    export_dir: str = EXPORT_DIR
    enable_tts: bool = ENABLE_TTS
    enable_stt: bool = ENABLE_STT
    tts_voice: str = TTS_VOICE
    speaker_volume: float = SPEAKER_VOLUME
    language_code: str = LANGUAGE_CODE
    log_file: str = LOG_FILE
    log_level: str = LOG_LEVEL


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def get_config() -> Config:
    """Load configuration, letting environment variables override the defaults above."""
    timeout_raw = os.getenv("INTERVIEW_ANSWER_TIMEOUT")
    if timeout_raw is None:
        timeout = ANSWER_TIMEOUT_SECONDS
    else:
        try:
            timeout = float(timeout_raw)
        except ValueError:
            raise ValueError(f"INTERVIEW_ANSWER_TIMEOUT must be a number, got {timeout_raw!r}")
    if timeout <= 0:
        raise ValueError("INTERVIEW_ANSWER_TIMEOUT must be greater than zero")

    log_level = (os.getenv("INTERVIEW_LOG_LEVEL") or LOG_LEVEL).upper()
    if log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        raise ValueError(f"Unknown INTERVIEW_LOG_LEVEL: {log_level}")

    return Config(
        google_application_credentials=os.getenv("GOOGLE_APPLICATION_CREDENTIALS") or GOOGLE_APPLICATION_CREDENTIALS,
        answer_timeout_seconds=timeout,
        jobs_file=os.getenv("INTERVIEW_JOBS_FILE") or JOBS_FILE,
        export_dir=os.getenv("INTERVIEW_EXPORT_DIR") or EXPORT_DIR,
        enable_tts=_env_flag("INTERVIEW_ENABLE_TTS", ENABLE_TTS),
        enable_stt=_env_flag("INTERVIEW_ENABLE_STT", ENABLE_STT),
        log_file=os.getenv("INTERVIEW_LOG_FILE") or LOG_FILE,
        log_level=log_level,
    )
