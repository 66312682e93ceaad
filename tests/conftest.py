import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from virtual_interviewer.interview import AnswerCapture, InterviewEventBus, JobCatalog
from virtual_interviewer.interview.testing import MockManualInput, MockSpeechInput, MockSpeechOutput


@pytest.fixture
def catalog():
    return JobCatalog.default()


@pytest.fixture
def two_question_catalog():
    return JobCatalog.from_mapping({
        "backend": {
            "title": "Backend Developer",
            "skills": ["python", "sql"],
            "questions": ["What do you build?", "How do you store data?"],
        }
    })


@pytest.fixture
def event_bus():
    return InterviewEventBus()


@pytest.fixture
def recorded_events(event_bus):
    events = []
    event_bus.subscribe_all(events.append)
    return events


@pytest.fixture
def speech_output():
    return MockSpeechOutput()


@pytest.fixture
def make_capture(event_bus):
    """Build an AnswerCapture over scripted speech turns and typed answers."""
    def _make(turns=None, typed=(), timeout=1.0, available=True):
        speech_input = MockSpeechInput(turns, available=available) if turns is not None else None
        manual = MockManualInput(typed)
        capture = AnswerCapture(speech_input, manual, event_bus=event_bus, timeout_seconds=timeout)
        return capture, speech_input, manual
    return _make
