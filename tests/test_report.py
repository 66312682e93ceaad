import io

from virtual_interviewer.interview import ConsolePresenter, InterviewEventBus, render_final_report, render_transcript
from virtual_interviewer.interview.events import (
    CaptureTimedOutEvent, SessionCompletedEvent, SessionStartedEvent, StepRecordedEvent, TranscriptUpdatedEvent
)
from virtual_interviewer.interview.models import Session, Step


def make_session():
    session = Session(id="s_1", job_key="support", job_title="Support Executive", started_at="t")
    session.steps = [
        Step("How do you prioritize?", "By impact", 8, "Matched 0/4 skills (none). Words:2. Years:n/a.", "t"),
        Step("You didn't mention communication. Can you describe any experience with communication?",
             "", 0, "Matched 0/4 skills (none). Words:0. Years:n/a.", "t", followup=True),
    ]
    return session


def test_transcript_lists_steps():
    text = render_transcript(make_session())

    assert "Q1: How do you prioritize?" in text
    assert "Q2 (follow-up):" in text
    assert "A: (no response)" in text
    assert text.count("\n---\n") == 1


def test_final_report_for_completed_session():
    session = make_session()
    session.final_score = 4

    report = render_final_report(session)

    assert "FINAL REPORT - Support Executive" in report
    assert "Final Score: 4" in report
    assert "Steps recorded: 2" in report


def test_final_report_for_stopped_session_without_steps():
    session = Session(id="s_1", job_key="qa", job_title="QA Engineer", started_at="t", ended_at="t")

    report = render_final_report(session)

    assert "INTERVIEW STOPPED" in report
    assert "Final Score: n/a" in report
    assert "Details:" not in report


def test_presenter_renders_events():
    session = make_session()
    session.final_score = 4
    stream = io.StringIO()
    bus = InterviewEventBus()
    ConsolePresenter(lambda: session, stream=stream).attach(bus)

    bus.emit(SessionStartedEvent("s_1", 0.0, "support", "Support Executive", 3))
    bus.emit(TranscriptUpdatedEvent("s_1", 0.0, "by imp", ""))
    bus.emit(TranscriptUpdatedEvent("s_1", 0.0, "", "By impact"))
    bus.emit(CaptureTimedOutEvent("s_1", 0.0, 20.0))
    bus.emit(StepRecordedEvent("s_1", 0.0, 1, "Q", "By impact", 8, "rationale", False))
    bus.emit(SessionCompletedEvent("s_1", 0.0, 2, 4))

    output = stream.getvalue()
    assert "Support Executive - 3 questions" in output
    assert "... by imp" in output
    assert '"By impact"' in output
    assert "No response detected after 20s" in output
    assert "Step 1 score: 8 - rationale" in output
    assert "Final Score: 4" in output


def test_presenter_can_hide_interim_results():
    stream = io.StringIO()
    bus = InterviewEventBus()
    ConsolePresenter(lambda: None, stream=stream, show_interim=False).attach(bus)

    bus.emit(TranscriptUpdatedEvent("s_1", 0.0, "partial", ""))
    bus.emit(SessionCompletedEvent("s_1", 0.0, 0, None))

    assert stream.getvalue() == ""
