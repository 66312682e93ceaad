import asyncio

import pytest

from virtual_interviewer.interview import (
    EventType, InterviewPhase, JobConfigurationError, SessionController, finalize
)
from virtual_interviewer.interview.controller import FOLLOWUP_TEMPLATE
from virtual_interviewer.interview.evaluator import round_half_up
from virtual_interviewer.interview.models import Session, Step
from virtual_interviewer.interview.testing import SILENT, MockSpeechOutput, final

FULL_QA_ANSWER = "I have 3 years of testing automation selenium jest and api work"


def build_controller(catalog, make_capture, turns=None, typed=(), timeout=1.0, speech_output=None):
    capture, speech_input, manual = make_capture(turns, typed=typed, timeout=timeout)
    controller = SessionController(catalog, capture, speech_output or MockSpeechOutput())
    return controller, speech_input, manual


def test_follow_up_only_when_skills_are_missing(two_question_catalog, make_capture):
    controller, _, _ = build_controller(two_question_catalog, make_capture, turns=[
        [final("I write python services backed by sql")],
        [final("I use postgres tables")],
        [final("python scripts for reports")],
    ])

    session = asyncio.run(controller.run("backend"))

    assert len(session.steps) == 3
    assert [s.followup for s in session.steps] == [False, False, True]
    assert session.steps[2].question == FOLLOWUP_TEMPLATE.format(skill="python")
    assert session.final_score == round_half_up(sum(s.score for s in session.steps) / 3)
    assert session.completed_at is not None
    assert session.ended_at is None
    assert controller.phase == InterviewPhase.COMPLETED


def test_silent_answers_score_zero_and_ask_about_first_skill(catalog, make_capture):
    controller, speech_input, _ = build_controller(catalog, make_capture, turns=[], timeout=0.01)

    session = asyncio.run(controller.run("support"))

    assert session.steps[0].answer == ""
    assert session.steps[0].score == 0
    assert session.steps[1].question == FOLLOWUP_TEMPLATE.format(skill="communication")
    # One follow-up per question, never a follow-up to a follow-up
    assert [s.followup for s in session.steps] == [False, True] * 3
    assert session.final_score == 0
    assert speech_input.start_count == speech_input.stop_count == 6
    metrics = controller.get_metrics()
    assert metrics["capture_timeouts"] == 6
    assert metrics["followups_asked"] == 3
    assert metrics["sessions_completed"] == 1


def test_greeting_and_questions_are_spoken_in_order(two_question_catalog, make_capture):
    speech_output = MockSpeechOutput()
    controller, _, _ = build_controller(two_question_catalog, make_capture, turns=[
        [final("python and sql")], [final("python and sql")],
    ], speech_output=speech_output)

    asyncio.run(controller.run("backend"))

    assert speech_output.spoken_messages == [
        "Hello. I am Aisha, your interviewer for the role Backend Developer. Let's begin.",
        "What do you build?",
        "How do you store data?",
    ]


def test_phase_transitions(two_question_catalog, make_capture, recorded_events):
    controller, _, _ = build_controller(two_question_catalog, make_capture, turns=[
        [final("python sql")], [final("nothing relevant")], [final("python")],
    ])

    asyncio.run(controller.run("backend"))

    phases = [e.data["new_phase"] for e in recorded_events if e.event_type == EventType.PHASE_CHANGED]
    assert phases == [
        "greeting",
        "asking_question", "capturing_answer", "evaluating", "followup_decision",
        "next_question_or_finalize",
        "asking_question", "capturing_answer", "evaluating", "followup_decision",
        "asking_followup", "capturing_followup_answer", "evaluating_followup",
        "next_question_or_finalize",
        "completed",
    ]


def test_stop_during_second_capture(catalog, make_capture):
    speech_output = MockSpeechOutput()
    controller, speech_input, _ = build_controller(
        catalog, make_capture, turns=[[final(FULL_QA_ANSWER)], SILENT], timeout=5,
        speech_output=speech_output,
    )

    async def scenario():
        task = asyncio.ensure_future(controller.run("qa"))
        await speech_input.wait_for_start(2)
        assert controller.phase == InterviewPhase.CAPTURING_ANSWER
        assert controller.stop() is True
        return await task

    session = asyncio.run(scenario())

    assert len(session.steps) == 1
    assert session.ended_at is not None
    assert session.final_score == session.steps[0].score
    assert controller.phase == InterviewPhase.STOPPED
    assert speech_input.start_count == 2
    assert speech_input.stop_count >= 2
    assert speech_output.cancel_count == 1
    qa = catalog.get("qa")
    assert qa.questions[2] not in speech_output.spoken_messages
    assert controller.get_metrics()["sessions_stopped"] == 1
    assert controller.get_metrics()["sessions_completed"] == 0


def test_stop_before_any_step_leaves_no_score(catalog, make_capture):
    controller, speech_input, _ = build_controller(catalog, make_capture, turns=[SILENT], timeout=5)

    async def scenario():
        task = asyncio.ensure_future(controller.run("junior_dev"))
        await speech_input.wait_for_start(1)
        controller.stop()
        return await task

    session = asyncio.run(scenario())

    assert session.steps == []
    assert session.final_score is None
    assert session.completed_at is None
    assert session.ended_at is not None


def test_second_stop_is_ignored(catalog, make_capture):
    controller, speech_input, _ = build_controller(catalog, make_capture, turns=[SILENT], timeout=5)

    async def scenario():
        task = asyncio.ensure_future(controller.run("qa"))
        await speech_input.wait_for_start(1)
        assert controller.stop() is True
        assert controller.stop() is False
        return await task

    asyncio.run(scenario())
    assert controller.get_metrics()["sessions_stopped"] == 1


def test_stop_before_start_does_nothing(catalog, make_capture):
    controller, _, _ = build_controller(catalog, make_capture)
    assert controller.stop() is False
    assert controller.phase == InterviewPhase.IDLE


def test_stop_after_completion_does_nothing(two_question_catalog, make_capture):
    controller, _, _ = build_controller(two_question_catalog, make_capture, turns=[
        [final("python sql")], [final("python sql")],
    ])
    session = asyncio.run(controller.run("backend"))

    assert controller.stop() is False
    assert session.ended_at is None
    assert controller.phase == InterviewPhase.COMPLETED


def test_external_cancel_stops_session(catalog, make_capture):
    controller, speech_input, _ = build_controller(catalog, make_capture, turns=[SILENT], timeout=5)

    async def scenario():
        task = asyncio.ensure_future(controller.run("qa"))
        await speech_input.wait_for_start(1)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(scenario())
    assert controller.phase == InterviewPhase.STOPPED
    assert controller.session.ended_at is not None


def test_unknown_job_key_fails_before_any_output(catalog, make_capture):
    speech_output = MockSpeechOutput()
    controller, _, _ = build_controller(catalog, make_capture, speech_output=speech_output)

    with pytest.raises(JobConfigurationError):
        asyncio.run(controller.run("astronaut"))
    assert speech_output.spoken_messages == []
    assert controller.session is None
    assert controller.phase == InterviewPhase.IDLE


def test_controller_is_single_use(two_question_catalog, make_capture):
    controller, _, _ = build_controller(two_question_catalog, make_capture, turns=[
        [final("python sql")], [final("python sql")],
    ])
    asyncio.run(controller.run("backend"))

    with pytest.raises(RuntimeError):
        controller.start("backend")


def test_typed_answers_when_speech_is_unavailable(two_question_catalog, make_capture):
    controller, _, manual = build_controller(
        two_question_catalog, make_capture, turns=None,
        typed=["python and sql for 2 years", "sql only", None],
    )

    session = asyncio.run(controller.run("backend"))

    assert [s.answer for s in session.steps] == ["python and sql for 2 years", "sql only", ""]
    assert len(manual.prompts) == 3
    assert controller.get_metrics()["manual_fallbacks"] == 3


def test_speech_output_failure_does_not_stop_interview(two_question_catalog, make_capture):
    controller, _, _ = build_controller(two_question_catalog, make_capture, turns=[
        [final("python sql")], [final("python sql")],
    ], speech_output=MockSpeechOutput(fail=True))

    session = asyncio.run(controller.run("backend"))

    assert len(session.steps) == 2
    assert controller.phase == InterviewPhase.COMPLETED
    assert controller.get_metrics()["errors_occurred"] == 3


def test_step_events_carry_running_index(two_question_catalog, make_capture, recorded_events):
    controller, _, _ = build_controller(two_question_catalog, make_capture, turns=[
        [final("python sql")], [final("nothing")], [final("python")],
    ])
    asyncio.run(controller.run("backend"))

    steps = [e.data for e in recorded_events if e.event_type == EventType.STEP_RECORDED]
    assert [(d["step_idx"], d["followup"]) for d in steps] == [(1, False), (2, False), (3, True)]


def test_export_requires_finished_interview(two_question_catalog, make_capture, tmp_path):
    controller, _, _ = build_controller(two_question_catalog, make_capture, turns=[
        [final("python sql")], [final("python sql")],
    ])
    assert not controller.export_enabled
    with pytest.raises(RuntimeError):
        controller.export(str(tmp_path))

    session = asyncio.run(controller.run("backend"))

    assert controller.export_enabled
    path = controller.export(str(tmp_path))
    assert path.endswith(f"{session.id}.json")


def test_finalize_averages_all_steps():
    session = Session(id="s_1", job_key="qa", job_title="QA Engineer", started_at="t")
    session.steps = [
        Step("q1", "a", 62, "r", "t"),
        Step("f1", "a", 20, "r", "t", followup=True),
        Step("q2", "a", 9, "r", "t"),
    ]

    finalize(session)

    # (62 + 20 + 9) / 3 = 30.33
    assert session.final_score == 30
    assert session.completed_at is not None


def test_finalize_without_steps_is_noop():
    session = Session(id="s_1", job_key="qa", job_title="QA Engineer", started_at="t")
    finalize(session)
    assert session.final_score is None
    assert session.completed_at is None


def test_stop_from_step_handler_asks_nothing_more(two_question_catalog, make_capture, event_bus):
    speech_output = MockSpeechOutput()
    controller, speech_input, _ = build_controller(two_question_catalog, make_capture, turns=[
        [final("python sql")], [final("python sql")],
    ], speech_output=speech_output)
    event_bus.subscribe(EventType.STEP_RECORDED, lambda event: controller.stop())

    session = asyncio.run(controller.run("backend"))

    assert controller.phase == InterviewPhase.STOPPED
    assert len(session.steps) == 1
    assert session.ended_at is not None
    assert speech_input.start_count == 1
    assert "How do you store data?" not in speech_output.spoken_messages


def test_stop_when_follow_up_is_triggered_skips_it(two_question_catalog, make_capture, event_bus):
    speech_output = MockSpeechOutput()
    controller, speech_input, _ = build_controller(two_question_catalog, make_capture, turns=[
        [final("nothing relevant")],
    ], speech_output=speech_output)
    event_bus.subscribe(EventType.FOLLOWUP_TRIGGERED, lambda event: controller.stop())

    session = asyncio.run(controller.run("backend"))

    assert [s.followup for s in session.steps] == [False]
    assert speech_input.start_count == 1
    assert FOLLOWUP_TEMPLATE.format(skill="python") not in speech_output.spoken_messages
    assert session.final_score == session.steps[0].score
