"""
Session controller: owns the Session and drives the interview state machine.
"""
import asyncio
import logging
import time
from typing import Callable, Dict, Optional

from .capabilities import SpeechOutput, ConsoleSpeechOutput, ConsoleManualInput, ManualInput
from .capture import AnswerCapture
from .catalog import JobCatalog
from .evaluator import evaluate, round_half_up
from .events import (
    InterviewEventBus, EventLogger, InterviewMetrics,
    SessionStartedEvent, PhaseChangedEvent, UtteranceSpokenEvent,
    StepRecordedEvent, FollowupTriggeredEvent, SessionCompletedEvent,
    SessionStoppedEvent, ErrorOccurredEvent
)
from .models import JobTemplate, Session, Step, now_iso
from .schemas import EvaluationResult, InterviewPhase
from ..config import Config, INTERVIEWER_NAME

logger = logging.getLogger("controller")

GREETING_TEMPLATE = "Hello. I am {name}, your interviewer for the role {title}. Let's begin."
FOLLOWUP_TEMPLATE = "You didn't mention {skill}. Can you describe any experience with {skill}?"

Evaluator = Callable[[Optional[str], JobTemplate], EvaluationResult]


def finalize(session: Session) -> None:
    """Average all step scores (follow-ups included) into the final score. No-op without steps."""
    if not session.steps:
        return
    total = sum(step.score for step in session.steps)
    session.final_score = round_half_up(total / len(session.steps))
    session.completed_at = now_iso()


class SessionController:
    """
    Runs one interview: greet, then for each question ask, capture, evaluate,
    record and maybe follow up once, then finalize.

    All presentation happens through events on the event bus. ``stop()`` may be
    called from another task or from an event handler; it finalizes whatever
    steps exist and nothing further is spoken or captured.
    """

    def __init__(self,
                 catalog: JobCatalog,
                 capture: AnswerCapture,
                 speech_output: Optional[SpeechOutput] = None,
                 event_bus: Optional[InterviewEventBus] = None,
                 evaluator: Evaluator = evaluate,
                 interviewer_name: str = INTERVIEWER_NAME):
        self.catalog = catalog
        self.capture = capture
        self.speech_output = speech_output or ConsoleSpeechOutput()
        self.event_bus = event_bus or capture.event_bus
        self.evaluator = evaluator
        self.interviewer_name = interviewer_name

        self.event_logger = EventLogger()
        self.metrics = InterviewMetrics()
        self.event_bus.subscribe_all(self.event_logger.handle_event)
        self.event_bus.subscribe_all(self.metrics.handle_event)

        self.phase = InterviewPhase.IDLE
        self.session: Optional[Session] = None
        self._job: Optional[JobTemplate] = None
        self._task: Optional[asyncio.Task] = None

    @classmethod
    def from_config(cls,
                    config: Config,
                    catalog: Optional[JobCatalog] = None,
                    event_bus: Optional[InterviewEventBus] = None,
                    manual_input: Optional[ManualInput] = None) -> "SessionController":
        """Wire the Google speech adapters (or console stand-ins when disabled) from configuration."""
        catalog = catalog or JobCatalog.default(config.jobs_file)
        event_bus = event_bus or InterviewEventBus()

        speech_output: SpeechOutput
        if config.enable_tts:
            from ..infrastructure.speech import GoogleSpeechOutput
            speech_output = GoogleSpeechOutput(
                voice=config.tts_voice,
                language_code=config.language_code,
                volume=config.speaker_volume,
                credentials_json=config.google_application_credentials,
            )
        else:
            speech_output = ConsoleSpeechOutput()

        speech_input = None
        if config.enable_stt:
            from ..infrastructure.speech import GoogleSpeechInput
            speech_input = GoogleSpeechInput(
                language_code=config.language_code,
                credentials_json=config.google_application_credentials,
            )

        capture = AnswerCapture(
            speech_input,
            manual_input or ConsoleManualInput(),
            event_bus=event_bus,
            timeout_seconds=config.answer_timeout_seconds,
        )
        return cls(catalog, capture, speech_output, event_bus,
                   interviewer_name=config.interviewer_name)

    @property
    def export_enabled(self) -> bool:
        return self.session is not None and self.phase.is_terminal

    def start(self, job_key: str) -> Session:
        """
        Create the Session for a job key and enter the greeting phase.

        Raises:
            JobConfigurationError: If the job key is unknown
            RuntimeError: If this controller already ran an interview
        """
        if self.phase != InterviewPhase.IDLE:
            raise RuntimeError(f"Interview already started (phase: {self.phase.value})")

        job = self.catalog.get(job_key)
        session = Session.create(job_key, job)
        self.session = session
        self._job = job

        logger.info(f"Session started: {session.id} role={session.job_title}")
        self.event_bus.emit(SessionStartedEvent(
            session.id, time.time(), job_key, job.title, len(job.questions)
        ))
        self._transition(InterviewPhase.GREETING)
        return session

    async def run(self, job_key: str) -> Session:
        """
        Run a complete interview for the given role.

        Returns:
            The finished Session (completed, or stopped early)
        """
        session = self.start(job_key)
        self._task = asyncio.current_task()
        try:
            await self._conduct(session, self._job)
        except asyncio.CancelledError:
            if self.phase == InterviewPhase.STOPPED:
                logger.info("Interview task halted by stop signal")
                return session
            # Cancelled from outside: treat it as a stop, then let the cancellation through
            self.stop()
            raise
        return session

    def stop(self) -> bool:
        """
        Stop the interview early: halt speech, halt capture, finalize the
        recorded steps and move to STOPPED.

        Returns:
            True if the interview was stopped, False if there was nothing to stop
        """
        session = self.session
        if session is None or self.phase.is_terminal:
            logger.debug(f"Stop ignored in phase {self.phase.value}")
            return False

        logger.info("Interview stopped by user.")
        try:
            self.speech_output.cancel()
        except Exception as e:
            logger.warning(f"Error cancelling speech output: {e}")
        if self.capture.active:
            self.capture.cancel()

        session.ended_at = now_iso()
        finalize(session)
        self._transition(InterviewPhase.STOPPED)
        self.event_bus.emit(SessionStoppedEvent(
            session.id, time.time(), len(session.steps), session.final_score
        ))

        # From inside the interview task the phase checks in _conduct end the loop
        task = self._task
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
        return True

    def export(self, directory: str) -> str:
        """
        Write the finished session as JSON.

        Returns:
            Path of the written file

        Raises:
            RuntimeError: If the interview has not finished yet
        """
        if not self.export_enabled:
            raise RuntimeError("Export is only available once the interview has finished")
        from ..infrastructure.data import save_session
        return save_session(self.session, directory)

    def get_metrics(self) -> Dict[str, int]:
        """Get current session metrics."""
        return self.metrics.get_metrics()

    async def _conduct(self, session: Session, job: JobTemplate) -> None:
        await self._say(session, GREETING_TEMPLATE.format(name=self.interviewer_name, title=job.title))

        for idx, question in enumerate(job.questions, start=1):
            if self.phase.is_terminal:
                return
            self._transition(InterviewPhase.ASKING_QUESTION)
            await self._say(session, question)
            if self.phase.is_terminal:
                return

            self._transition(InterviewPhase.CAPTURING_ANSWER)
            answer = await self.capture.capture(question, session.id)

            self._transition(InterviewPhase.EVALUATING)
            result = self.evaluator(answer, job)
            self._record(session, question, answer, result, followup=False)
            logger.info(f"Q{idx} score:{result.score} - {result.rationale}")

            self._transition(InterviewPhase.FOLLOWUP_DECISION)
            if self.phase.is_terminal:
                return
            if result.missing_skills:
                await self._follow_up(session, job, result.missing_skills[0])

            self._transition(InterviewPhase.NEXT_QUESTION_OR_FINALIZE)

        if self.phase.is_terminal:
            return
        finalize(session)
        self._transition(InterviewPhase.COMPLETED)
        logger.info(f"Session completed. Final Score: {session.final_score}")
        self.event_bus.emit(SessionCompletedEvent(
            session.id, time.time(), len(session.steps), session.final_score
        ))

    async def _follow_up(self, session: Session, job: JobTemplate, skill: str) -> None:
        question = FOLLOWUP_TEMPLATE.format(skill=skill)
        self.event_bus.emit(FollowupTriggeredEvent(session.id, time.time(), skill, question))

        self._transition(InterviewPhase.ASKING_FOLLOWUP)
        await self._say(session, question, followup=True)
        if self.phase.is_terminal:
            return

        self._transition(InterviewPhase.CAPTURING_FOLLOWUP_ANSWER)
        answer = await self.capture.capture(question, session.id)

        self._transition(InterviewPhase.EVALUATING_FOLLOWUP)
        result = self.evaluator(answer, job)
        self._record(session, question, answer, result, followup=True)
        logger.info(f"Follow-up score:{result.score} - {result.rationale}")

    async def _say(self, session: Session, text: str, followup: bool = False) -> None:
        if self.phase.is_terminal:
            return
        self.event_bus.emit(UtteranceSpokenEvent(session.id, time.time(), text, followup))
        try:
            await self.speech_output.speak(text)
        except Exception as e:
            logger.error(f"Speech output failed, continuing: {e}")
            self.event_bus.emit(ErrorOccurredEvent(
                session.id, time.time(), type(e).__name__, str(e), "speech_output"
            ))

    def _record(self, session: Session, question: str, answer: str,
                result: EvaluationResult, followup: bool) -> None:
        if self.phase.is_terminal:
            return
        step = Step(
            question=question,
            answer=answer,
            score=result.score,
            rationale=result.rationale,
            timestamp=now_iso(),
            followup=followup,
        )
        session.steps.append(step)
        self.event_bus.emit(StepRecordedEvent(
            session.id, time.time(), len(session.steps), question, answer,
            result.score, result.rationale, followup
        ))

    def _transition(self, new_phase: InterviewPhase) -> None:
        old_phase = self.phase
        if old_phase.is_terminal:
            # Session is closed; the interview task is already being cancelled
            return
        self.phase = new_phase
        logger.debug(f"Phase {old_phase.value} -> {new_phase.value}")
        session_id = self.session.id if self.session else "unknown"
        self.event_bus.emit(PhaseChangedEvent(
            session_id, time.time(), old_phase.value, new_phase.value
        ))
