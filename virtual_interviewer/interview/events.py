"""
Event-driven notifications for the interview system.

The controller and the answer capture never touch a rendering surface; they
publish events here and presenters, loggers and metrics subscribe.
"""
import logging
from abc import ABC
from typing import Dict, Any, List, Callable, Optional
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger("events")


class EventType(str, Enum):
    """Types of interview events."""
    SESSION_STARTED = "session_started"
    PHASE_CHANGED = "phase_changed"
    UTTERANCE_SPOKEN = "utterance_spoken"
    TRANSCRIPT_UPDATED = "transcript_updated"
    CAPTURE_TIMED_OUT = "capture_timed_out"
    CAPTURE_FALLBACK = "capture_fallback"
    STEP_RECORDED = "step_recorded"
    FOLLOWUP_TRIGGERED = "followup_triggered"
    SESSION_COMPLETED = "session_completed"
    SESSION_STOPPED = "session_stopped"
    ERROR_OCCURRED = "error_occurred"


@dataclass
class InterviewEvent(ABC):
    """Base class for all interview events."""
    event_type: EventType
    session_id: str
    timestamp: float
    data: Dict[str, Any]


@dataclass
class SessionStartedEvent(InterviewEvent):
    """Event fired when a session is created."""
    def __init__(self, session_id: str, timestamp: float, job_key: str,
                 job_title: str, question_count: int):
        super().__init__(
            event_type=EventType.SESSION_STARTED,
            session_id=session_id,
            timestamp=timestamp,
            data={
                "job_key": job_key,
                "job_title": job_title,
                "question_count": question_count
            }
        )


@dataclass
class PhaseChangedEvent(InterviewEvent):
    """Event fired on every state machine transition."""
    def __init__(self, session_id: str, timestamp: float, old_phase: str, new_phase: str):
        super().__init__(
            event_type=EventType.PHASE_CHANGED,
            session_id=session_id,
            timestamp=timestamp,
            data={"old_phase": old_phase, "new_phase": new_phase}
        )


@dataclass
class UtteranceSpokenEvent(InterviewEvent):
    """Event fired when the interviewer says something."""
    def __init__(self, session_id: str, timestamp: float, text: str, followup: bool = False):
        super().__init__(
            event_type=EventType.UTTERANCE_SPOKEN,
            session_id=session_id,
            timestamp=timestamp,
            data={"text": text, "followup": followup}
        )


@dataclass
class TranscriptUpdatedEvent(InterviewEvent):
    """Event fired for live recognition results."""
    def __init__(self, session_id: str, timestamp: float, interim: str, final: str):
        super().__init__(
            event_type=EventType.TRANSCRIPT_UPDATED,
            session_id=session_id,
            timestamp=timestamp,
            data={"interim": interim, "final": final}
        )


@dataclass
class CaptureTimedOutEvent(InterviewEvent):
    """Event fired when no final transcript arrived in time."""
    def __init__(self, session_id: str, timestamp: float, timeout_seconds: float):
        super().__init__(
            event_type=EventType.CAPTURE_TIMED_OUT,
            session_id=session_id,
            timestamp=timestamp,
            data={"timeout_seconds": timeout_seconds}
        )


@dataclass
class CaptureFallbackEvent(InterviewEvent):
    """Event fired when an answer is requested as typed input."""
    def __init__(self, session_id: str, timestamp: float, reason: str):
        super().__init__(
            event_type=EventType.CAPTURE_FALLBACK,
            session_id=session_id,
            timestamp=timestamp,
            data={"reason": reason}
        )


@dataclass
class StepRecordedEvent(InterviewEvent):
    """Event fired when a Step is appended to the session."""
    def __init__(self, session_id: str, timestamp: float, step_idx: int, question: str,
                 answer: str, score: int, rationale: str, followup: bool):
        super().__init__(
            event_type=EventType.STEP_RECORDED,
            session_id=session_id,
            timestamp=timestamp,
            data={
                "step_idx": step_idx,
                "question": question,
                "answer": answer,
                "score": score,
                "rationale": rationale,
                "followup": followup
            }
        )


@dataclass
class FollowupTriggeredEvent(InterviewEvent):
    """Event fired when a missing skill triggers a follow-up question."""
    def __init__(self, session_id: str, timestamp: float, skill: str, question: str):
        super().__init__(
            event_type=EventType.FOLLOWUP_TRIGGERED,
            session_id=session_id,
            timestamp=timestamp,
            data={"skill": skill, "question": question}
        )


@dataclass
class SessionCompletedEvent(InterviewEvent):
    """Event fired when all questions were asked and the session was finalized."""
    def __init__(self, session_id: str, timestamp: float, step_count: int,
                 final_score: Optional[int]):
        super().__init__(
            event_type=EventType.SESSION_COMPLETED,
            session_id=session_id,
            timestamp=timestamp,
            data={"step_count": step_count, "final_score": final_score}
        )


@dataclass
class SessionStoppedEvent(InterviewEvent):
    """Event fired when the interview was stopped early."""
    def __init__(self, session_id: str, timestamp: float, step_count: int,
                 final_score: Optional[int]):
        super().__init__(
            event_type=EventType.SESSION_STOPPED,
            session_id=session_id,
            timestamp=timestamp,
            data={"step_count": step_count, "final_score": final_score}
        )


@dataclass
class ErrorOccurredEvent(InterviewEvent):
    """Event fired when a collaborator fails; the interview carries on."""
    def __init__(self, session_id: str, timestamp: float, error_type: str,
                 error_message: str, component: str):
        super().__init__(
            event_type=EventType.ERROR_OCCURRED,
            session_id=session_id,
            timestamp=timestamp,
            data={
                "error_type": error_type,
                "error_message": error_message,
                "component": component
            }
        )


EventHandler = Callable[[InterviewEvent], None]


class InterviewEventBus:
    """Event bus for interview system communication."""

    def __init__(self):
        self._handlers: Dict[EventType, List[EventHandler]] = {}
        self._global_handlers: List[EventHandler] = []

    def subscribe(self, event_type: EventType, handler: EventHandler) -> None:
        """
        Subscribe to specific event type.

        Args:
            event_type: Type of event to listen for
            handler: Function to call when event occurs
        """
        self._handlers.setdefault(event_type, []).append(handler)
        logger.debug(f"Subscribed handler to {event_type}")

    def subscribe_all(self, handler: EventHandler) -> None:
        """Subscribe to all events."""
        self._global_handlers.append(handler)
        logger.debug("Subscribed global handler")

    def unsubscribe(self, event_type: EventType, handler: EventHandler) -> None:
        """Unsubscribe from specific event type."""
        if event_type in self._handlers:
            try:
                self._handlers[event_type].remove(handler)
                logger.debug(f"Unsubscribed handler from {event_type}")
            except ValueError:
                logger.warning(f"Handler not found for {event_type}")

    def emit(self, event: InterviewEvent) -> None:
        """
        Emit an event to all subscribers. Handler errors are logged, not raised.

        Args:
            event: Event to emit
        """
        logger.debug(f"Emitting event: {event.event_type} for session {event.session_id}")

        for handler in self._handlers.get(event.event_type, []):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error in event handler for {event.event_type}: {e}")

        for handler in self._global_handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error in global event handler: {e}")

    def clear_handlers(self) -> None:
        """Clear all event handlers."""
        self._handlers.clear()
        self._global_handlers.clear()
        logger.debug("Cleared all event handlers")


class EventLogger:
    """Writes the session log: one line per event."""

    def __init__(self, log_level: int = logging.INFO):
        self.logger = logging.getLogger("session_log")
        self.log_level = log_level

    def handle_event(self, event: InterviewEvent) -> None:
        """Log event details."""
        if event.event_type == EventType.TRANSCRIPT_UPDATED:
            # Interim results arrive many times per second
            self.logger.debug(f"Event: {event.event_type.value} | Session: {event.session_id} | Data: {event.data}")
            return
        self.logger.log(self.log_level,
                        f"Event: {event.event_type.value} | Session: {event.session_id} | Data: {event.data}")


class InterviewMetrics:
    """Collects counters from interview events."""

    def __init__(self):
        self.reset()

    def handle_event(self, event: InterviewEvent) -> None:
        """Update metrics based on event."""
        if event.event_type == EventType.SESSION_STARTED:
            self.sessions_started += 1
        elif event.event_type == EventType.SESSION_COMPLETED:
            self.sessions_completed += 1
        elif event.event_type == EventType.SESSION_STOPPED:
            self.sessions_stopped += 1
        elif event.event_type == EventType.STEP_RECORDED:
            self.steps_recorded += 1
        elif event.event_type == EventType.FOLLOWUP_TRIGGERED:
            self.followups_asked += 1
        elif event.event_type == EventType.CAPTURE_TIMED_OUT:
            self.capture_timeouts += 1
        elif event.event_type == EventType.CAPTURE_FALLBACK:
            self.manual_fallbacks += 1
        elif event.event_type == EventType.ERROR_OCCURRED:
            self.errors_occurred += 1

    def get_metrics(self) -> Dict[str, int]:
        """Get current metrics snapshot."""
        return {
            "sessions_started": self.sessions_started,
            "sessions_completed": self.sessions_completed,
            "sessions_stopped": self.sessions_stopped,
            "steps_recorded": self.steps_recorded,
            "followups_asked": self.followups_asked,
            "capture_timeouts": self.capture_timeouts,
            "manual_fallbacks": self.manual_fallbacks,
            "errors_occurred": self.errors_occurred
        }

    def reset(self) -> None:
        """Reset all metrics to zero."""
        self.sessions_started = 0
        self.sessions_completed = 0
        self.sessions_stopped = 0
        self.steps_recorded = 0
        self.followups_asked = 0
        self.capture_timeouts = 0
        self.manual_fallbacks = 0
        self.errors_occurred = 0
