"""
Console presenter: renders interview events for a terminal user.
"""
import sys
from typing import Callable, Optional, TextIO

from .events import EventType, InterviewEvent, InterviewEventBus
from .models import Session
from .report import render_final_report


class ConsolePresenter:
    """Subscribes to the event bus and prints transcript updates and the final report."""

    def __init__(self,
                 session_provider: Callable[[], Optional[Session]],
                 stream: Optional[TextIO] = None,
                 show_interim: bool = True):
        self.session_provider = session_provider
        self.stream = stream or sys.stdout
        self.show_interim = show_interim

    def attach(self, event_bus: InterviewEventBus) -> None:
        event_bus.subscribe(EventType.SESSION_STARTED, self.on_session_started)
        event_bus.subscribe(EventType.TRANSCRIPT_UPDATED, self.on_transcript)
        event_bus.subscribe(EventType.CAPTURE_TIMED_OUT, self.on_timeout)
        event_bus.subscribe(EventType.STEP_RECORDED, self.on_step)
        event_bus.subscribe(EventType.SESSION_COMPLETED, self.on_finished)
        event_bus.subscribe(EventType.SESSION_STOPPED, self.on_finished)

    def _print(self, text: str) -> None:
        print(text, file=self.stream, flush=True)

    def on_session_started(self, event: InterviewEvent) -> None:
        data = event.data
        self._print(f"\n🎙️  Starting interview for {data['job_title']} - {data['question_count']} questions")
        self._print("=" * 50)

    def on_transcript(self, event: InterviewEvent) -> None:
        if event.data["final"]:
            self._print(f"💬 \"{event.data['final']}\"")
        elif self.show_interim and event.data["interim"]:
            self._print(f"   ... {event.data['interim']}")

    def on_timeout(self, event: InterviewEvent) -> None:
        self._print(f"⏰ No response detected after {event.data['timeout_seconds']:.0f}s")

    def on_step(self, event: InterviewEvent) -> None:
        data = event.data
        label = "Follow-up" if data["followup"] else f"Step {data['step_idx']}"
        self._print(f"📊 {label} score: {data['score']} - {data['rationale']}")

    def on_finished(self, event: InterviewEvent) -> None:
        session = self.session_provider()
        if session is not None:
            self._print("\n" + render_final_report(session))
