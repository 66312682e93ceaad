"""
Plain-text rendering of a session: running transcript and final report.
"""
from typing import List

from .models import Session, Step

RULE = "=" * 50


def _render_step(idx: int, step: Step) -> str:
    label = f"Q{idx}" + (" (follow-up)" if step.followup else "")
    return (
        f"{label}: {step.question}\n"
        f"A: {step.answer or '(no response)'}\n"
        f"Score: {step.score} - {step.rationale}"
    )


def render_transcript(session: Session) -> str:
    """All recorded steps, separated by rules."""
    return "\n---\n".join(_render_step(i, s) for i, s in enumerate(session.steps, start=1))


def render_final_report(session: Session) -> str:
    """Final report: role, final score and per-step details."""
    lines: List[str] = [RULE]
    if session.ended_at:
        lines.append(f"🛑 INTERVIEW STOPPED - {session.job_title}")
    else:
        lines.append(f"🎯 FINAL REPORT - {session.job_title}")
    lines.append(RULE)
    score = session.final_score if session.final_score is not None else "n/a"
    lines.append(f"🔢 Final Score: {score}")
    lines.append(f"📝 Steps recorded: {len(session.steps)}")
    if session.steps:
        lines.append("Details:")
        lines.append(render_transcript(session))
    return "\n".join(lines)
