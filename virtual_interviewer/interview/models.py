"""
Data models for the interview system.
"""
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Dict, List, Tuple, Any


@dataclass(frozen=True)
class JobTemplate:
    """Static role definition: title, required skill keywords and ordered questions."""
    title: str
    skills: Tuple[str, ...]
    questions: Tuple[str, ...]


@dataclass(frozen=True)
class Step:
    """A single recorded question/answer/score, primary or follow-up."""
    question: str
    answer: str
    score: int
    rationale: str
    timestamp: str
    followup: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "question": self.question,
            "answer": self.answer,
            "score": self.score,
            "rationale": self.rationale,
            "timestamp": self.timestamp,
            "followup": self.followup,
        }


def new_session_id() -> str:
    """Generate a session token from the current time in milliseconds."""
    return f"s_{int(time.time() * 1000)}"


def now_iso() -> str:
    return datetime.now().isoformat()


@dataclass
class Session:
    """One interview run. Mutated only by the SessionController that created it."""
    id: str
    job_key: str
    job_title: str
    started_at: str
    steps: List[Step] = field(default_factory=list)
    ended_at: Optional[str] = None
    completed_at: Optional[str] = None
    final_score: Optional[int] = None

    @classmethod
    def create(cls, job_key: str, job: JobTemplate) -> "Session":
        return cls(
            id=new_session_id(),
            job_key=job_key,
            job_title=job.title,
            started_at=now_iso(),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Export document; absent timestamps are left out, finalScore is null until finalized."""
        data: Dict[str, Any] = {
            "id": self.id,
            "jobKey": self.job_key,
            "jobTitle": self.job_title,
            "startedAt": self.started_at,
        }
        if self.ended_at is not None:
            data["endedAt"] = self.ended_at
        if self.completed_at is not None:
            data["completedAt"] = self.completed_at
        data["steps"] = [step.to_dict() for step in self.steps]
        data["finalScore"] = self.final_score
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Session":
        steps = [
            Step(
                question=s["question"],
                answer=s.get("answer") or "",
                score=int(s["score"]),
                rationale=s.get("rationale", ""),
                timestamp=s.get("timestamp", ""),
                followup=bool(s.get("followup", False)),
            )
            for s in data.get("steps", [])
        ]
        return cls(
            id=data["id"],
            job_key=data["jobKey"],
            job_title=data["jobTitle"],
            started_at=data["startedAt"],
            steps=steps,
            ended_at=data.get("endedAt"),
            completed_at=data.get("completedAt"),
            final_score=data.get("finalScore"),
        )
