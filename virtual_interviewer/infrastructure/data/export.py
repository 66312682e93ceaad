"""
Session export: the finished Session as a JSON document.
"""
import json
import logging
import os

from ...interview.models import Session

logger = logging.getLogger("session_export")


def save_session(session: Session, directory: str) -> str:
    """
    Write a session to ``<directory>/<session id>.json``.

    Returns:
        Path of the written file
    """
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, f"{session.id}.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(session.to_dict(), f, indent=2, ensure_ascii=False)
    logger.info(f"Exported session {session.id} to {path}")
    return path


def load_session(path: str) -> Session:
    """Read a previously exported session."""
    with open(path, "r", encoding="utf-8") as f:
        return Session.from_dict(json.load(f))
