"""
Persistence of finished interview sessions.
"""

from .export import save_session, load_session

__all__ = [
    'save_session',
    'load_session'
]
