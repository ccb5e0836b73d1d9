"""
Session Module - Manages ephemeral worksheet sessions.

A session represents one visit to the page:
- Created when the page loads
- Holds the current worksheet state
- Folds photo extraction results into the draft
- Dropped on reset or when it goes stale

Sessions are EPHEMERAL: nothing is written to disk.
"""

from .manager import SessionManager, Session
from .photo_loop import PhotoLoop

__all__ = [
    "SessionManager",
    "Session",
    "PhotoLoop",
]
