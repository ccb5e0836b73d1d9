"""
Session Manager - Creates and manages worksheet sessions.

LIFECYCLE:
1. Browser opens the page -> create ephemeral session (in-memory only)
2. User picks JSON or photo input
3. Photo path: each photo goes through the extraction gateway and is
   folded into the draft (first replaces, later ones merge)
4. User reviews and edits, then generates the grid
5. "Back to start" resets the session; leaving the page drops it

PERSISTENCE RULES:
- NO database
- Sessions live only in this process
- Nothing survives a reset
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
import time
import uuid

from ..config import DEFAULT_SESSION_MAX_AGE
from ..workflow import Action, ActionResult, Reducer, WorksheetState

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """
    An ephemeral worksheet session.

    Owns exactly one WorksheetState. The only writer is dispatch(),
    which swaps in the reducer's new snapshot.
    """
    session_id: str
    created_at: float
    state: WorksheetState = field(default_factory=WorksheetState.initial)
    updated_at: float = 0.0

    # Last recoverable error shown to the user
    last_error: str | None = None

    reducer: Reducer = field(default_factory=Reducer, repr=False)

    def dispatch(self, action: Action) -> ActionResult:
        """
        Apply an action and commit the resulting state.

        A failed action normally leaves the state unchanged. A failure
        that still carries a new_state (a failed photo clears its
        preview) commits that state.
        """
        result = self.reducer.apply(self.state, action)
        if result.new_state is not None:
            self.state = result.new_state
            self.updated_at = time.time()
        self.last_error = None if result.success else result.error

        if not result.success:
            logger.info(
                "Session %s: %s rejected (%s)",
                self.session_id,
                action.action_type.value,
                result.error_code.value if result.error_code else "unknown",
            )
        return result


class SessionManager:
    """
    Manages worksheet sessions.

    No persistence - sessions are in-memory only. Sessions idle for longer
    than max_age_seconds are dropped whenever a new one is created.
    """

    def __init__(self, max_age_seconds: int = DEFAULT_SESSION_MAX_AGE):
        self.max_age_seconds = max_age_seconds
        self._sessions: dict[str, Session] = {}

    def create_session(self) -> Session:
        """Create a new session on the landing screen."""
        dropped = self.cleanup_stale_sessions()
        if dropped:
            logger.info("Dropped %d stale sessions", dropped)

        now = time.time()
        session = Session(
            session_id=str(uuid.uuid4()),
            created_at=now,
            updated_at=now,
        )
        self._sessions[session.session_id] = session
        logger.debug("Created session %s", session.session_id)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str) -> bool:
        """Drop a session and its state. Returns False if it did not exist."""
        return self._sessions.pop(session_id, None) is not None

    def cleanup_stale_sessions(self, max_age_seconds: int | None = None) -> int:
        """
        Drop sessions idle for longer than max_age.

        Returns how many were dropped.
        """
        if max_age_seconds is None:
            max_age_seconds = self.max_age_seconds
        current_time = time.time()
        stale = [
            session_id for session_id, session in self._sessions.items()
            if current_time - session.updated_at > max_age_seconds
        ]
        for session_id in stale:
            self.end_session(session_id)
        return len(stale)
