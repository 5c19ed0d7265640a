"""
Session Manager - Creates and manages grid sessions.

LIFECYCLE:
1. Front end opens a grid -> create ephemeral session (in-memory only)
2. While the grid is open:
   - Input handler validates drag/click events into commands
   - Session applies them through its PlacementEngine
   - Renderer receives the new card tuple
3. Grid closed or idle too long -> session destroyed, ALL state deleted

PERSISTENCE RULES:
- NO database
- Grid state is session-scoped and lost on restart
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any
import time
import uuid

import structlog

from ..engine_core import (
    Catalog,
    Command,
    CommandResult,
    GridState,
    PlacementEngine,
    default_catalog,
    make_id_generator,
)


logger = structlog.get_logger(__name__)


@dataclass
class GridSession:
    """
    An ephemeral grid session.

    Contains:
    - The placement engine (which owns the live grid)
    - The result of the last command (for UI feedback)
    - Session metadata
    """
    session_id: str
    engine: PlacementEngine
    created_at: float
    updated_at: float = 0.0
    commands_applied: int = 0
    last_result: CommandResult | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def state(self) -> GridState:
        return self.engine.state

    def execute(self, command: Command) -> CommandResult:
        """Apply a command and record the outcome."""
        result = self.engine.apply(command)
        self.last_result = result
        self.updated_at = time.time()
        if result.applied:
            self.commands_applied += 1
        return result


class SessionManager:
    """
    Manages grid sessions.

    Responsibilities:
    - Create sessions with their own engine
    - Track active sessions
    - Clean up idle sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self, catalog: Catalog | None = None, id_strategy: str = "sequential"):
        self.catalog = catalog if catalog is not None else default_catalog()
        self.id_strategy = id_strategy
        self._sessions: dict[str, GridSession] = {}

    def create_session(
        self,
        id_strategy: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> GridSession:
        """
        Create a new grid session.

        Args:
            id_strategy: Card id strategy override ("sequential" or "uuid")
            metadata: Free-form data stored with the session

        Returns:
            New session holding an empty grid

        Raises:
            ValueError: if id_strategy is unknown
        """
        engine = PlacementEngine(
            catalog=self.catalog,
            id_generator=make_id_generator(id_strategy or self.id_strategy),
        )
        now = time.time()
        session = GridSession(
            session_id=str(uuid.uuid4()),
            engine=engine,
            created_at=now,
            updated_at=now,
            metadata=metadata or {},
        )
        self._sessions[session.session_id] = session
        logger.info("session_created", session_id=session.session_id)
        return session

    def get_session(self, session_id: str) -> GridSession | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "closed") -> bool:
        """
        End a session and drop its grid.

        Returns False when the session did not exist.
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        logger.info(
            "session_ended",
            session_id=session_id,
            reason=reason,
            cards=len(session.state),
        )
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return list(self._sessions)

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600, now: float | None = None) -> list[str]:
        """
        End sessions idle for longer than max_age_seconds.

        Returns the IDs that were removed.
        """
        current_time = time.time() if now is None else now
        stale = [
            session_id for session_id, session in self._sessions.items()
            if current_time - session.updated_at > max_age_seconds
        ]
        for session_id in stale:
            self.end_session(session_id, reason="stale")
        return stale
