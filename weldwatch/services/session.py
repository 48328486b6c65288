from __future__ import annotations

import enum
import logging
from datetime import datetime

from weldwatch.models.measurement import Session

logger = logging.getLogger(__name__)

SESSION_PREFIX = "SESSION_"


class SessionState(enum.Enum):
    INACTIVE = "inactive"
    ACTIVE = "active"


class SessionEvent(enum.Enum):
    MONITORING_ON = "monitoring_on"
    MONITORING_OFF = "monitoring_off"


# (state, event) -> next state; pairs not listed leave the state unchanged.
TRANSITIONS: dict[tuple[SessionState, SessionEvent], SessionState] = {
    (SessionState.INACTIVE, SessionEvent.MONITORING_ON): SessionState.ACTIVE,
    (SessionState.ACTIVE, SessionEvent.MONITORING_OFF): SessionState.INACTIVE,
}


class SessionController:
    def __init__(self) -> None:
        self._current: Session | None = None

    @property
    def state(self) -> SessionState:
        return SessionState.ACTIVE if self._current is not None else SessionState.INACTIVE

    @property
    def current(self) -> Session | None:
        return self._current

    def activate(self, *, now: datetime) -> Session:
        """Start a session unless one is already active; return the active one."""
        if self._current is not None and not self._transition(SessionEvent.MONITORING_ON):
            return self._current
        millis = int(now.timestamp() * 1000)
        session = Session(token=f"{SESSION_PREFIX}{millis}", started_at=now)
        self._current = session
        logger.info("Session %s started", session.token, extra={"session": session.token})
        return session

    def deactivate(self) -> Session | None:
        """End the active session, returning it, or ``None`` if there was none."""
        ended = self._current
        if not self._transition(SessionEvent.MONITORING_OFF):
            return None
        self._current = None
        if ended is not None:
            logger.info("Session %s ended", ended.token, extra={"session": ended.token})
        return ended

    def _transition(self, event: SessionEvent) -> bool:
        return (self.state, event) in TRANSITIONS
