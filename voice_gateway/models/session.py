"""
Voice session state for connected clients.

This module provides the VoiceSession record that ties one client WebSocket to
one speech engine session, and the SessionRegistry that tracks the sessions
currently active on this process. Sessions are transient and never persisted.
"""

import uuid
from enum import Enum
from typing import Any, Dict, Optional

from fastapi import WebSocket

from voice_gateway.models.access import ResourceSnapshot


class SessionState(str, Enum):
    """Lifecycle of a voice connection."""

    INIT = "init"
    VALIDATING = "validating"
    ESTABLISHING = "establishing"
    ACTIVE = "active"
    REJECTED = "rejected"
    CLOSED = "closed"


class VoiceSession:
    """
    One live voice connection.

    Holds the client WebSocket, the engine session handle, and the flags used to
    keep the opening greeting and both closes at-most-once.
    """

    def __init__(self, websocket: WebSocket, snapshot: ResourceSnapshot):
        self.session_id = str(uuid.uuid4())
        self.websocket = websocket
        self.snapshot = snapshot
        self.handle: Optional[Any] = None
        self.state = SessionState.ESTABLISHING
        self.greeting_sent = False
        self.engine_failed = False
        self.closed = False
        self.client_closed = False

    @property
    def active(self) -> bool:
        return self.state == SessionState.ACTIVE and not self.closed

    def __repr__(self) -> str:
        return (
            f"VoiceSession(id={self.session_id}, assistant={self.snapshot.resource_id}, "
            f"state={self.state.value})"
        )


class SessionRegistry:
    """
    Registry of active voice sessions.

    Used for reporting only; sessions never read each other's state.
    """

    def __init__(self):
        """Initialize an empty dictionary of active sessions."""
        self.active_sessions: Dict[str, VoiceSession] = {}

    def add_session(self, session: VoiceSession):
        """
        Add a session to the registry.

        Args:
            session: The session that reached the active state
        """
        self.active_sessions[session.session_id] = session

    def get_session(self, session_id: str) -> Optional[VoiceSession]:
        """
        Get an active session by its ID.

        Args:
            session_id: Identifier assigned when the session was created

        Returns:
            The session, or None if it is not registered
        """
        return self.active_sessions.get(session_id)

    def remove_session(self, session_id: str):
        """
        Remove a session from the registry. Unknown IDs are ignored.

        Args:
            session_id: Identifier of the session to remove
        """
        self.active_sessions.pop(session_id, None)

    def __len__(self) -> int:
        return len(self.active_sessions)
