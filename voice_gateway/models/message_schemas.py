"""
Pydantic models for the messages the gateway sends to voice clients.

Every server-to-client message is a JSON text frame with a ``type``
discriminator and a ``data`` payload:

- ``{"type": "status", "data": "<text>"}`` for session opened/closed notices
- ``{"type": "gemini", "data": {...}}`` for engine messages passed through untouched
- ``{"type": "error", "data": "<text>"}`` for engine errors

Client-to-server traffic is raw binary audio and has no schema.
"""

from typing import Any, Dict, Literal, Union

from pydantic import BaseModel, Field

from voice_gateway.config.constants import (
    EVENT_TYPE_ENGINE,
    EVENT_TYPE_ERROR,
    EVENT_TYPE_STATUS,
    STATUS_SESSION_CLOSED,
    STATUS_SESSION_OPENED,
)


class BaseEvent(BaseModel):
    """Base model for all messages sent to the client."""

    type: str = Field(..., description="Message type identifier")


class StatusEvent(BaseEvent):
    """Session lifecycle notification."""

    type: Literal["status"] = EVENT_TYPE_STATUS
    data: str


class EngineEvent(BaseEvent):
    """Opaque pass-through of a speech engine message."""

    type: Literal["gemini"] = EVENT_TYPE_ENGINE
    data: Dict[str, Any]


class ErrorEvent(BaseEvent):
    """Error raised by the speech engine during an active session."""

    type: Literal["error"] = EVENT_TYPE_ERROR
    data: str


OutgoingEvent = Union[StatusEvent, EngineEvent, ErrorEvent]


def session_opened_event() -> StatusEvent:
    return StatusEvent(data=STATUS_SESSION_OPENED)


def session_closed_event(reason: str) -> StatusEvent:
    return StatusEvent(data=f"{STATUS_SESSION_CLOSED}: {reason}")
