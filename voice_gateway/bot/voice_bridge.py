"""
Bridge between voice client WebSockets and Gemini Live sessions.

This module opens one engine session per client connection, forwards engine
events to the client as JSON envelopes, relays client audio frames to the
engine, and tears both sides down exactly once.
"""

import logging
from typing import Any, Callable, Dict, Optional

from fastapi import WebSocket

from voice_gateway.bot.gemini_live import (
    EngineConnectionError,
    LiveSessionClient,
    SessionCallbacks,
)
from voice_gateway.config.constants import (
    CLOSE_INTERNAL_ERROR,
    CLOSE_NORMAL,
    LOGGER_NAME,
    REASON_ENGINE_ERROR,
    REASON_SESSION_ENDED,
)
from voice_gateway.config.settings import Settings
from voice_gateway.models.access import ResourceSnapshot
from voice_gateway.models.gemini_schemas import EngineParams
from voice_gateway.models.message_schemas import (
    EngineEvent,
    ErrorEvent,
    OutgoingEvent,
    session_closed_event,
    session_opened_event,
)
from voice_gateway.models.session import SessionRegistry, SessionState, VoiceSession

logger = logging.getLogger(LOGGER_NAME)

ClientFactory = Callable[..., LiveSessionClient]


class VoiceBridge:
    """
    Bridge between voice clients and the Gemini Live API.

    This class handles:
    - Opening one engine session per client with the assistant's configuration
    - Forwarding engine events to the client
    - Relaying client audio to the engine
    - Closing both sides once when either side goes away
    """

    def __init__(
        self,
        settings: Settings,
        registry: Optional[SessionRegistry] = None,
        client_factory: ClientFactory = LiveSessionClient,
    ):
        self.settings = settings
        self.registry = registry if registry is not None else SessionRegistry()
        self.client_factory = client_factory

    def resolve_params(self, snapshot: ResourceSnapshot) -> EngineParams:
        """Engine parameters for an assistant, falling back to configured defaults."""
        return EngineParams(
            model=snapshot.model_id or self.settings.gemini_model,
            temperature=(
                snapshot.temperature
                if snapshot.temperature is not None
                else self.settings.gemini_temperature
            ),
            voice_name=snapshot.voice_id or self.settings.gemini_voice_name,
            trigger_tokens=self.settings.gemini_trigger_tokens,
            target_tokens=self.settings.gemini_target_tokens,
        )

    async def establish(self, snapshot: ResourceSnapshot, websocket: WebSocket) -> VoiceSession:
        """
        Open the engine session for a validated connection.

        Args:
            snapshot: Assistant configuration loaded for this connection
            websocket: The client WebSocket that receives engine events

        Returns:
            The active VoiceSession

        Raises:
            EngineConnectionError: If the engine session cannot be opened
        """
        if not self.settings.gemini_api_key:
            logger.error("GEMINI_API_KEY environment variable not set")
            raise EngineConnectionError("GEMINI_API_KEY environment variable not set")

        session = VoiceSession(websocket, snapshot)
        client = self.client_factory(
            self.settings.gemini_api_key,
            url=self.settings.gemini_live_url,
            connect_timeout=self.settings.engine_connect_timeout,
        )
        callbacks = SessionCallbacks(
            on_open=lambda: self._handle_engine_open(session),
            on_message=lambda message: self._handle_engine_message(session, message),
            on_error=lambda error: self._handle_engine_error(session, error),
            on_close=lambda reason: self._handle_engine_close(session, reason),
        )

        logger.info(f"Creating voice session for assistant {snapshot.resource_id}")
        try:
            await client.connect(snapshot.system_instruction, self.resolve_params(snapshot), callbacks)
        except EngineConnectionError:
            raise
        except Exception as e:
            raise EngineConnectionError(str(e)) from e

        session.handle = client
        session.state = SessionState.ACTIVE
        self.registry.add_session(session)
        logger.info(f"Voice session {session.session_id} active for assistant {snapshot.resource_id}")

        await self._send_greeting(session)
        return session

    async def _send_greeting(self, session: VoiceSession) -> None:
        """Send the opening utterance once when the assistant speaks first."""
        snapshot = session.snapshot
        if not snapshot.engine_speaks_first or session.greeting_sent:
            return
        if not snapshot.opening_utterance:
            logger.warning(f"Assistant {snapshot.resource_id} speaks first but has no first message")
            return

        logger.info(f"Sending initial greeting for session {session.session_id}")
        if await session.handle.send_text(snapshot.opening_utterance):
            session.greeting_sent = True

    async def relay_audio(self, session: VoiceSession, chunk: bytes) -> bool:
        """
        Forward one client audio frame to the engine, unchanged.

        Returns:
            bool: True if the frame was handed to the engine
        """
        if not session.active:
            logger.debug(f"Dropping audio frame for inactive session {session.session_id}")
            return False
        return await session.handle.send_audio(chunk)

    async def _handle_engine_open(self, session: VoiceSession) -> None:
        await self._send_event(session, session_opened_event())

    async def _handle_engine_message(self, session: VoiceSession, message: Dict[str, Any]) -> None:
        await self._send_event(session, EngineEvent(data=message))

    async def _handle_engine_error(self, session: VoiceSession, error: str) -> None:
        logger.error(f"Engine error in session {session.session_id}: {error}")
        session.engine_failed = True
        await self._send_event(session, ErrorEvent(data=error))
        # The client is closed by the on_close that follows
        await self.teardown(session)

    async def _handle_engine_close(self, session: VoiceSession, reason: str) -> None:
        await self._send_event(session, session_closed_event(reason))
        # The engine side is already gone; only the bookkeeping is left
        self._mark_closed(session)
        if session.engine_failed:
            await self.close_inbound(session, CLOSE_INTERNAL_ERROR, REASON_ENGINE_ERROR)
        else:
            await self.close_inbound(session, CLOSE_NORMAL, REASON_SESSION_ENDED)

    async def _send_event(self, session: VoiceSession, event: OutgoingEvent) -> None:
        """Send an envelope to the client; failures are logged and dropped."""
        if session.client_closed:
            return
        try:
            await session.websocket.send_text(event.model_dump_json())
        except Exception as e:
            logger.debug(f"Could not send {event.type} event to client: {e}")

    def _mark_closed(self, session: VoiceSession) -> bool:
        if session.closed:
            return False
        session.closed = True
        session.state = SessionState.CLOSED
        self.registry.remove_session(session.session_id)
        return True

    async def teardown(self, session: Optional[VoiceSession]) -> None:
        """
        Close the engine side of a session. Safe to call more than once and with None.

        Args:
            session: The session to close, or None if none was established
        """
        if session is None:
            return
        if not self._mark_closed(session):
            logger.debug(f"Session {session.session_id} already closed")
            return

        if session.handle is not None:
            try:
                await session.handle.close()
            except Exception as e:
                logger.error(f"Error closing engine session {session.session_id}: {e}", exc_info=True)

        logger.info(f"Voice session {session.session_id} closed")

    async def close_inbound(self, session: VoiceSession, code: int, reason: str) -> None:
        """Close the client WebSocket once."""
        if session.client_closed:
            return
        session.client_closed = True
        try:
            await session.websocket.close(code=code, reason=reason)
        except Exception as e:
            logger.debug(f"Error closing client connection: {e}")
