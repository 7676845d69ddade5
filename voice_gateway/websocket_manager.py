"""
WebSocket connection manager for voice clients.

This module drives one client connection through its lifecycle:

    INIT -> VALIDATING -> ESTABLISHING -> ACTIVE -> CLOSED

Any state before ACTIVE can end in REJECTED.

- INIT: the handshake must carry ``assistantUuid`` and ``apiKey``
- VALIDATING: the API key is checked and the assistant snapshot loaded
- ESTABLISHING: the Gemini Live session is opened
- ACTIVE: binary frames from the client are relayed to the engine in order
- CLOSED: either side went away and both were closed once

Connections rejected before ACTIVE are closed with a close code and a short
reason; nothing is retried.
"""

import logging

from fastapi import WebSocket, WebSocketDisconnect

from voice_gateway.bot.voice_bridge import VoiceBridge
from voice_gateway.config.constants import (
    CLOSE_INTERNAL_ERROR,
    CLOSE_NORMAL,
    CLOSE_POLICY_VIOLATION,
    LOGGER_NAME,
    REASON_ACCESS_DENIED,
    REASON_ENGINE_ERROR,
    REASON_SESSION_ENDED,
    REASON_UPSTREAM_UNAVAILABLE,
    REASON_VALIDATION_FAILED,
)
from voice_gateway.handlers.connection_handlers import (
    MissingConnectionParam,
    extract_connection_params,
    reject_connection,
)
from voice_gateway.models.access import AccessDenied
from voice_gateway.models.session import SessionState, VoiceSession
from voice_gateway.services.access_validator import AccessValidator, mask_api_key

logger = logging.getLogger(LOGGER_NAME)


class WebSocketManager:
    """Runs voice client connections from handshake to teardown.

    The validator and bridge are injected so that every connection shares the
    same stores and session registry without reaching for module globals.
    """

    def __init__(self, validator: AccessValidator, bridge: VoiceBridge):
        self.validator = validator
        self.bridge = bridge

    @property
    def registry(self):
        return self.bridge.registry

    async def handle_websocket(self, websocket: WebSocket):
        """Handle a voice WebSocket connection throughout its lifecycle.

        Args:
            websocket (WebSocket): The FastAPI WebSocket connection object

        The connection is accepted first so that rejections carry a close code
        the client can read.
        """
        await websocket.accept()
        logger.info("Voice client connected")

        try:
            params = extract_connection_params(websocket.query_params)
        except MissingConnectionParam as e:
            logger.warning(f"Connection {SessionState.REJECTED.value}: {e.reason}")
            await reject_connection(websocket, CLOSE_POLICY_VIOLATION, e.reason)
            return

        logger.info(
            f"Validating API key {mask_api_key(params.api_key)} "
            f"for assistant {params.assistant_uuid}"
        )
        try:
            result = await self.validator.validate(params.api_key, params.assistant_uuid)
        except Exception as e:
            logger.error(f"Failed to validate assistant access: {e}", exc_info=True)
            await reject_connection(websocket, CLOSE_INTERNAL_ERROR, REASON_VALIDATION_FAILED)
            return

        if isinstance(result, AccessDenied):
            logger.warning(
                f"Access denied to assistant {params.assistant_uuid} ({result.reason.value})"
            )
            await reject_connection(websocket, CLOSE_POLICY_VIOLATION, REASON_ACCESS_DENIED)
            return

        logger.info(f"Assistant details loaded: {result.name or result.resource_id}")
        try:
            session = await self.bridge.establish(result, websocket)
        except Exception as e:
            logger.error(f"Failed to connect to Gemini: {e}")
            await reject_connection(websocket, CLOSE_INTERNAL_ERROR, REASON_UPSTREAM_UNAVAILABLE)
            return

        await self._relay(session)

    async def _relay(self, session: VoiceSession) -> None:
        """Forward client audio frames until either side closes, then tear down."""
        websocket = session.websocket
        close_code, close_reason = CLOSE_NORMAL, REASON_SESSION_ENDED
        try:
            while True:
                message = await websocket.receive()

                if message["type"] == "websocket.disconnect":
                    session.client_closed = True
                    logger.info("Voice client disconnected")
                    break

                chunk = message.get("bytes")
                if chunk is not None:
                    await self.bridge.relay_audio(session, chunk)
                elif message.get("text") is not None:
                    logger.debug("Ignoring text frame from voice client")
        except WebSocketDisconnect:
            session.client_closed = True
            logger.info("Voice client disconnected")
        except Exception as e:
            logger.error(f"Error in voice connection: {e}", exc_info=True)
            close_code, close_reason = CLOSE_INTERNAL_ERROR, REASON_ENGINE_ERROR
        finally:
            await self.bridge.teardown(session)
            await self.bridge.close_inbound(session, close_code, close_reason)
            logger.info("Voice connection closed")
