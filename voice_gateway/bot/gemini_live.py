"""
Client for the Gemini Live API over WebSocket.

One ``LiveSessionClient`` owns one ``BidiGenerateContent`` session. Engine
events are delivered to a single ``SessionCallbacks`` subscriber in the order
the engine emits them.
"""

import asyncio
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

import websockets
from websockets.exceptions import ConnectionClosed, ConnectionClosedError, ConnectionClosedOK

from voice_gateway.config.constants import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_LIVE_URL,
    LOGGER_NAME,
)
from voice_gateway.models.gemini_schemas import (
    EngineParams,
    build_audio_input,
    build_setup_message,
    build_text_input,
)

logger = logging.getLogger(LOGGER_NAME)

# WebSocket configuration
WS_MAX_SIZE = 16 * 1024 * 1024  # 16MB - large enough for audio chunks
WS_PING_INTERVAL = 20
WS_PING_TIMEOUT = 20


class EngineConnectionError(Exception):
    """The engine session could not be opened."""


@dataclass
class SessionCallbacks:
    """Event subscriber for one engine session.

    When the engine ends the session, ``on_error`` (abnormal close only) is
    always followed by ``on_close``.
    """

    on_open: Optional[Callable[[], Awaitable[None]]] = None
    on_message: Optional[Callable[[Dict[str, Any]], Awaitable[None]]] = None
    on_error: Optional[Callable[[str], Awaitable[None]]] = None
    on_close: Optional[Callable[[str], Awaitable[None]]] = None


def _close_reason(exc: ConnectionClosed) -> str:
    frame = exc.rcvd or exc.sent
    if frame is None:
        return "connection lost"
    return frame.reason or f"code {frame.code}"


class LiveSessionClient:
    """
    Client for one Gemini Live streaming session.
    """

    def __init__(
        self,
        api_key: str,
        url: str = DEFAULT_LIVE_URL,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
    ):
        self.api_key = api_key
        self.url = url
        self.connect_timeout = connect_timeout
        self.ws = None
        self.callbacks = SessionCallbacks()
        self._recv_task: Optional[asyncio.Task] = None
        self._connection_active = False
        self._is_closing = False

    @property
    def active(self) -> bool:
        return self._connection_active

    async def connect(
        self,
        system_instruction: str,
        params: EngineParams,
        callbacks: SessionCallbacks,
    ) -> "LiveSessionClient":
        """
        Open the Live session, send the setup message and start receiving.

        Args:
            system_instruction: System prompt for the assistant
            params: Resolved model, temperature and voice
            callbacks: Subscriber for open/message/error/close events

        Returns:
            This client, ready to send audio and text

        Raises:
            EngineConnectionError: If the connection or setup fails or times out
        """
        if self._is_closing:
            raise EngineConnectionError("Client is closed")

        self.callbacks = callbacks
        headers = {"x-goog-api-key": self.api_key}

        try:
            logger.info(f"Connecting to Gemini Live with model: {params.model}")
            connection_start = time.time()
            self.ws = await asyncio.wait_for(
                websockets.connect(
                    self.url,
                    max_size=WS_MAX_SIZE,
                    ping_interval=WS_PING_INTERVAL,
                    ping_timeout=WS_PING_TIMEOUT,
                    compression=None,
                    additional_headers=headers,
                ),
                timeout=self.connect_timeout,
            )
            logger.debug(f"Gemini Live connection established in {time.time() - connection_start:.2f}s")
        except asyncio.TimeoutError as e:
            raise EngineConnectionError(
                f"Timeout while connecting to Gemini Live (after {self.connect_timeout}s)"
            ) from e
        except Exception as e:
            raise EngineConnectionError(f"Failed to connect to Gemini Live: {e}") from e

        try:
            setup = build_setup_message(system_instruction, params)
            await self.ws.send(setup.model_dump_json(exclude_none=True))
        except Exception as e:
            await self._discard_connection()
            raise EngineConnectionError(f"Failed to send session setup: {e}") from e

        self._connection_active = True
        logger.info(f"Gemini session opened: {params.model}")
        await self._dispatch(self.callbacks.on_open)

        self._recv_task = asyncio.create_task(self._recv_loop())
        return self

    async def send_audio(self, chunk: bytes) -> bool:
        """
        Send a raw PCM chunk as realtime audio input.

        Returns:
            bool: True if the chunk was sent, False if the session is not active
        """
        return await self._send(build_audio_input(chunk).model_dump_json(exclude_none=True))

    async def send_text(self, text: str) -> bool:
        """
        Send a text turn as realtime input.

        Returns:
            bool: True if the text was sent, False if the session is not active
        """
        return await self._send(build_text_input(text).model_dump_json(exclude_none=True))

    async def _send(self, payload: str) -> bool:
        if not self._connection_active or self.ws is None:
            logger.warning("Cannot send to Gemini - connection not active")
            return False

        try:
            await self.ws.send(payload)
            return True
        except ConnectionClosed as e:
            logger.warning(f"Gemini connection closed while sending: {_close_reason(e)}")
            self._connection_active = False
            return False

    async def _recv_loop(self) -> None:
        """
        Receive engine messages and hand them to the subscriber in order.

        When the engine ends the session, on_error (abnormal close only) and
        then on_close are fired. A close started by ``close()`` before the
        engine ended the session fires nothing.
        """
        error: Optional[str] = None
        reason = "connection lost"

        try:
            while self._connection_active:
                message = await self.ws.recv()
                try:
                    if isinstance(message, bytes):
                        message = message.decode("utf-8")
                    data = json.loads(message)
                except ValueError:
                    logger.warning(f"Received invalid message from Gemini: {str(message)[:100]}...")
                    continue

                self._log_message(data)
                await self._dispatch(self.callbacks.on_message, data)
        except ConnectionClosedOK as e:
            reason = _close_reason(e)
        except ConnectionClosedError as e:
            reason = _close_reason(e)
            error = f"Gemini connection closed unexpectedly: {reason}"
        except Exception as e:
            reason = "receive failed"
            error = str(e) or e.__class__.__name__
        finally:
            self._connection_active = False

        if self._is_closing:
            return

        # The engine ended the session: on_close follows on_error even when the
        # error handler has already called close()
        if error:
            logger.error(f"Gemini error: {error}")
            await self._dispatch(self.callbacks.on_error, error)
        logger.info(f"Gemini session closed: {reason}")
        await self._dispatch(self.callbacks.on_close, reason)

    @staticmethod
    def _log_message(data: Dict[str, Any]) -> None:
        server_content = data.get("serverContent") or {}
        if server_content.get("interrupted"):
            logger.info("Gemini interrupted")
        parts = (server_content.get("modelTurn") or {}).get("parts") or []
        if parts:
            logger.debug(f"Gemini message chunk received: {len(parts)} parts")
        if not (parts and parts[0].get("inlineData")):
            logger.debug(f"Gemini message: {json.dumps(data)[:500]}")

    async def _dispatch(self, callback: Optional[Callable[..., Awaitable[None]]], *args) -> None:
        if callback is None:
            return
        try:
            await callback(*args)
        except Exception as e:
            logger.error(f"Error in Gemini session callback: {e}", exc_info=True)

    async def _discard_connection(self) -> None:
        if self.ws is not None:
            try:
                await self.ws.close()
            except Exception as e:
                logger.debug(f"Error closing Gemini connection: {e}")
        self.ws = None
        self._connection_active = False

    async def close(self) -> None:
        """
        Close the session. Safe to call more than once, including from a callback.
        """
        if self._is_closing:
            return

        logger.info("Closing Gemini session")
        self._is_closing = True
        self._connection_active = False

        task = self._recv_task
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        await self._discard_connection()
        logger.info("Gemini session closed by gateway")
