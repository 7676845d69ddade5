"""
Handshake checks for incoming voice connections.

Voice clients connect with ``?assistantUuid=<uuid>&apiKey=<key>``. Both
parameters are required; a connection missing either one is closed with a
policy-violation code before any store is touched.
"""

import logging
from dataclasses import dataclass
from typing import Mapping

from fastapi import WebSocket

from voice_gateway.config.constants import (
    LOGGER_NAME,
    PARAM_API_KEY,
    PARAM_ASSISTANT_UUID,
    REASON_MISSING_API_KEY,
    REASON_MISSING_ASSISTANT,
)

logger = logging.getLogger(LOGGER_NAME)


class MissingConnectionParam(Exception):
    """A required handshake parameter was absent or blank."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


@dataclass(frozen=True)
class ConnectionParams:
    """Parameters carried by the voice WebSocket URL."""

    assistant_uuid: str
    api_key: str


def extract_connection_params(query_params: Mapping[str, str]) -> ConnectionParams:
    """
    Read the assistant UUID and API key from the handshake query string.

    Args:
        query_params: Query parameters of the WebSocket request

    Returns:
        The connection parameters

    Raises:
        MissingConnectionParam: If either parameter is missing or blank
    """
    assistant_uuid = (query_params.get(PARAM_ASSISTANT_UUID) or "").strip()
    api_key = (query_params.get(PARAM_API_KEY) or "").strip()

    if not assistant_uuid:
        raise MissingConnectionParam(REASON_MISSING_ASSISTANT)
    if not api_key:
        raise MissingConnectionParam(REASON_MISSING_API_KEY)

    return ConnectionParams(assistant_uuid=assistant_uuid, api_key=api_key)


async def reject_connection(websocket: WebSocket, code: int, reason: str) -> None:
    """
    Close an accepted WebSocket with a close code and reason.

    Errors while closing are logged; the connection is finished either way.
    """
    logger.info(f"Rejecting voice connection ({code}): {reason}")
    try:
        await websocket.close(code=code, reason=reason)
    except Exception as e:
        logger.debug(f"Error closing rejected connection: {e}")
