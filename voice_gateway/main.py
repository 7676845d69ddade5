"""
FastAPI server for the voice gateway.

This module initializes the FastAPI application that browser clients connect to
for real-time voice conversations with an assistant. Clients open a WebSocket
with ``?assistantUuid=<uuid>&apiKey=<key>``, stream raw PCM audio as binary
frames, and receive JSON envelopes carrying the Gemini Live session's events.
"""

from pathlib import Path

import dotenv
from fastapi import FastAPI, WebSocket

from voice_gateway.bot.voice_bridge import VoiceBridge
from voice_gateway.config.logging_config import configure_logging
from voice_gateway.config.settings import get_settings
from voice_gateway.services.access_validator import AccessValidator
from voice_gateway.services.stores import load_stores
from voice_gateway.websocket_manager import WebSocketManager

# Load environment variables from .env file if it exists
env_path = Path(".") / ".env"
if env_path.exists():
    dotenv.load_dotenv(env_path)

settings = get_settings()
logger = configure_logging(settings.log_level)

APP_NAME = "Voice Gateway"
APP_VERSION = "1.0.0"

app = FastAPI(
    title=APP_NAME,
    description="Bridge between browser voice clients and the Gemini Live API",
    version=APP_VERSION,
)

credential_store, resource_store = load_stores(settings.data_file)
websocket_manager = WebSocketManager(
    validator=AccessValidator(credential_store, resource_store),
    bridge=VoiceBridge(settings),
)


@app.websocket("/")
@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """WebSocket endpoint for real-time voice conversations.

    Query parameters:
    - assistantUuid: UUID of the assistant to talk to
    - apiKey: API key of the assistant's organization

    Messages from the client are raw PCM audio (16-bit, 16kHz, mono) in binary
    frames. Messages to the client:
    - {"type": "status", "data": "..."}
    - {"type": "gemini", "data": {...}}
    - {"type": "error", "data": "..."}
    """
    await websocket_manager.handle_websocket(websocket)


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring system status.

    Returns:
        dict: Status information including the number of active voice sessions.
    """
    return {
        "status": "healthy",
        "engine_api_key_configured": bool(websocket_manager.bridge.settings.gemini_api_key),
        "active_sessions": len(websocket_manager.registry),
    }


@app.get("/")
async def root():
    """Root endpoint to display basic information about the API.

    Returns:
        dict: Basic information about the API and its endpoints.
    """
    return {
        "name": APP_NAME,
        "description": "Bridge between browser voice clients and the Gemini Live API",
        "version": APP_VERSION,
        "endpoints": {
            "/ws": "WebSocket endpoint for voice clients (also served at /)",
            "/health": "Health check endpoint",
        },
        "voice_websocket": "ws://{host}/?assistantUuid={uuid}&apiKey={key}",
    }


if __name__ == "__main__":
    import uvicorn

    logger.info(f"Starting server on http://{settings.host}:{settings.port}")
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        websocket_max_size=16777216,  # 16MB - large enough for audio chunks
        http="h11",
    )
