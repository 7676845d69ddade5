"""
Voice Gateway - browser voice clients to Gemini Live bridge

This package provides the voice session bridge of a multi-tenant assistant
backend. Browser clients open a WebSocket with an assistant UUID and an
organization API key; the gateway validates the key, loads the assistant's
configuration, opens a Gemini Live session with it, and relays audio and
engine events in both directions until either side closes.

Architecture Overview:
- FastAPI server exposing the voice WebSocket and health endpoints
- API key validation against an injected credential store
- Gemini Live integration over a raw WebSocket connection
- One engine session per client connection, torn down exactly once

Key Components:
- bot: The Gemini Live client and the voice bridge
- config: Constants, settings and logging setup
- handlers: Handshake parameter checks
- models: API key and assistant records, message envelopes, session state
- services: Access validation and the credential/assistant stores
- websocket_manager: Drives each connection from handshake to teardown

Getting Started:
1. Set up environment variables:
   - GEMINI_API_KEY: Your Gemini API key
   - VOICE_GATEWAY_DATA_FILE: JSON file with API keys and assistants
     (default data/gateway.json)
   - PORT / HOST / LOG_LEVEL

2. Start the server:
   ```bash
   python run.py
   ```

3. Connect a client to ``ws://host:8000/?assistantUuid=<uuid>&apiKey=<key>``
"""
