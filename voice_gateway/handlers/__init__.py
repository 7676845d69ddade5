"""
Handlers module for the voice WebSocket handshake.

Key components:
- connection_handlers: Extracts the ``assistantUuid`` and ``apiKey`` query
  parameters from the handshake and closes connections that are missing them.
"""
