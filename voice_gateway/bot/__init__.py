"""
Bot module for bridging voice clients to the Gemini Live API.

Key components:
- gemini_live: ``LiveSessionClient``, the WebSocket client for one Gemini Live
  session, and the ``SessionCallbacks`` subscriber it reports to.
- voice_bridge: ``VoiceBridge``, which opens the engine session for a
  validated connection, sends the opening greeting, relays client audio and
  performs teardown.

Usage examples:
```python
from voice_gateway.bot.voice_bridge import VoiceBridge
from voice_gateway.config.settings import get_settings

bridge = VoiceBridge(get_settings())
session = await bridge.establish(snapshot, websocket)
await bridge.relay_audio(session, pcm_chunk)
await bridge.teardown(session)
```
"""
