"""
Models module for data structures and state management in the voice gateway.

Key components:
- access: API key records, assistant snapshots and the access-denied result.
- message_schemas: Pydantic models for the JSON envelopes sent to voice clients.
- gemini_schemas: Pydantic models for the Gemini Live setup and realtime input
  messages.
- session: The per-connection VoiceSession and the SessionRegistry of active
  sessions.

Usage examples:
```python
from voice_gateway.models.message_schemas import EngineEvent

event = EngineEvent(data={"setupComplete": {}})
await websocket.send_text(event.model_dump_json())
```
"""

from voice_gateway.models.access import (
    AccessCredential,
    AccessDenied,
    AssistantRecord,
    DenialReason,
    GreetingPolicy,
    ResourceSnapshot,
)
from voice_gateway.models.gemini_schemas import (
    EngineParams,
    RealtimeInputMessage,
    SetupMessage,
    build_audio_input,
    build_setup_message,
    build_text_input,
)
from voice_gateway.models.message_schemas import (
    EngineEvent,
    ErrorEvent,
    OutgoingEvent,
    StatusEvent,
)
from voice_gateway.models.session import SessionRegistry, SessionState, VoiceSession
