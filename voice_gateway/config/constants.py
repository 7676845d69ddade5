"""
Constants and configuration values used throughout the application.

This module defines constants that are used across different parts of the application,
providing a centralized location for configuration values and making it easier to
maintain consistent naming throughout the codebase.
"""

# Logger name used throughout the application
LOGGER_NAME = "voice_gateway"

# Query string parameters carried by the voice WebSocket handshake
PARAM_ASSISTANT_UUID = "assistantUuid"
PARAM_API_KEY = "apiKey"

# API key format
API_KEY_PREFIX = "ak_"

# WebSocket close codes (RFC 6455)
CLOSE_NORMAL = 1000
CLOSE_POLICY_VIOLATION = 1008
CLOSE_INTERNAL_ERROR = 1011

# Close reasons sent to the client
REASON_MISSING_ASSISTANT = "Assistant UUID is required"
REASON_MISSING_API_KEY = "API key is required"
REASON_ACCESS_DENIED = "Assistant not found or access denied"
REASON_VALIDATION_FAILED = "Failed to validate assistant access"
REASON_UPSTREAM_UNAVAILABLE = "Failed to establish voice session"
REASON_ENGINE_ERROR = "Voice session error"
REASON_SESSION_ENDED = "Voice session ended"

# Envelope type tags for messages sent to the client
EVENT_TYPE_STATUS = "status"
EVENT_TYPE_ENGINE = "gemini"
EVENT_TYPE_ERROR = "error"

STATUS_SESSION_OPENED = "Voice session opened"
STATUS_SESSION_CLOSED = "Voice session closed"

# Greeting policies
GREETING_AGENT_FIRST = "agent_speak_first"
GREETING_USER_FIRST = "user_speak_first"

# Assistants are only reachable through an API key once published
PUBLISHED_STATUS = "published"

# Gemini Live defaults
DEFAULT_LIVE_URL = (
    "wss://generativelanguage.googleapis.com/ws/"
    "google.ai.generativelanguage.v1beta.GenerativeService.BidiGenerateContent"
)
DEFAULT_LIVE_MODEL = "gemini-2.5-flash-preview-native-audio-dialog"
DEFAULT_TEMPERATURE = 1.0
DEFAULT_TRIGGER_TOKENS = 25600
DEFAULT_TARGET_TOKENS = 12800
DEFAULT_VOICE_NAME = "Orus"
DEFAULT_CONNECT_TIMEOUT = 30.0  # seconds

# Audio format expected by the engine for realtime input
AUDIO_INPUT_MIME_TYPE = "audio/pcm;rate=16000"
MEDIA_RESOLUTION_MEDIUM = "MEDIA_RESOLUTION_MEDIUM"
RESPONSE_MODALITY_AUDIO = "AUDIO"
