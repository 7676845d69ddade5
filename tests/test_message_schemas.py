"""
Unit tests for the message schemas.

These tests check the JSON envelopes sent to voice clients and the Gemini Live
setup and realtime input messages built from an assistant's configuration.
"""

import base64
import json

import pytest
from pydantic import ValidationError

from voice_gateway.models.gemini_schemas import (
    EngineParams,
    build_audio_input,
    build_setup_message,
    build_text_input,
)
from voice_gateway.models.message_schemas import (
    EngineEvent,
    ErrorEvent,
    StatusEvent,
    session_closed_event,
    session_opened_event,
)


class TestClientEnvelopes:
    """Tests for the envelopes sent to the client."""

    def test_session_opened_event(self):
        event = session_opened_event()
        assert json.loads(event.model_dump_json()) == {
            "type": "status",
            "data": "Voice session opened",
        }

    def test_session_closed_event(self):
        event = session_closed_event("normal closure")
        assert event.data == "Voice session closed: normal closure"

    def test_engine_event_passes_message_through(self):
        message = {"serverContent": {"modelTurn": {"parts": [{"text": "hi"}]}}}
        event = EngineEvent(data=message)
        assert json.loads(event.model_dump_json()) == {"type": "gemini", "data": message}

    def test_error_event(self):
        assert json.loads(ErrorEvent(data="boom").model_dump_json()) == {
            "type": "error",
            "data": "boom",
        }

    def test_status_event_rejects_other_type(self):
        with pytest.raises(ValidationError):
            StatusEvent(type="error", data="x")


class TestEngineParams:
    def test_model_path_adds_prefix(self):
        assert EngineParams(model="gemini-live").model_path == "models/gemini-live"

    def test_model_path_keeps_existing_prefix(self):
        assert EngineParams(model="models/gemini-live").model_path == "models/gemini-live"


class TestSetupMessage:
    """Tests for the Gemini Live setup message."""

    @pytest.fixture
    def params(self):
        return EngineParams(
            model="gemini-live",
            temperature=0.4,
            voice_name="Puck",
            trigger_tokens=2000,
            target_tokens=1000,
        )

    def test_setup_message_fields(self, params):
        message = json.loads(
            build_setup_message("Be brief.", params).model_dump_json(exclude_none=True)
        )
        setup = message["setup"]

        assert setup["model"] == "models/gemini-live"
        assert setup["generationConfig"]["responseModalities"] == ["AUDIO"]
        assert setup["generationConfig"]["temperature"] == 0.4
        assert setup["generationConfig"]["mediaResolution"] == "MEDIA_RESOLUTION_MEDIUM"
        assert (
            setup["generationConfig"]["speechConfig"]["voiceConfig"]["prebuiltVoiceConfig"][
                "voiceName"
            ]
            == "Puck"
        )
        assert setup["systemInstruction"] == {"parts": [{"text": "Be brief."}]}
        assert setup["contextWindowCompression"] == {
            "triggerTokens": 2000,
            "slidingWindow": {"targetTokens": 1000},
        }

    def test_empty_system_instruction_is_omitted(self, params):
        message = json.loads(build_setup_message("", params).model_dump_json(exclude_none=True))
        assert "systemInstruction" not in message["setup"]


class TestRealtimeInput:
    def test_audio_input(self):
        chunk = b"\x00\x01\x02\x03"
        message = json.loads(build_audio_input(chunk).model_dump_json(exclude_none=True))

        audio = message["realtimeInput"]["audio"]
        assert base64.b64decode(audio["data"]) == chunk
        assert audio["mimeType"] == "audio/pcm;rate=16000"
        assert "text" not in message["realtimeInput"]

    def test_text_input(self):
        message = json.loads(build_text_input("Hello there").model_dump_json(exclude_none=True))
        assert message == {"realtimeInput": {"text": "Hello there"}}
