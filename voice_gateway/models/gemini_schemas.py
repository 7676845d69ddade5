"""
Pydantic models for Gemini Live API message structures.

This module provides type-safe models for the client messages sent over the
``BidiGenerateContent`` WebSocket: the initial setup message and realtime
audio/text input. Field names follow the camelCase wire format.
"""

import base64
from typing import List, Optional

from pydantic import BaseModel, Field

from voice_gateway.config.constants import (
    AUDIO_INPUT_MIME_TYPE,
    DEFAULT_LIVE_MODEL,
    DEFAULT_TARGET_TOKENS,
    DEFAULT_TEMPERATURE,
    DEFAULT_TRIGGER_TOKENS,
    DEFAULT_VOICE_NAME,
    MEDIA_RESOLUTION_MEDIUM,
    RESPONSE_MODALITY_AUDIO,
)


class EngineParams(BaseModel):
    """Model parameters resolved for one voice session."""

    model: str = DEFAULT_LIVE_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    voice_name: str = DEFAULT_VOICE_NAME
    trigger_tokens: int = DEFAULT_TRIGGER_TOKENS
    target_tokens: int = DEFAULT_TARGET_TOKENS

    @property
    def model_path(self) -> str:
        """Model name in the ``models/<id>`` form the Live API expects."""
        if self.model.startswith("models/"):
            return self.model
        return f"models/{self.model}"


class Part(BaseModel):
    text: str


class Content(BaseModel):
    parts: List[Part]


class PrebuiltVoiceConfig(BaseModel):
    voiceName: str


class VoiceConfig(BaseModel):
    prebuiltVoiceConfig: PrebuiltVoiceConfig


class SpeechConfig(BaseModel):
    voiceConfig: VoiceConfig


class GenerationConfig(BaseModel):
    responseModalities: List[str] = Field(default_factory=lambda: [RESPONSE_MODALITY_AUDIO])
    temperature: float
    mediaResolution: str = MEDIA_RESOLUTION_MEDIUM
    speechConfig: SpeechConfig


class SlidingWindow(BaseModel):
    targetTokens: int


class ContextWindowCompression(BaseModel):
    triggerTokens: int
    slidingWindow: SlidingWindow


class Setup(BaseModel):
    model: str
    generationConfig: GenerationConfig
    systemInstruction: Optional[Content] = None
    contextWindowCompression: ContextWindowCompression


class SetupMessage(BaseModel):
    """First message sent after the Live WebSocket opens."""

    setup: Setup


class Blob(BaseModel):
    data: str = Field(..., description="Base64 encoded payload")
    mimeType: str


class RealtimeInput(BaseModel):
    audio: Optional[Blob] = None
    text: Optional[str] = None


class RealtimeInputMessage(BaseModel):
    realtimeInput: RealtimeInput


def build_setup_message(system_instruction: str, params: EngineParams) -> SetupMessage:
    """Build the setup message for a session."""
    instruction = None
    if system_instruction:
        instruction = Content(parts=[Part(text=system_instruction)])

    return SetupMessage(
        setup=Setup(
            model=params.model_path,
            generationConfig=GenerationConfig(
                temperature=params.temperature,
                speechConfig=SpeechConfig(
                    voiceConfig=VoiceConfig(
                        prebuiltVoiceConfig=PrebuiltVoiceConfig(voiceName=params.voice_name)
                    )
                ),
            ),
            systemInstruction=instruction,
            contextWindowCompression=ContextWindowCompression(
                triggerTokens=params.trigger_tokens,
                slidingWindow=SlidingWindow(targetTokens=params.target_tokens),
            ),
        )
    )


def build_audio_input(chunk: bytes, mime_type: str = AUDIO_INPUT_MIME_TYPE) -> RealtimeInputMessage:
    """Wrap a raw PCM chunk as realtime audio input."""
    return RealtimeInputMessage(
        realtimeInput=RealtimeInput(
            audio=Blob(data=base64.b64encode(chunk).decode("utf-8"), mimeType=mime_type)
        )
    )


def build_text_input(text: str) -> RealtimeInputMessage:
    """Wrap a text turn as realtime input."""
    return RealtimeInputMessage(realtimeInput=RealtimeInput(text=text))
