import logging
from typing import List, Optional

import pytest
from fastapi import WebSocket
from unittest.mock import AsyncMock

from voice_gateway.config.settings import Settings
from voice_gateway.models.access import AccessCredential, AssistantRecord, GreetingPolicy
from voice_gateway.services.access_validator import hash_api_key
from voice_gateway.services.stores import InMemoryCredentialStore, InMemoryResourceStore

VALID_API_KEY = "ak_validhash"
ASSISTANT_UUID = "R1"
FOREIGN_ASSISTANT_UUID = "R2"
GREETING = "Hello! How can I help you today?"


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration before each test"""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    logging.basicConfig(level=logging.NOTSET)
    yield


class FakeEngineClient:
    """Stand-in for LiveSessionClient that records what the bridge sends."""

    def __init__(self, api_key, url=None, connect_timeout=None, connect_error=None,
                 send_result=True, timeline=None):
        self.api_key = api_key
        self.url = url
        self.connect_timeout = connect_timeout
        self.connect_error = connect_error
        self.send_result = send_result
        self.timeline = timeline if timeline is not None else []
        self.callbacks = None
        self.system_instruction = None
        self.params = None
        self.sent_audio: List[bytes] = []
        self.sent_text: List[str] = []
        self.close_calls = 0

    async def connect(self, system_instruction, params, callbacks):
        if self.connect_error is not None:
            raise self.connect_error
        self.system_instruction = system_instruction
        self.params = params
        self.callbacks = callbacks
        await callbacks.on_open()
        return self

    async def send_audio(self, chunk: bytes) -> bool:
        self.sent_audio.append(chunk)
        self.timeline.append(("engine_audio", chunk))
        return self.send_result

    async def send_text(self, text: str) -> bool:
        self.sent_text.append(text)
        self.timeline.append(("engine_text", text))
        return self.send_result

    async def close(self) -> None:
        self.close_calls += 1


class FakeEngineFactory:
    """Client factory handed to VoiceBridge; keeps every client it builds."""

    def __init__(self):
        self.clients: List[FakeEngineClient] = []
        self.connect_error: Optional[Exception] = None
        self.send_result = True
        self.timeline = []

    def __call__(self, api_key, url=None, connect_timeout=None):
        client = FakeEngineClient(
            api_key,
            url=url,
            connect_timeout=connect_timeout,
            connect_error=self.connect_error,
            send_result=self.send_result,
            timeline=self.timeline,
        )
        self.clients.append(client)
        return client

    @property
    def last(self) -> FakeEngineClient:
        return self.clients[-1]


@pytest.fixture
def engine_factory():
    return FakeEngineFactory()


@pytest.fixture
def settings():
    return Settings(gemini_api_key="test-gemini-key", engine_connect_timeout=5.0)


@pytest.fixture
def credential():
    return AccessCredential(
        id=1,
        organization_id=1,
        name="Test key",
        key_prefix=VALID_API_KEY[:7],
        key_hash=hash_api_key(VALID_API_KEY),
        allowed_resources=[],
    )


@pytest.fixture
def assistant():
    return AssistantRecord(
        resource_id=ASSISTANT_UUID,
        name="Front desk",
        owner_id=1,
        system_instruction="You are a friendly receptionist.",
        greeting_policy=GreetingPolicy.AGENT_SPEAKS_FIRST,
        opening_utterance=GREETING,
    )


@pytest.fixture
def foreign_assistant():
    return AssistantRecord(
        resource_id=FOREIGN_ASSISTANT_UUID,
        name="Other tenant",
        owner_id=2,
        system_instruction="Not yours.",
    )


@pytest.fixture
def credential_store(credential):
    return InMemoryCredentialStore([credential])


@pytest.fixture
def resource_store(assistant, foreign_assistant):
    return InMemoryResourceStore([assistant, foreign_assistant])


@pytest.fixture
def websocket():
    websocket = AsyncMock(spec=WebSocket)
    websocket.query_params = {}
    return websocket
