"""
Access models for API key validation and assistant configuration.

This module defines the records the voice bridge reads at connection time: the
API key record looked up by its hash, and the snapshot of the assistant
configuration that a voice session is started with.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from voice_gateway.config.constants import (
    GREETING_AGENT_FIRST,
    GREETING_USER_FIRST,
    PUBLISHED_STATUS,
)


class GreetingPolicy(str, Enum):
    """Who is expected to speak first in a voice session."""

    AGENT_SPEAKS_FIRST = GREETING_AGENT_FIRST
    USER_SPEAKS_FIRST = GREETING_USER_FIRST


class AccessCredential(BaseModel):
    """API key record as stored by the key-management flow.

    The raw key is never part of this record; only its SHA-256 hash is.
    """

    id: int
    organization_id: int = Field(..., description="Owning tenant")
    name: str = ""
    key_prefix: str = ""
    key_hash: str
    allowed_resources: List[str] = Field(
        default_factory=list,
        description="Assistant UUIDs this key may address; empty means unrestricted",
    )
    expires_at: Optional[datetime] = None
    active: bool = True
    last_used_at: Optional[datetime] = None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Return True once the current time is past ``expires_at``."""
        if self.expires_at is None:
            return False
        now = now or datetime.now(timezone.utc)
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return now > expires_at


class ResourceSnapshot(BaseModel):
    """Read-only assistant configuration loaded once at session start."""

    resource_id: str
    name: str = ""
    owner_id: int
    system_instruction: str = ""
    greeting_policy: GreetingPolicy = GreetingPolicy.USER_SPEAKS_FIRST
    opening_utterance: str = ""
    model_id: Optional[str] = None
    temperature: Optional[float] = None
    voice_id: Optional[str] = None

    @property
    def engine_speaks_first(self) -> bool:
        return self.greeting_policy == GreetingPolicy.AGENT_SPEAKS_FIRST


class AssistantRecord(ResourceSnapshot):
    """Assistant as kept by the resource store, including its visibility flags."""

    active: bool = True
    status: str = PUBLISHED_STATUS

    @property
    def visible(self) -> bool:
        return self.active and self.status == PUBLISHED_STATUS

    def snapshot(self) -> ResourceSnapshot:
        return ResourceSnapshot(**self.model_dump(exclude={"active", "status"}))


class DenialReason(str, Enum):
    """Coarse reason for a denied connection; never disclosed to the client."""

    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class AccessDenied:
    """Result of a failed access check."""

    reason: DenialReason
