"""
API key validation for voice connections.

The validator resolves an ``(apiKey, assistantUuid)`` pair into the snapshot of
the assistant configuration the session will run with, or into an
``AccessDenied`` result. Raw keys are hashed before any lookup and never
compared or stored directly.
"""

import asyncio
import hashlib
import logging
import re
from typing import Optional, Pattern, Set, Union

from voice_gateway.config.constants import API_KEY_PREFIX, LOGGER_NAME
from voice_gateway.models.access import (
    AccessCredential,
    AccessDenied,
    DenialReason,
    ResourceSnapshot,
)
from voice_gateway.services.stores import CredentialStore, ResourceStore

logger = logging.getLogger(LOGGER_NAME)

API_KEY_PATTERN: Pattern = re.compile(rf"^{API_KEY_PREFIX}[A-Za-z0-9_\-]+$")


def hash_api_key(key: str) -> str:
    """Return the SHA-256 hex digest used to store and look up an API key."""
    return hashlib.sha256(key.encode("utf-8")).hexdigest()


def mask_api_key(key: Optional[str]) -> str:
    """Return a log-safe form of an API key."""
    if not key:
        return "<none>"
    return f"{key[:len(API_KEY_PREFIX) + 4]}…"


def is_well_formed(key: Optional[str]) -> bool:
    return bool(key) and API_KEY_PATTERN.match(key) is not None


def is_resource_allowed(credential: AccessCredential, resource_id: str) -> bool:
    """
    Check whether a credential's scope covers an assistant.

    An empty scope allows every assistant of the owning organization.
    """
    if not credential.allowed_resources:
        return True
    return resource_id in credential.allowed_resources


class AccessValidator:
    """Checks API keys against the credential store and loads assistant snapshots."""

    def __init__(self, credential_store: CredentialStore, resource_store: ResourceStore):
        self.credential_store = credential_store
        self.resource_store = resource_store
        self._background_tasks: Set[asyncio.Task] = set()

    async def validate(
        self, credential: str, resource_id: str
    ) -> Union[ResourceSnapshot, AccessDenied]:
        """
        Validate an API key for an assistant.

        Args:
            credential: Raw API key from the connection URL
            resource_id: Assistant UUID from the connection URL

        Returns:
            The assistant snapshot on success, otherwise AccessDenied

        Store errors are not caught here; the caller decides how to close the
        connection.
        """
        if not is_well_formed(credential):
            logger.info("Rejecting malformed API key")
            return AccessDenied(DenialReason.NOT_FOUND)

        record = await self.credential_store.lookup_by_hash(hash_api_key(credential))
        if record is None:
            logger.info(f"Unknown API key {mask_api_key(credential)}")
            return AccessDenied(DenialReason.NOT_FOUND)
        if not record.active:
            logger.info(f"Inactive API key {record.id}")
            return AccessDenied(DenialReason.NOT_FOUND)
        if record.is_expired():
            logger.info(f"Expired API key {record.id}")
            return AccessDenied(DenialReason.NOT_FOUND)

        if not is_resource_allowed(record, resource_id):
            logger.info(f"API key {record.id} is not allowed for assistant {resource_id}")
            return AccessDenied(DenialReason.FORBIDDEN)

        snapshot = await self.resource_store.get_snapshot(resource_id, record.organization_id)
        if snapshot is None:
            logger.info(
                f"Assistant {resource_id} not found for organization {record.organization_id}"
            )
            return AccessDenied(DenialReason.FORBIDDEN)

        self._schedule_touch(record.id)
        return snapshot

    def _schedule_touch(self, credential_id: int) -> None:
        """Record last use without blocking the connection."""
        task = asyncio.create_task(self._touch_last_used(credential_id))
        # Keep a reference until done so the task is not garbage collected
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

    async def _touch_last_used(self, credential_id: int) -> None:
        try:
            await self.credential_store.touch_last_used(credential_id)
        except Exception as e:
            logger.warning(f"Failed to update last used time for API key {credential_id}: {e}")
