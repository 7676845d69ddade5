"""
Credential and assistant stores consumed by the voice bridge.

The bridge depends only on the two protocols defined here. The in-memory
implementations back local development and tests; they are filled from a JSON
document with ``load_stores``:

```json
{
  "credentials": [{"id": 1, "organization_id": 1, "key_hash": "<sha256>", ...}],
  "resources": [{"resource_id": "<uuid>", "owner_id": 1, ...}]
}
```
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, Optional, Protocol, Tuple

from voice_gateway.config.constants import LOGGER_NAME
from voice_gateway.models.access import AccessCredential, AssistantRecord, ResourceSnapshot

logger = logging.getLogger(LOGGER_NAME)


class CredentialStore(Protocol):
    """Read access to API key records."""

    async def lookup_by_hash(self, key_hash: str) -> Optional[AccessCredential]:
        ...

    async def touch_last_used(self, credential_id: int) -> None:
        ...


class ResourceStore(Protocol):
    """Read access to assistant configuration."""

    async def get_snapshot(self, resource_id: str, owner_id: int) -> Optional[ResourceSnapshot]:
        ...


class InMemoryCredentialStore:
    """Credential store held in a dict keyed by key hash."""

    def __init__(self, credentials: Iterable[AccessCredential] = ()):
        self._by_hash: Dict[str, AccessCredential] = {}
        for credential in credentials:
            self.add(credential)

    def add(self, credential: AccessCredential) -> None:
        self._by_hash[credential.key_hash] = credential

    async def lookup_by_hash(self, key_hash: str) -> Optional[AccessCredential]:
        credential = self._by_hash.get(key_hash)
        if credential is None:
            return None
        # Callers get a copy so the stored record is only changed by touch_last_used
        return credential.model_copy()

    async def touch_last_used(self, credential_id: int) -> None:
        for credential in self._by_hash.values():
            if credential.id == credential_id:
                credential.last_used_at = datetime.now(timezone.utc)
                return
        raise KeyError(f"Unknown credential id: {credential_id}")

    def __len__(self) -> int:
        return len(self._by_hash)


class InMemoryResourceStore:
    """Assistant store held in a dict keyed by assistant UUID."""

    def __init__(self, records: Iterable[AssistantRecord] = ()):
        self._records: Dict[str, AssistantRecord] = {}
        for record in records:
            self.add(record)

    def add(self, record: AssistantRecord) -> None:
        self._records[record.resource_id] = record

    async def get_snapshot(self, resource_id: str, owner_id: int) -> Optional[ResourceSnapshot]:
        record = self._records.get(resource_id)
        if record is None or record.owner_id != owner_id or not record.visible:
            return None
        return record.snapshot()

    def __len__(self) -> int:
        return len(self._records)


def load_stores(path: Path) -> Tuple[InMemoryCredentialStore, InMemoryResourceStore]:
    """
    Build both stores from a JSON document.

    Args:
        path: Location of the JSON document

    Returns:
        The credential store and the resource store. Both are empty when the
        file does not exist.
    """
    if not path.exists():
        logger.warning(f"Data file {path} not found, starting with empty stores")
        return InMemoryCredentialStore(), InMemoryResourceStore()

    with open(path) as f:
        data = json.load(f)

    credentials = [AccessCredential(**item) for item in data.get("credentials", [])]
    resources = [AssistantRecord(**item) for item in data.get("resources", [])]
    logger.info(
        f"Loaded {len(credentials)} API keys and {len(resources)} assistants from {path}"
    )
    return InMemoryCredentialStore(credentials), InMemoryResourceStore(resources)
