"""
Unit tests for the in-memory credential and assistant stores.
"""

import json

import pytest

from voice_gateway.models.access import AssistantRecord, ResourceSnapshot
from voice_gateway.services.access_validator import hash_api_key
from voice_gateway.services.stores import (
    InMemoryCredentialStore,
    InMemoryResourceStore,
    load_stores,
)

from conftest import ASSISTANT_UUID, FOREIGN_ASSISTANT_UUID, VALID_API_KEY


class TestCredentialStore:
    @pytest.mark.asyncio
    async def test_lookup_by_hash(self, credential_store, credential):
        record = await credential_store.lookup_by_hash(hash_api_key(VALID_API_KEY))
        assert record == credential

    @pytest.mark.asyncio
    async def test_lookup_unknown_hash(self, credential_store):
        assert await credential_store.lookup_by_hash(hash_api_key("ak_other")) is None

    @pytest.mark.asyncio
    async def test_lookup_returns_copy(self, credential_store):
        record = await credential_store.lookup_by_hash(hash_api_key(VALID_API_KEY))
        record.active = False

        again = await credential_store.lookup_by_hash(hash_api_key(VALID_API_KEY))
        assert again.active is True

    @pytest.mark.asyncio
    async def test_touch_last_used(self, credential_store):
        await credential_store.touch_last_used(1)
        record = await credential_store.lookup_by_hash(hash_api_key(VALID_API_KEY))
        assert record.last_used_at is not None

    @pytest.mark.asyncio
    async def test_touch_unknown_id(self, credential_store):
        with pytest.raises(KeyError):
            await credential_store.touch_last_used(99)

    def test_len(self, credential_store):
        assert len(credential_store) == 1
        assert len(InMemoryCredentialStore()) == 0


class TestResourceStore:
    @pytest.mark.asyncio
    async def test_get_snapshot(self, resource_store):
        snapshot = await resource_store.get_snapshot(ASSISTANT_UUID, 1)
        assert type(snapshot) is ResourceSnapshot
        assert snapshot.resource_id == ASSISTANT_UUID
        assert snapshot.owner_id == 1

    @pytest.mark.asyncio
    async def test_get_snapshot_other_owner(self, resource_store):
        """Assistants of another organization look exactly like missing ones."""
        assert await resource_store.get_snapshot(FOREIGN_ASSISTANT_UUID, 1) is None

    @pytest.mark.asyncio
    async def test_get_snapshot_unknown(self, resource_store):
        assert await resource_store.get_snapshot("missing", 1) is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("active, status", [(False, "published"), (True, "draft")])
    async def test_get_snapshot_hidden(self, active, status):
        store = InMemoryResourceStore(
            [AssistantRecord(resource_id="R3", owner_id=1, active=active, status=status)]
        )
        assert await store.get_snapshot("R3", 1) is None


class TestLoadStores:
    def test_load_from_file(self, tmp_path):
        path = tmp_path / "gateway.json"
        path.write_text(
            json.dumps(
                {
                    "credentials": [
                        {
                            "id": 7,
                            "organization_id": 3,
                            "key_hash": hash_api_key("ak_fromfile"),
                            "allowed_resources": ["R9"],
                            "expires_at": "2030-01-01T00:00:00Z",
                        }
                    ],
                    "resources": [
                        {
                            "resource_id": "R9",
                            "owner_id": 3,
                            "greeting_policy": "agent_speak_first",
                            "opening_utterance": "Hi",
                        }
                    ],
                }
            )
        )

        credentials, resources = load_stores(path)

        assert len(credentials) == 1
        assert len(resources) == 1

    @pytest.mark.asyncio
    async def test_loaded_records_are_usable(self, tmp_path):
        path = tmp_path / "gateway.json"
        path.write_text(
            json.dumps(
                {
                    "credentials": [
                        {"id": 7, "organization_id": 3, "key_hash": hash_api_key("ak_fromfile")}
                    ],
                    "resources": [{"resource_id": "R9", "owner_id": 3}],
                }
            )
        )

        credentials, resources = load_stores(path)

        record = await credentials.lookup_by_hash(hash_api_key("ak_fromfile"))
        assert record.organization_id == 3
        assert record.allowed_resources == []
        snapshot = await resources.get_snapshot("R9", 3)
        assert snapshot.engine_speaks_first is False

    def test_missing_file_gives_empty_stores(self, tmp_path):
        credentials, resources = load_stores(tmp_path / "absent.json")
        assert len(credentials) == 0
        assert len(resources) == 0
