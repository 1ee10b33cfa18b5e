"""Tests for endpoint_gateway/credentials/store.py — JSONUserKeyStore."""

import json
import os
import time

from endpoint_gateway.credentials.models import UserKeyValues
from endpoint_gateway.credentials.store import JSONUserKeyStore


class TestJSONUserKeyStoreLoad:

    def test_load_valid_file(self, user_keys_json_file):
        store = JSONUserKeyStore(user_keys_json_file)
        assert len(store._records) == 2

    def test_load_missing_file(self, tmp_path):
        store = JSONUserKeyStore(str(tmp_path / "nonexistent.json"))
        assert store._records == {}

    def test_load_empty_keys(self, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text('{"keys": []}', encoding="utf-8")
        store = JSONUserKeyStore(str(path))
        assert store._records == {}


class TestJSONUserKeyStoreLookup:

    async def test_full_record(self, user_keys_json_file):
        store = JSONUserKeyStore(user_keys_json_file)
        values = await store.get_user_key_values(user_id="user-1", name="A4F")
        assert values == UserKeyValues(api_key="sk-user-1-a4f", base_url="https://user-1.example/v1")

    async def test_partial_record(self, user_keys_json_file):
        store = JSONUserKeyStore(user_keys_json_file)
        values = await store.get_user_key_values(user_id="user-2", name="A4F")
        assert values.api_key == "sk-user-2-a4f"
        assert values.base_url is None

    async def test_miss_unknown_user(self, user_keys_json_file):
        store = JSONUserKeyStore(user_keys_json_file)
        assert await store.get_user_key_values(user_id="nobody", name="A4F") is None

    async def test_miss_other_endpoint(self, user_keys_json_file):
        store = JSONUserKeyStore(user_keys_json_file)
        assert await store.get_user_key_values(user_id="user-1", name="OpenRouter") is None

    async def test_unknown_fields_ignored(self, tmp_path):
        path = tmp_path / "keys.json"
        path.write_text(json.dumps({"keys": [{
            "user_id": "user-1",
            "name": "A4F",
            "api_key": "sk-1",
            "created_at": "2024-01-01T00:00:00Z",
            "notes": "rotated",
        }]}), encoding="utf-8")
        store = JSONUserKeyStore(str(path))
        assert await store.get_user_key_values(user_id="user-1", name="A4F") == UserKeyValues(api_key="sk-1")


class TestJSONUserKeyStoreReload:

    async def test_mtime_reload(self, user_keys_json_file):
        store = JSONUserKeyStore(user_keys_json_file)
        assert len(store._records) == 2

        new_data = {"keys": [{"user_id": "user-3", "name": "A4F", "api_key": "sk-3"}]}
        with open(user_keys_json_file, "w", encoding="utf-8") as f:
            json.dump(new_data, f)
        # Force mtime to be different
        os.utime(user_keys_json_file, (time.time() + 1, time.time() + 1))

        values = await store.get_user_key_values(user_id="user-3", name="A4F")
        assert values is not None
        assert values.api_key == "sk-3"
