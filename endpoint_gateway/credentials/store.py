"""User key store abstraction + JSON file implementation."""

import json
import os
from abc import ABC, abstractmethod

from endpoint_gateway.credentials.models import UserKeyRecord, UserKeyValues


class UserKeyStore(ABC):
    """Abstract base for per-user endpoint credential lookups."""

    @abstractmethod
    async def get_user_key_values(self, user_id: str, name: str) -> UserKeyValues | None:
        """Look up a user's stored key/base URL for an endpoint. Returns None if not found."""
        ...


class JSONUserKeyStore(UserKeyStore):
    """File-backed user key store. Reloads on mtime change.

    File layout: {"keys": [{"user_id": ..., "name": ..., "api_key": ..., "base_url": ...}]}
    """

    def __init__(self, path: str):
        self._path = path
        self._records: dict[tuple[str, str], UserKeyRecord] = {}
        self._last_mtime: float = 0.0
        self._load()

    def _load(self) -> None:
        """Load records from the JSON file."""
        try:
            mtime = os.path.getmtime(self._path)
        except OSError:
            self._records = {}
            return

        if mtime == self._last_mtime and self._records:
            return

        with open(self._path, encoding="utf-8") as f:
            data = json.load(f)

        records = [UserKeyRecord.from_dict(entry) for entry in data.get("keys", [])]
        self._records = {(r.user_id, r.name): r for r in records}
        self._last_mtime = mtime

    async def get_user_key_values(self, user_id: str, name: str) -> UserKeyValues | None:
        self._load()  # reload if file changed

        record = self._records.get((user_id, name))
        return record.values if record is not None else None
