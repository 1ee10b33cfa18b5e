"""DynamoDB-backed user key store with in-memory TTL cache."""

import asyncio
import time

from endpoint_gateway.credentials.models import UserKeyValues
from endpoint_gateway.credentials.store import UserKeyStore


class DynamoDBUserKeyStore(UserKeyStore):
    """Reads user keys from a DynamoDB table keyed by (user_id, name)."""

    CACHE_TTL = 300  # 5 minutes

    def __init__(self, table_name: str, region: str = "us-east-1"):
        self._table_name = table_name
        self._region = region
        self._table = None
        self._cache: dict[tuple[str, str], tuple[UserKeyValues, float]] = {}

    def _get_table(self):
        """Lazy-init boto3 Table resource."""
        if self._table is None:
            import boto3

            dynamodb = boto3.resource("dynamodb", region_name=self._region)
            self._table = dynamodb.Table(self._table_name)
        return self._table

    async def get_user_key_values(self, user_id: str, name: str) -> UserKeyValues | None:
        cache_key = (user_id, name)
        if cache_key in self._cache:
            values, expires_at = self._cache[cache_key]
            if time.monotonic() < expires_at:
                return values
            del self._cache[cache_key]

        result = await asyncio.to_thread(self._get_item, user_id, name)

        # Only cache hits, so a key saved by the user is picked up right away
        if result is not None:
            self._cache[cache_key] = (result, time.monotonic() + self.CACHE_TTL)

        return result

    def _get_item(self, user_id: str, name: str) -> UserKeyValues | None:
        table = self._get_table()
        resp = table.get_item(Key={"user_id": user_id, "name": name})

        item = resp.get("Item")
        if not item:
            return None

        return UserKeyValues(
            api_key=item.get("api_key") or None,
            base_url=item.get("base_url") or None,
        )
