"""Cache of provider-reported token config (model pricing and context limits).

Entries are keyed by endpoint name, or by `endpoint:user_id` when the
endpoint's credentials come from the user's stored keys, since each user may
point at a different account or base URL. The cache never expires entries
itself.
"""

from abc import ABC, abstractmethod

# model id -> {"prompt": ..., "completion": ..., "context": ...}
TokenConfig = dict[str, dict[str, float]]


def make_token_cache_key(endpoint: str, user_id: str, user_provided: bool) -> str:
    return f"{endpoint}:{user_id}" if user_provided else endpoint


class TokenConfigCache(ABC):

    @abstractmethod
    async def get(self, key: str) -> TokenConfig | None:
        ...

    @abstractmethod
    async def set(self, key: str, value: TokenConfig) -> None:
        ...


class InMemoryTokenConfigCache(TokenConfigCache):
    """Process-local cache. Concurrent misses for one key may both fetch; last write wins."""

    def __init__(self):
        self._entries: dict[str, TokenConfig] = {}

    async def get(self, key: str) -> TokenConfig | None:
        return self._entries.get(key)

    async def set(self, key: str, value: TokenConfig) -> None:
        self._entries[key] = value

    def clear(self) -> None:
        self._entries.clear()


_cache: TokenConfigCache | None = None


def get_token_config_cache() -> TokenConfigCache:
    """Get the process-wide token config cache."""
    global _cache
    if _cache is None:
        _cache = InMemoryTokenConfigCache()
    return _cache
