"""Process-wide model fetcher, bound to the shared token config cache."""

from endpoint_gateway.providers.models import ModelFetcher
from endpoint_gateway.tokens.cache import get_token_config_cache

_fetcher: ModelFetcher | None = None


def get_model_fetcher() -> ModelFetcher:
    global _fetcher
    if _fetcher is None:
        _fetcher = ModelFetcher(get_token_config_cache())
    return _fetcher


async def close_model_fetcher() -> None:
    """Gracefully shut down the fetcher's HTTP connections."""
    global _fetcher
    if _fetcher is not None:
        await _fetcher.close()
        _fetcher = None
