"""Fetch model lists from OpenAI-compatible `/models` endpoints.

Some providers (OpenRouter and compatible aggregators) report per-model
pricing and context length alongside the id. When they do, the fetcher turns
that into a token config and stores it in the token config cache under the
key the caller passes.
"""

import httpx

from endpoint_gateway.config.settings import get_settings
from endpoint_gateway.logging.audit import RequestTimer, get_audit_logger
from endpoint_gateway.tokens.cache import TokenConfig, TokenConfigCache

# Provider prices are quoted per token; token configs are per 1M tokens
_PRICE_SCALE = 1_000_000


def _price(value) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        return float(value) * _PRICE_SCALE
    except (TypeError, ValueError):
        return None


def build_token_config(models: list) -> TokenConfig:
    """Extract prompt/completion prices and context length per model id.

    Entries without an id or pricing, or with a null or non-numeric price,
    are skipped. A price field absent from pricing counts as free.
    """
    token_config: TokenConfig = {}
    for model in models:
        if not isinstance(model, dict):
            continue
        model_id = model.get("id")
        pricing = model.get("pricing")
        if not model_id or not isinstance(pricing, dict) or not pricing:
            continue
        prompt = _price(pricing.get("prompt", 0))
        completion = _price(pricing.get("completion", 0))
        if prompt is None or completion is None:
            continue
        entry = {"prompt": prompt, "completion": completion}
        if model.get("context_length") is not None:
            entry["context"] = model["context_length"]
        token_config[model_id] = entry
    return token_config


def _parse_models(response: httpx.Response, name: str) -> list:
    try:
        payload = response.json()
    except ValueError as e:
        raise httpx.DecodingError(
            f"{name} returned a non-JSON models list", request=response.request
        ) from e
    models = payload.get("data") if isinstance(payload, dict) else None
    return models if isinstance(models, list) else []


class ModelFetcher:
    """Lists models for an endpoint and caches any token config it reports."""

    def __init__(self, cache: TokenConfigCache):
        self._cache = cache
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            settings = get_settings()
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(settings.model_fetch_timeout, connect=10.0),
                proxy=settings.proxy or None,
            )
        return self._client

    async def fetch_models(
        self,
        *,
        api_key: str,
        base_url: str,
        name: str,
        user: str = "",
        cache_key: str | None = None,
    ) -> list[str]:
        """Return the model ids the endpoint reports.

        HTTP and network errors propagate as httpx exceptions; a body that is
        not JSON raises httpx.DecodingError. A JSON body without a `data` list
        lists no models.
        """
        url = f"{base_url.rstrip('/')}/models"
        headers = {"Authorization": f"Bearer {api_key}"}
        params = {"user": user} if user else None

        client = await self._get_client()
        with RequestTimer() as timer:
            response = await client.get(url, headers=headers, params=params)
            response.raise_for_status()
        models = _parse_models(response, name)

        token_config = build_token_config(models)
        if cache_key and token_config:
            await self._cache.set(cache_key, token_config)

        get_audit_logger().info(
            "Models fetched",
            extra={"audit_data": {
                "endpoint": name,
                "model_count": len(models),
                "token_config_cached": bool(cache_key and token_config),
                "latency_ms": timer.elapsed_ms,
            }},
        )
        return [m["id"] for m in models if isinstance(m, dict) and m.get("id")]

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
