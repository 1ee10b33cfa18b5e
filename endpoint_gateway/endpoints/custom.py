"""Initialize a client config for a named custom endpoint.

Pipeline: config lookup -> credential resolution -> token config (static,
cached, or fetched) -> client options -> options builder. Any failure aborts
the call; nothing here retries or returns a partial config.

Every custom endpoint goes through the same steps; there is no per-provider
branching.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from endpoint_gateway.config.app_config import AppConfig, CustomEndpoint
from endpoint_gateway.config.lookup import get_custom_endpoint_config
from endpoint_gateway.config.settings import Settings, get_settings
from endpoint_gateway.credentials.models import ResolvedCredentials
from endpoint_gateway.credentials.resolver import resolve_credentials
from endpoint_gateway.credentials.store import UserKeyStore
from endpoint_gateway.errors import ConfigNotFoundError
from endpoint_gateway.logging.audit import get_audit_logger
from endpoint_gateway.providers.base import ClientConfig, ClientOptions, OptionsBuilder
from endpoint_gateway.providers.openai_config import get_openai_config
from endpoint_gateway.tokens.cache import TokenConfig, TokenConfigCache, make_token_cache_key

# Called with api_key, base_url, name, user, cache_key; expected to fill the cache
FetchModels = Callable[..., Awaitable[Any]]


@dataclass
class RequestContext:
    user_id: str = ""
    expires_at: str | datetime | None = None  # expiry of the user's stored key


async def _get_token_config(
    endpoint: str,
    endpoint_config: CustomEndpoint,
    credentials: ResolvedCredentials,
    user_id: str,
    token_cache: TokenConfigCache,
    fetch_models: FetchModels,
) -> TokenConfig | None:
    # Static config always wins over fetched data
    if endpoint_config.token_config:
        return endpoint_config.token_config

    cache_key = make_token_cache_key(endpoint, user_id, credentials.user_provided)
    token_config = await token_cache.get(cache_key)
    if token_config:
        get_audit_logger().debug(
            "Token config cache hit",
            extra={"audit_data": {"endpoint": endpoint, "cache_key": cache_key}},
        )
        return token_config

    if not endpoint_config.models.fetch:
        return None

    await fetch_models(
        api_key=credentials.api_key,
        base_url=credentials.base_url,
        name=endpoint,
        user=user_id,
        cache_key=cache_key,
    )
    return await token_cache.get(cache_key)


def _build_client_options(
    endpoint_config: CustomEndpoint,
    app_config: AppConfig,
    credentials: ResolvedCredentials,
    model_parameters: dict | None,
    user_id: str,
    settings: Settings,
) -> ClientOptions:
    model_options: dict = {}
    if endpoint_config.models.default:
        model_options["model"] = endpoint_config.models.default[0]
    model_options.update(model_parameters or {})
    model_options["user"] = user_id

    stream_rate = endpoint_config.stream_rate
    if app_config.all_endpoints is not None and app_config.all_endpoints.stream_rate is not None:
        stream_rate = app_config.all_endpoints.stream_rate

    return ClientOptions(
        model_options=model_options,
        reverse_proxy_url=credentials.base_url,
        proxy=settings.proxy,
        headers=endpoint_config.headers,
        add_params=endpoint_config.add_params,
        drop_params=endpoint_config.drop_params,
        stream_rate=stream_rate,
        title_convo=endpoint_config.title_convo,
        title_model=endpoint_config.title_model,
        title_method=endpoint_config.title_method,
        summarize=endpoint_config.summarize,
        summary_model=endpoint_config.summary_model,
        model_display_label=endpoint_config.model_display_label,
    )


async def initialize_custom(
    *,
    request: RequestContext,
    endpoint: str,
    app_config: AppConfig | None,
    store: UserKeyStore,
    token_cache: TokenConfigCache,
    fetch_models: FetchModels,
    model_parameters: dict | None = None,
    build_options: OptionsBuilder = get_openai_config,
    settings: Settings | None = None,
) -> ClientConfig:
    """Resolve `endpoint` into a ready-to-use client config.

    Raises:
        ConfigNotFoundError: no app config, or no endpoint with that name.
        MissingEnvVarError, MissingCredentialError, ExpiredUserKeyError,
        UserCredentialError: credential resolution failed.
        Errors from the user key store and from `fetch_models` propagate as-is.
    """
    settings = settings or get_settings()

    endpoint_config = get_custom_endpoint_config(endpoint, app_config)
    if endpoint_config is None:
        raise ConfigNotFoundError(endpoint)

    user_id = request.user_id or ""
    credentials = await resolve_credentials(
        endpoint,
        endpoint_config,
        user_id=user_id,
        expires_at=request.expires_at,
        store=store,
    )

    token_config = await _get_token_config(
        endpoint, endpoint_config, credentials, user_id, token_cache, fetch_models
    )

    options = _build_client_options(
        endpoint_config, app_config, credentials, model_parameters, user_id, settings
    )
    client_config = build_options(credentials.api_key, options, endpoint)
    client_config.use_legacy_content = True
    client_config.endpoint_token_config = token_config
    if options.stream_rate:
        client_config.llm_config["_lc_stream_delay"] = options.stream_rate

    get_audit_logger().info(
        "Custom endpoint initialized",
        extra={"audit_data": {
            "endpoint": endpoint,
            "user_id": user_id,
            "user_provided_credentials": credentials.user_provided,
            "model": client_config.llm_config.get("model"),
            "token_config": token_config is not None,
        }},
    )
    return client_config
