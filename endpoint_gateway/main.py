"""Custom Endpoint Gateway — FastAPI application entry point.

Resolves named custom endpoints (OpenAI-compatible providers declared in the
app config) into client configs, combining declared settings, environment
placeholders and per-user stored keys.
"""

import json
from contextlib import asynccontextmanager
from dataclasses import asdict

import httpx
from fastapi import Depends, FastAPI, HTTPException, Request

from endpoint_gateway.config.app_config import get_app_config
from endpoint_gateway.config.balance import get_balance_config, get_transactions_config
from endpoint_gateway.credentials.factory import get_user_key_store
from endpoint_gateway.endpoints.custom import RequestContext, initialize_custom
from endpoint_gateway.errors import (
    ConfigNotFoundError,
    ExpiredUserKeyError,
    MissingCredentialError,
    MissingEnvVarError,
    UserCredentialError,
)
from endpoint_gateway.logging.audit import (
    RequestTimer,
    generate_request_id,
    get_audit_logger,
    mask_secret,
    request_id_var,
    setup_logging,
)
from endpoint_gateway.providers.base import ClientConfig
from endpoint_gateway.providers.registry import close_model_fetcher, get_model_fetcher
from endpoint_gateway.security.auth import get_user_id, verify_api_key
from endpoint_gateway.tokens.cache import get_token_config_cache

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle hooks."""
    setup_logging()
    get_audit_logger().info("Gateway started")
    yield
    await close_model_fetcher()
    get_audit_logger().info("Gateway stopped")


app = FastAPI(
    title="Custom Endpoint Gateway",
    description="Resolves custom OpenAI-compatible endpoints into client configs",
    version=VERSION,
    lifespan=lifespan,
)


@app.get("/health")
async def health():
    return {"status": "healthy", "version": VERSION}


@app.post("/v1/endpoints/{endpoint}/initialize")
async def initialize_endpoint(
    endpoint: str,
    request: Request,
    _: str = Depends(verify_api_key),
    user_id: str = Depends(get_user_id),
):
    """Resolve a custom endpoint for the calling user.

    Body (optional): {"key": "<expiry of the user's stored key>", "model_parameters": {...}}
    """
    logger = get_audit_logger()
    rid = generate_request_id()
    request_id_var.set(rid)

    body = await _read_body(request)
    context = RequestContext(user_id=user_id, expires_at=body.get("key"))

    try:
        with RequestTimer() as timer:
            client_config = await initialize_custom(
                request=context,
                endpoint=endpoint,
                app_config=get_app_config(),
                store=get_user_key_store(),
                token_cache=get_token_config_cache(),
                fetch_models=get_model_fetcher().fetch_models,
                model_parameters=body.get("model_parameters"),
            )
    except ConfigNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except UserCredentialError as e:
        raise HTTPException(status_code=400, detail=e.payload)
    except ExpiredUserKeyError as e:
        raise HTTPException(status_code=401, detail=e.payload)
    except (MissingEnvVarError, MissingCredentialError) as e:
        logger.error(
            "Endpoint misconfigured",
            extra={"audit_data": {"endpoint": endpoint, "error": e.message}},
        )
        raise HTTPException(status_code=500, detail=e.message)
    except httpx.HTTPError as e:
        logger.error(
            "Model fetch failed",
            extra={"audit_data": {"endpoint": endpoint, "error": str(e)}},
        )
        raise HTTPException(status_code=502, detail=f"Model fetch failed: {e}")

    logger.info(
        "Initialize request served",
        extra={"audit_data": {
            "endpoint": endpoint,
            "user_id": user_id,
            "latency_ms": timer.elapsed_ms,
        }},
    )
    return _serialize_client_config(endpoint, client_config)


@app.get("/v1/config/balance")
async def balance_config(_: str = Depends(verify_api_key)):
    return _drop_none(asdict(get_balance_config(get_app_config())))


@app.get("/v1/config/transactions")
async def transactions_config(_: str = Depends(verify_api_key)):
    return asdict(get_transactions_config(get_app_config()))


async def _read_body(request: Request) -> dict:
    raw = await request.body()
    if not raw:
        return {}
    try:
        body = json.loads(raw)
    except json.JSONDecodeError:
        raise HTTPException(status_code=400, detail="Request body must be JSON")
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="Request body must be a JSON object")
    if body.get("model_parameters") is not None and not isinstance(body["model_parameters"], dict):
        raise HTTPException(status_code=400, detail="model_parameters must be a JSON object")
    return body


def _serialize_client_config(endpoint: str, client_config: ClientConfig) -> dict:
    """Render a client config for the response, masking the API key."""
    llm_config = dict(client_config.llm_config)
    if "api_key" in llm_config:
        llm_config["api_key"] = mask_secret(llm_config["api_key"])
    return {
        "endpoint": endpoint,
        "llm_config": llm_config,
        "configuration_options": client_config.configuration_options,
        "tools": client_config.tools,
        "use_legacy_content": client_config.use_legacy_content,
        "endpoint_token_config": client_config.endpoint_token_config,
    }


def _drop_none(data: dict) -> dict:
    return {k: v for k, v in data.items() if v is not None}
