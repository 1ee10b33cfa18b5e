"""Gateway authentication and caller identity.

Callers authenticate with an X-API-Key header checked against the configured
gateway keys. The end user the request acts for is named in X-User-Id; it
selects that user's stored endpoint keys.
"""

import hmac

from fastapi import Header, HTTPException, Security
from fastapi.security import APIKeyHeader

from endpoint_gateway.config.settings import get_settings

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


async def verify_api_key(api_key: str | None = Security(api_key_header)) -> str:
    """FastAPI dependency that validates the caller's gateway key."""
    if api_key is None:
        raise HTTPException(status_code=401, detail="Missing API key")

    settings = get_settings()
    match = False
    for valid_key in settings.api_keys_list:
        # Always compare against every key to keep timing constant
        if hmac.compare_digest(api_key, valid_key):
            match = True

    if not match:
        raise HTTPException(status_code=403, detail="Invalid API key")
    return api_key


async def get_user_id(x_user_id: str | None = Header(default=None)) -> str:
    return (x_user_id or "").strip()
