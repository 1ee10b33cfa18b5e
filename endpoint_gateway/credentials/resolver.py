"""Resolve the API key and base URL for a custom endpoint.

Each config credential is one of three shapes:

- a literal value, used as-is;
- a `${VAR}` placeholder, replaced from the environment;
- the "user_provided" sentinel, looked up in the user's stored keys.

The two fields are classified independently. The user key store is read at
most once per call, and only if at least one field is user-provided.
"""

from collections.abc import Mapping
from datetime import datetime

from endpoint_gateway.config.app_config import CustomEndpoint
from endpoint_gateway.config.env import (
    extract_env_variable,
    is_unresolved_placeholder,
    is_user_provided,
)
from endpoint_gateway.credentials.expiry import check_user_key_expiry
from endpoint_gateway.credentials.models import (
    CredentialSource,
    ResolvedCredential,
    ResolvedCredentials,
    UserKeyValues,
)
from endpoint_gateway.credentials.store import UserKeyStore
from endpoint_gateway.errors import (
    ErrorType,
    MissingCredentialError,
    MissingEnvVarError,
    UserCredentialError,
)


def classify_credential(raw: str | None, env: Mapping[str, str] | None = None) -> ResolvedCredential:
    value = extract_env_variable(raw or "", env)
    if is_unresolved_placeholder(value):
        return ResolvedCredential(CredentialSource.UNRESOLVED_PLACEHOLDER, value)
    if is_user_provided(value):
        return ResolvedCredential(CredentialSource.USER_PROVIDED, value)
    return ResolvedCredential(CredentialSource.LITERAL, value)


def _select(
    credential: ResolvedCredential,
    stored: str | None,
    *,
    endpoint: str,
    missing_error_type: ErrorType,
    literal_label: str,
) -> str:
    if credential.source is CredentialSource.USER_PROVIDED:
        if not stored:
            raise UserCredentialError(missing_error_type, endpoint)
        return stored
    if credential.source is CredentialSource.LITERAL:
        if not credential.value:
            raise MissingCredentialError(literal_label, endpoint)
        return credential.value
    # Placeholders are rejected before any store access
    raise AssertionError(f"unexpected credential source: {credential.source}")


async def resolve_credentials(
    endpoint: str,
    endpoint_config: CustomEndpoint,
    *,
    user_id: str,
    expires_at: str | datetime | None,
    store: UserKeyStore,
    env: Mapping[str, str] | None = None,
) -> ResolvedCredentials:
    """Resolve both credentials for `endpoint`.

    Raises:
        MissingEnvVarError: a placeholder did not resolve.
        ExpiredUserKeyError: the request's key expiry has passed.
        UserCredentialError: a user-provided field is missing from the store.
        MissingCredentialError: a literal field is empty.
    """
    api_key = classify_credential(endpoint_config.api_key, env)
    base_url = classify_credential(endpoint_config.base_url, env)

    if api_key.source is CredentialSource.UNRESOLVED_PLACEHOLDER:
        raise MissingEnvVarError("API Key", endpoint)
    if base_url.source is CredentialSource.UNRESOLVED_PLACEHOLDER:
        raise MissingEnvVarError("Base URL", endpoint)

    user_provided = CredentialSource.USER_PROVIDED in (api_key.source, base_url.source)

    stored = UserKeyValues()
    if user_provided:
        if expires_at:
            check_user_key_expiry(expires_at, endpoint)
        stored = await store.get_user_key_values(user_id=user_id, name=endpoint) or UserKeyValues()

    return ResolvedCredentials(
        api_key=_select(
            api_key,
            stored.api_key,
            endpoint=endpoint,
            missing_error_type=ErrorType.NO_USER_KEY,
            literal_label="API key",
        ),
        base_url=_select(
            base_url,
            stored.base_url,
            endpoint=endpoint,
            missing_error_type=ErrorType.NO_BASE_URL,
            literal_label="Base URL",
        ),
        user_provided=user_provided,
    )
