"""Find the declarative config block for a named custom endpoint."""

from endpoint_gateway.config.app_config import AppConfig, CustomEndpoint
from endpoint_gateway.errors import ConfigNotFoundError

# Endpoint names that are commonly written with varying case, by canonical form
_CANONICAL_NAMES = {"ollama"}


def normalize_endpoint_name(name: str) -> str:
    """Map known aliases to their canonical lowercase name.

    Other names are returned unchanged, so matching stays case-sensitive.
    """
    lowered = name.lower()
    if lowered in _CANONICAL_NAMES:
        return lowered
    return name


def get_custom_endpoint_config(
    endpoint: str, app_config: AppConfig | None
) -> CustomEndpoint | None:
    """Return the first custom endpoint whose normalized name matches.

    Raises:
        ConfigNotFoundError: if no application config is loaded at all.
    """
    if app_config is None:
        raise ConfigNotFoundError(endpoint)

    wanted = normalize_endpoint_name(endpoint)
    for endpoint_config in app_config.custom_endpoints or []:
        if normalize_endpoint_name(endpoint_config.name) == wanted:
            return endpoint_config
    return None
