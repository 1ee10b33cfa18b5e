"""Factory for user key store backends."""

from endpoint_gateway.config.settings import get_settings
from endpoint_gateway.credentials.store import JSONUserKeyStore, UserKeyStore

_store: UserKeyStore | None = None


def get_user_key_store() -> UserKeyStore:
    """Get the user key store singleton for the configured backend."""
    global _store
    if _store is not None:
        return _store

    settings = get_settings()
    backend = settings.user_key_store_backend

    if backend == "json":
        # A missing file is an empty store
        _store = JSONUserKeyStore(settings.user_key_path)
    elif backend == "dynamodb":
        # Lazy import to avoid boto3 dependency when not needed
        from endpoint_gateway.credentials.dynamodb_store import DynamoDBUserKeyStore
        _store = DynamoDBUserKeyStore(
            table_name=settings.dynamodb_table_name,
            region=settings.aws_region,
        )
    else:
        raise ValueError(f"Unknown user key store backend: {backend}")

    return _store
