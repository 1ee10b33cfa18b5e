"""Application settings loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Gateway authentication
    # Comma-separated list of valid API keys for callers
    gateway_api_keys: str = "dev-key-1"

    # Declarative endpoint config (JSON document with endpoints/balance/transactions)
    app_config_path: str = "endpoints.json"

    # Per-user credential store
    user_key_store_backend: str = "json"  # "json" | "dynamodb"
    user_key_path: str = "user_keys.json"
    dynamodb_table_name: str = "llm-gateway-user-keys"
    aws_region: str = "us-east-1"

    # Outbound network proxy applied to endpoint clients and model fetches
    proxy: str = ""
    model_fetch_timeout: float = 30.0

    # Legacy balance flags; declarative `balance` settings take precedence
    check_balance: str = ""
    start_balance: str = ""

    # Logging
    log_level: str = "INFO"
    audit_log_file: str = ""  # Empty = stdout only

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def api_keys_list(self) -> list[str]:
        """Parse comma-separated API keys into a list."""
        return [k.strip() for k in self.gateway_api_keys.split(",") if k.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
