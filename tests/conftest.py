"""Shared fixtures for the Custom Endpoint Gateway test suite."""

import json
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from endpoint_gateway.config.app_config import AppConfig, CustomEndpoint, ModelsConfig
from endpoint_gateway.config.settings import get_settings
from endpoint_gateway.credentials.models import UserKeyValues
from endpoint_gateway.tokens.cache import InMemoryTokenConfigCache


@pytest.fixture
def a4f_endpoint() -> CustomEndpoint:
    """A typical env-keyed custom endpoint."""
    return CustomEndpoint(
        name="A4F",
        api_key="${A4F_API_KEY}",
        base_url="https://api.a4f.co/v1",
        models=ModelsConfig(
            default=["provider-1/chatgpt-4o-latest", "provider-3/claude-3-5-sonnet-20240620"],
            fetch=True,
        ),
        title_convo=True,
        title_model="provider-1/chatgpt-4o-latest",
        model_display_label="A4F",
    )


@pytest.fixture
def make_app_config():
    """Factory fixture: AppConfig holding the given custom endpoints."""
    def _make(*endpoints: CustomEndpoint, **kwargs) -> AppConfig:
        return AppConfig(custom_endpoints=list(endpoints), **kwargs)

    return _make


@pytest.fixture
def future_expiry() -> str:
    return (datetime.now(timezone.utc) + timedelta(days=1)).isoformat()


@pytest.fixture
def past_expiry() -> str:
    return (datetime.now(timezone.utc) - timedelta(days=1)).isoformat()


@pytest.fixture
def user_key_store():
    """Mock user key store returning a full key/base URL pair."""
    store = AsyncMock()
    store.get_user_key_values.return_value = UserKeyValues(
        api_key="user-api-key", base_url="https://user-base-url.com"
    )
    return store


@pytest.fixture
def token_cache() -> InMemoryTokenConfigCache:
    return InMemoryTokenConfigCache()


@pytest.fixture
def user_keys_json_file(tmp_path):
    """Create a temp user_keys.json file and return its path."""
    data = {
        "keys": [
            {
                "user_id": "user-1",
                "name": "A4F",
                "api_key": "sk-user-1-a4f",
                "base_url": "https://user-1.example/v1",
            },
            {
                "user_id": "user-2",
                "name": "A4F",
                "api_key": "sk-user-2-a4f",
            },
        ]
    }
    path = tmp_path / "user_keys.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


@pytest.fixture
def app_config_file(tmp_path):
    """Create a temp endpoints.json app config and return its path."""
    data = {
        "endpoints": {
            "custom": [
                {
                    "name": "A4F",
                    "apiKey": "${A4F_API_KEY}",
                    "baseURL": "https://api.a4f.co/v1",
                    "models": {"default": ["provider-1/chatgpt-4o-latest"], "fetch": False},
                    "headers": {"X-Custom-Header": "custom-value"},
                    "dropParams": ["stop"],
                },
                {
                    "name": "Personal",
                    "apiKey": "user_provided",
                    "baseURL": "user_provided",
                },
            ],
            "all": {"streamRate": 25},
        },
        "balance": {"enabled": True, "startBalance": 20000},
        "transactions": {"enabled": False},
    }
    path = tmp_path / "endpoints.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


@pytest.fixture
def override_settings(monkeypatch):
    """Factory fixture: set env vars and clear settings cache.

    Usage:
        override_settings(CHECK_BALANCE="true", START_BALANCE="1000")
    """
    def _override(**kwargs):
        for key, value in kwargs.items():
            monkeypatch.setenv(key.upper(), str(value))
        # Clear lru_cache so Settings re-reads env
        get_settings.cache_clear()

    yield _override

    # Always clear cache on teardown so other tests get fresh settings
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def clean_balance_env(monkeypatch):
    """Keep legacy balance env vars from leaking in from the host."""
    monkeypatch.delenv("CHECK_BALANCE", raising=False)
    monkeypatch.delenv("START_BALANCE", raising=False)
    monkeypatch.delenv("PROXY", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
