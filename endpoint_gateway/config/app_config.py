"""Declarative application config: custom endpoints, balance and transactions.

The on-disk document uses the camelCase keys of the endpoint config format:

    {
      "endpoints": {
        "custom": [
          {"name": "OpenRouter", "apiKey": "${OPENROUTER_KEY}",
           "baseURL": "https://openrouter.ai/api/v1",
           "models": {"default": ["openrouter/auto"], "fetch": true}}
        ],
        "all": {"streamRate": 25}
      },
      "balance": {"enabled": true, "startBalance": 20000},
      "transactions": {"enabled": true}
    }

The config is loaded once per process and treated as read-only afterwards.
"""

import json
import os
from dataclasses import dataclass, field

from endpoint_gateway.config.settings import get_settings


@dataclass
class ModelsConfig:
    default: list[str] = field(default_factory=list)
    fetch: bool = False


@dataclass
class CustomEndpoint:
    name: str
    api_key: str = ""  # literal | "${VAR}" | "user_provided"
    base_url: str = ""  # literal | "${VAR}" | "user_provided"
    models: ModelsConfig = field(default_factory=ModelsConfig)
    headers: dict[str, str] = field(default_factory=dict)
    add_params: dict = field(default_factory=dict)
    drop_params: list[str] = field(default_factory=list)
    token_config: dict | None = None  # pre-resolved model token metadata
    title_convo: bool = False
    title_model: str | None = None
    title_method: str | None = None
    summarize: bool = False
    summary_model: str | None = None
    model_display_label: str | None = None
    stream_rate: int | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "CustomEndpoint":
        models = data.get("models") or {}
        return cls(
            name=data["name"],
            api_key=data.get("apiKey") or "",
            base_url=data.get("baseURL") or "",
            models=ModelsConfig(
                default=list(models.get("default") or []),
                fetch=bool(models.get("fetch", False)),
            ),
            headers=dict(data.get("headers") or {}),
            add_params=dict(data.get("addParams") or {}),
            drop_params=list(data.get("dropParams") or []),
            token_config=data.get("tokenConfig"),
            title_convo=bool(data.get("titleConvo", False)),
            title_model=data.get("titleModel"),
            title_method=data.get("titleMethod"),
            summarize=bool(data.get("summarize", False)),
            summary_model=data.get("summaryModel"),
            model_display_label=data.get("modelDisplayLabel"),
            stream_rate=data.get("streamRate"),
        )


@dataclass
class EndpointDefaults:
    """Settings under `endpoints.all`, applied to every endpoint."""

    stream_rate: int | None = None


@dataclass
class BalanceConfig:
    enabled: bool | None = None
    start_balance: int | None = None
    auto_refill_enabled: bool | None = None
    refill_interval_value: int | None = None
    refill_interval_unit: str | None = None
    refill_amount: int | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "BalanceConfig":
        return cls(
            enabled=data.get("enabled"),
            start_balance=data.get("startBalance"),
            auto_refill_enabled=data.get("autoRefillEnabled"),
            refill_interval_value=data.get("refillIntervalValue"),
            refill_interval_unit=data.get("refillIntervalUnit"),
            refill_amount=data.get("refillAmount"),
        )


@dataclass
class TransactionsConfig:
    enabled: bool = True


@dataclass
class AppPaths:
    uploads: str = ""
    image_output: str = ""
    public_path: str = ""


@dataclass
class AppConfig:
    custom_endpoints: list[CustomEndpoint] | None = None
    balance: BalanceConfig | None = None
    transactions: TransactionsConfig | None = None
    paths: AppPaths = field(default_factory=AppPaths)
    all_endpoints: EndpointDefaults | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "AppConfig":
        endpoints = data.get("endpoints")
        custom = None
        all_endpoints = None
        if endpoints is not None:
            custom = [CustomEndpoint.from_dict(entry) for entry in endpoints.get("custom") or []]
            if endpoints.get("all") is not None:
                all_endpoints = EndpointDefaults(stream_rate=endpoints["all"].get("streamRate"))

        balance = data.get("balance")
        transactions = data.get("transactions")
        transactions_enabled = None if transactions is None else transactions.get("enabled")
        paths = data.get("paths") or {}

        return cls(
            custom_endpoints=custom,
            balance=BalanceConfig.from_dict(balance) if balance is not None else None,
            transactions=(
                TransactionsConfig(enabled=True if transactions_enabled is None else bool(transactions_enabled))
                if transactions is not None
                else None
            ),
            paths=AppPaths(
                uploads=paths.get("uploads", ""),
                image_output=paths.get("imageOutput", ""),
                public_path=paths.get("publicPath", ""),
            ),
            all_endpoints=all_endpoints,
        )


def load_app_config(path: str) -> AppConfig:
    """Read and map a JSON config document."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    return AppConfig.from_dict(data)


_app_config: AppConfig | None = None


def get_app_config() -> AppConfig | None:
    """Get the process-wide app config. Returns None if no config file exists."""
    global _app_config
    if _app_config is not None:
        return _app_config

    path = get_settings().app_config_path
    if path and os.path.isfile(path):
        _app_config = load_app_config(path)
    return _app_config
