"""Balance and transactions policy resolution.

Balance settings come from two places: the legacy CHECK_BALANCE and
START_BALANCE env vars, and the `balance` block of the app config. Declared
values win field by field; env values fill the gaps.

Transactions must stay enabled whenever balance tracking is on, since balance
deductions are recorded as transactions.
"""

from dataclasses import fields, replace

from endpoint_gateway.config.app_config import AppConfig, BalanceConfig, TransactionsConfig
from endpoint_gateway.config.settings import Settings, get_settings
from endpoint_gateway.logging.audit import get_audit_logger

TRANSACTIONS_CONFLICT_WARNING = (
    "Configuration warning: transactions.enabled=false is incompatible with "
    "balance.enabled=true. Transactions will be enabled to ensure balance "
    "tracking works correctly."
)


def is_enabled(value: str | bool | None) -> bool:
    """Interpret a boolean-like env value; only "true" (any case) is enabled."""
    if isinstance(value, bool):
        return value
    if not value:
        return False
    return value.strip().lower() == "true"


def _parse_start_balance(raw: str) -> int | None:
    """Whole credits from START_BALANCE; a fractional value is truncated."""
    if not raw or not raw.strip():
        return None
    try:
        return int(float(raw.strip()))
    except (ValueError, OverflowError):
        get_audit_logger().warning(
            "Ignoring non-numeric START_BALANCE",
            extra={"audit_data": {"start_balance": raw}},
        )
        return None


def get_balance_config(
    app_config: AppConfig | None = None, settings: Settings | None = None
) -> BalanceConfig:
    """Resolve the effective balance policy.

    `enabled` is always a bool in the result; other fields stay None when
    neither source sets them.
    """
    settings = settings or get_settings()

    resolved = BalanceConfig(
        enabled=is_enabled(settings.check_balance),
        start_balance=_parse_start_balance(settings.start_balance),
    )
    if app_config is None or app_config.balance is None:
        return resolved

    declared = {
        f.name: getattr(app_config.balance, f.name)
        for f in fields(BalanceConfig)
        if getattr(app_config.balance, f.name) is not None
    }
    return replace(resolved, **declared)


def get_transactions_config(
    app_config: AppConfig | None = None, settings: Settings | None = None
) -> TransactionsConfig:
    """Resolve the effective transactions policy, forcing it on under balance."""
    if app_config is None:
        return TransactionsConfig(enabled=True)

    transactions = app_config.transactions or TransactionsConfig(enabled=True)
    balance = get_balance_config(app_config, settings)

    if balance.enabled and not transactions.enabled:
        get_audit_logger().warning(TRANSACTIONS_CONFLICT_WARNING)
        return replace(transactions, enabled=True)

    return transactions
