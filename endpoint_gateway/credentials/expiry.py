"""Expiry check for user-provided endpoint keys."""

from datetime import datetime, timezone

from endpoint_gateway.errors import ExpiredUserKeyError


def _parse_expiry(expires_at: object) -> datetime | None:
    if isinstance(expires_at, datetime):
        parsed = expires_at
    elif isinstance(expires_at, str):
        try:
            # fromisoformat() only accepts a trailing "Z" from 3.11 on
            parsed = datetime.fromisoformat(expires_at.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def check_user_key_expiry(expires_at: str | datetime, endpoint: str) -> None:
    """Raise ExpiredUserKeyError if the key expiry is in the past or unreadable.

    Anything other than an ISO-8601 string or a datetime is unreadable.
    """
    parsed = _parse_expiry(expires_at)
    if parsed is None or parsed < datetime.now(timezone.utc):
        raise ExpiredUserKeyError(str(expires_at), endpoint)
