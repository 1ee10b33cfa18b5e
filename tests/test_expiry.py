"""Tests for endpoint_gateway/credentials/expiry.py — user key expiry."""

import json
from datetime import datetime, timedelta, timezone

import pytest

from endpoint_gateway.credentials.expiry import check_user_key_expiry
from endpoint_gateway.errors import ErrorType, ExpiredUserKeyError


class TestCheckUserKeyExpiry:

    def test_future_string_passes(self, future_expiry):
        check_user_key_expiry(future_expiry, "X")

    def test_future_z_suffix_passes(self):
        future = (datetime.now(timezone.utc) + timedelta(hours=1)).strftime("%Y-%m-%dT%H:%M:%S.000Z")
        check_user_key_expiry(future, "X")

    def test_future_datetime_passes(self):
        check_user_key_expiry(datetime.now(timezone.utc) + timedelta(minutes=5), "X")

    def test_past_raises_structured_error(self, past_expiry):
        with pytest.raises(ExpiredUserKeyError) as exc_info:
            check_user_key_expiry(past_expiry, "X")
        payload = json.loads(str(exc_info.value))
        assert payload == {
            "type": ErrorType.EXPIRED_USER_KEY.value,
            "expiredAt": past_expiry,
            "endpoint": "X",
        }

    def test_naive_timestamp_treated_as_utc(self):
        past = (datetime.now(timezone.utc) - timedelta(hours=1)).replace(tzinfo=None)
        with pytest.raises(ExpiredUserKeyError):
            check_user_key_expiry(past.isoformat(), "X")

    def test_unparseable_treated_as_expired(self):
        with pytest.raises(ExpiredUserKeyError):
            check_user_key_expiry("not-a-date", "X")

    @pytest.mark.parametrize("value", [1700000000000, 12.5, ["2099-01-01"], {"at": "2099-01-01"}])
    def test_non_string_treated_as_expired(self, value):
        with pytest.raises(ExpiredUserKeyError) as exc_info:
            check_user_key_expiry(value, "X")
        assert exc_info.value.payload["expiredAt"] == str(value)
