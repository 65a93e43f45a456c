"""
Unit tests for the shared/ utility modules.

Covers:
- shared.generators      (generate_verification_code, generate_session_id)
- shared.crypto          (codes_match)
- shared.datetime_utils  (utcnow, ensure_utc, format_duration)
- shared.logging         (redact_sensitive_fields)
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from shared.crypto import codes_match
from shared.datetime_utils import ensure_utc, format_duration, utcnow
from shared.generators import (
    VERIFICATION_CODE_MAX,
    VERIFICATION_CODE_MIN,
    generate_session_id,
    generate_verification_code,
)
from shared.logging import redact_sensitive_fields


# ---------------------------------------------------------------------------
# shared.generators
# ---------------------------------------------------------------------------


class TestGenerateVerificationCode:
    def test_six_digits(self):
        for _ in range(200):
            code = generate_verification_code()
            assert len(code) == 6
            assert code.isdigit()

    def test_within_range(self):
        for _ in range(200):
            assert VERIFICATION_CODE_MIN <= int(generate_verification_code()) <= VERIFICATION_CODE_MAX

    def test_bounds_reachable(self, mocker):
        randbelow = mocker.patch("shared.generators.secrets.randbelow")
        randbelow.return_value = 0
        assert generate_verification_code() == "100000"
        randbelow.return_value = 899999
        assert generate_verification_code() == "999999"
        randbelow.assert_called_with(900000)

    def test_not_constant(self):
        assert len({generate_verification_code() for _ in range(50)}) > 1


def test_generate_session_id_unique_and_urlsafe():
    ids = {generate_session_id() for _ in range(50)}
    assert len(ids) == 50
    for sid in ids:
        assert all(c.isalnum() or c in "-_" for c in sid)


# ---------------------------------------------------------------------------
# shared.crypto
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "expected, submitted, result",
    [
        ("482913", "482913", True),
        ("482913", "000000", False),
        ("482913", " 482913", False),
        ("482913", "482913 ", False),
        ("482913", "48291", False),
        ("482913", "", False),
        ("482913", None, False),
        (None, "482913", False),
        ("", "", False),
        ("482913", "\ud800", False),
        ("482913", "48291\udfff", False),
    ],
    ids=[
        "match",
        "mismatch",
        "leading_space",
        "trailing_space",
        "prefix",
        "empty_submission",
        "no_submission",
        "no_expected",
        "both_empty",
        "lone_surrogate",
        "trailing_surrogate",
    ],
)
def test_codes_match(expected, submitted, result):
    assert codes_match(expected, submitted) is result


def test_codes_match_no_unicode_normalisation():
    # fullwidth digits look alike but are different bytes
    assert codes_match("123456", "１２３４５６") is False


# ---------------------------------------------------------------------------
# shared.datetime_utils
# ---------------------------------------------------------------------------


class TestDatetimeUtils:
    def test_utcnow_is_aware(self):
        assert utcnow().tzinfo is not None

    def test_ensure_utc_none(self):
        assert ensure_utc(None) is None

    def test_ensure_utc_naive_assumed_utc(self):
        naive = datetime(2026, 1, 1, 12, 0)
        assert ensure_utc(naive) == datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def test_ensure_utc_converts_offset(self):
        plus_two = datetime(2026, 1, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
        assert ensure_utc(plus_two) == datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "seconds, text",
    [
        (1, "1 second"),
        (30, "30 seconds"),
        (60, "1 minute"),
        (61, "2 minutes"),
        (90, "2 minutes"),
        (600, "10 minutes"),
    ],
)
def test_format_duration_never_understates(seconds, text):
    assert format_duration(seconds) == text


# ---------------------------------------------------------------------------
# shared.logging
# ---------------------------------------------------------------------------


class TestRedaction:
    def test_codes_and_secrets_redacted(self):
        event = {
            "event": "verification_code_sent",
            "code": "482913",
            "session_secret": "x",
            "access_token": "y",
            "user_id": "u1",
        }
        out = redact_sensitive_fields(None, "info", event)
        assert out["code"] == "***REDACTED***"
        assert out["session_secret"] == "***REDACTED***"
        assert out["access_token"] == "***REDACTED***"
        assert out["user_id"] == "u1"
        assert out["event"] == "verification_code_sent"

    def test_reserved_keys_untouched(self):
        out = redact_sensitive_fields(None, "info", {"event": "token_refresh", "level": "info"})
        assert out == {"event": "token_refresh", "level": "info"}
