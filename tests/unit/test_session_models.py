"""Unit tests for SessionData, SessionContext and the response DTOs built on them."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from schemas.dto.responses.auth import SessionUserResponse
from schemas.models.session import (
    GoogleProfile,
    SessionContext,
    SessionData,
    SessionState,
)

PROFILE = GoogleProfile(
    id="1093", email="ada@example.com", display_name="Ada Lovelace", picture=None
)
NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


class TestSessionState:
    def test_default_is_anonymous(self):
        assert SessionData().state is SessionState.ANONYMOUS

    def test_authenticated(self):
        s = SessionData(user=PROFILE, is_authenticated=True)
        assert s.state is SessionState.AUTHENTICATED

    def test_verified(self):
        s = SessionData(user=PROFILE, is_authenticated=True, double_checked=True)
        assert s.state is SessionState.VERIFIED


class TestInvariants:
    def test_double_checked_requires_authenticated(self):
        with pytest.raises(PydanticValidationError):
            SessionData(user=PROFILE, is_authenticated=False, double_checked=True)

    def test_authenticated_requires_user(self):
        with pytest.raises(PydanticValidationError):
            SessionData(is_authenticated=True)

    def test_assignment_is_validated(self):
        s = SessionData()
        with pytest.raises(PydanticValidationError):
            s.double_checked = True

    def test_valid_assignment_allowed(self):
        s = SessionData(user=PROFILE, is_authenticated=True)
        s.double_checked = True
        assert s.state is SessionState.VERIFIED


class TestCodeExpiry:
    def test_no_expiry_means_not_expired(self):
        assert SessionData().code_expired(NOW) is False

    def test_future_expiry(self):
        s = SessionData(code_expires_at=NOW + timedelta(seconds=1))
        assert s.code_expired(NOW) is False

    def test_expiry_boundary_is_expired(self):
        s = SessionData(code_expires_at=NOW)
        assert s.code_expired(NOW) is True

    def test_naive_expiry_treated_as_utc(self):
        s = SessionData(code_expires_at=datetime(2026, 1, 1, 11, 59))
        assert s.code_expired(NOW) is True


class TestSerialisation:
    def test_json_preserves_state(self):
        s = SessionData(
            user=PROFILE,
            is_authenticated=True,
            pending_code="482913",
            code_issued_at=NOW,
            code_expires_at=NOW + timedelta(minutes=10),
        )
        restored = SessionData.model_validate_json(s.model_dump_json())
        assert restored == s
        assert restored.code_expires_at.tzinfo is not None


class TestSessionContext:
    def test_anonymous(self):
        ctx = SessionContext.anonymous()
        assert ctx.session_id is None
        assert ctx.state is SessionState.ANONYMOUS

    def test_state_follows_data(self):
        ctx = SessionContext("sid", SessionData(user=PROFILE, is_authenticated=True))
        assert ctx.state is SessionState.AUTHENTICATED


def test_session_user_response_from_profile():
    resp = SessionUserResponse.from_profile(PROFILE)
    assert resp.model_dump() == {
        "id": "1093",
        "email": "ada@example.com",
        "display_name": "Ada Lovelace",
        "picture": None,
    }
