"""
Server-side login session.

SessionData is the record kept in the session store under an opaque session
id; the browser only ever sees that id (inside the signed session cookie).

Lifecycle:
    ANONYMOUS ──google login──▶ AUTHENTICATED ──matching code──▶ VERIFIED
        ▲                             │                              │
        └────────────logout───────────┴──────────────logout──────────┘
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator

from shared.datetime_utils import ensure_utc


class GoogleProfile(BaseModel):
    """External identity asserted by Google at the end of the OAuth dance."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    email: str
    display_name: str = ""
    picture: Optional[str] = None


class SessionState(str, Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"
    VERIFIED = "verified"


class SessionData(BaseModel):
    """
    Authentication progress for one browser client.

    Invariants (checked on construction and on every assignment):
    - double_checked implies is_authenticated
    - is_authenticated implies a user profile is present
    """

    model_config = ConfigDict(validate_assignment=True)

    user: Optional[GoogleProfile] = None
    is_authenticated: bool = False
    double_checked: bool = False
    pending_code: Optional[str] = None
    code_issued_at: Optional[datetime] = None
    code_expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @model_validator(mode="after")
    def _check_flags(self) -> "SessionData":
        if self.double_checked and not self.is_authenticated:
            raise ValueError("double_checked requires is_authenticated")
        if self.is_authenticated and self.user is None:
            raise ValueError("an authenticated session needs a user profile")
        return self

    @property
    def state(self) -> SessionState:
        if not self.is_authenticated:
            return SessionState.ANONYMOUS
        if not self.double_checked:
            return SessionState.AUTHENTICATED
        return SessionState.VERIFIED

    def code_expired(self, now: datetime) -> bool:
        expires_at = ensure_utc(self.code_expires_at)
        if expires_at is None:
            return False
        return expires_at <= now


@dataclass
class SessionContext:
    """Per-request handle on a session, passed explicitly into handlers.

    session_id is None until a login creates a record in the store.
    """

    session_id: Optional[str]
    data: SessionData

    @classmethod
    def anonymous(cls) -> "SessionContext":
        return cls(session_id=None, data=SessionData())

    @property
    def state(self) -> SessionState:
        return self.data.state
