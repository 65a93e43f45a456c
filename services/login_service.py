"""
Two-step login orchestration: Google identity, then an emailed code.

LoginOrchestrator is the only writer of session state. Route handlers hand it
an explicit SessionContext and it persists the result through the
SessionStore; nothing here reads request globals.
"""

from __future__ import annotations

from datetime import timedelta
from enum import Enum
from typing import Callable, Optional

from errors import AuthenticationError, EmailDeliveryError
from infrastructure.email.protocol import EmailProvider
from infrastructure.session.protocol import SessionStore
from repositories.user_repository import UserRepository
from schemas.models.session import (
    GoogleProfile,
    SessionContext,
    SessionData,
    SessionState,
)
from shared.crypto import codes_match
from shared.datetime_utils import utcnow
from shared.generators import generate_session_id, generate_verification_code
from shared.logging import get_logger

log = get_logger(__name__)


class ChallengeOutcome(str, Enum):
    VERIFIED = "verified"
    MISMATCH = "mismatch"
    EXPIRED = "expired"
    NO_CHALLENGE = "no_challenge"


class LoginOrchestrator:
    def __init__(
        self,
        store: SessionStore,
        email: EmailProvider,
        users: Optional[UserRepository] = None,
        code_ttl_seconds: int = 600,
        clock: Callable = utcnow,
        code_generator: Callable[[], str] = generate_verification_code,
    ) -> None:
        self._store = store
        self._email = email
        self._users = users
        self._code_ttl = timedelta(seconds=code_ttl_seconds)
        self._clock = clock
        self._generate_code = code_generator

    async def begin_session(
        self, profile: GoogleProfile, previous: Optional[SessionContext] = None
    ) -> SessionContext:
        """Start an AUTHENTICATED session for a freshly verified Google identity.

        A new session id is always minted; any earlier session for this browser
        is discarded so a pre-login id can never be carried into a login.
        """
        if previous is not None and previous.session_id:
            await self._store.delete(previous.session_id)

        if self._users is not None:
            await self._users.upsert_google_user(profile)

        ctx = SessionContext(
            session_id=generate_session_id(),
            data=SessionData(
                user=profile,
                is_authenticated=True,
                double_checked=False,
                created_at=self._clock(),
            ),
        )
        await self._store.save(ctx.session_id, ctx.data)
        log.info("session_started", user_id=profile.id)
        return ctx

    async def issue_challenge(self, ctx: SessionContext) -> None:
        """Email a fresh double-check code and remember it in the session.

        The code is stored only after the provider accepted it; on delivery
        failure the session is left exactly as it was.
        """
        if ctx.state is SessionState.ANONYMOUS or ctx.session_id is None:
            raise AuthenticationError("Authentication required")

        user = ctx.data.user
        code = self._generate_code()
        sent = await self._email.send_verification_email(
            user.email, user.display_name or None, code
        )
        if not sent:
            log.error("verification_code_delivery_failed", user_id=user.id)
            raise EmailDeliveryError("Failed to send verification email")

        issued_at = self._clock()
        ctx.data.pending_code = code
        ctx.data.code_issued_at = issued_at
        ctx.data.code_expires_at = issued_at + self._code_ttl
        await self._store.save(ctx.session_id, ctx.data)
        log.info("verification_code_sent", user_id=user.id)

    async def submit_challenge(
        self, ctx: SessionContext, candidate: Optional[str]
    ) -> ChallengeOutcome:
        """Check *candidate* against the pending code.

        Only a match moves the session to VERIFIED; every other outcome
        leaves it untouched. Attempts are not counted.
        """
        if ctx.state is SessionState.ANONYMOUS or ctx.session_id is None:
            raise AuthenticationError("Authentication required")
        if ctx.state is SessionState.VERIFIED:
            return ChallengeOutcome.VERIFIED

        user_id = ctx.data.user.id
        if not ctx.data.pending_code:
            log.warning("verification_failed", user_id=user_id, reason="no_challenge")
            return ChallengeOutcome.NO_CHALLENGE
        if ctx.data.code_expired(self._clock()):
            log.warning("verification_failed", user_id=user_id, reason="expired")
            return ChallengeOutcome.EXPIRED
        if not codes_match(ctx.data.pending_code, candidate):
            log.warning("verification_failed", user_id=user_id, reason="mismatch")
            return ChallengeOutcome.MISMATCH

        ctx.data.double_checked = True
        ctx.data.pending_code = None
        ctx.data.code_issued_at = None
        ctx.data.code_expires_at = None
        await self._store.save(ctx.session_id, ctx.data)
        log.info("verification_succeeded", user_id=user_id)
        return ChallengeOutcome.VERIFIED

    async def end_session(self, ctx: SessionContext) -> SessionContext:
        """Forget the session. Google's own login state is left alone."""
        if ctx.session_id is not None:
            await self._store.delete(ctx.session_id)
        if ctx.data.user is not None:
            log.info("session_ended", user_id=ctx.data.user.id)
        return SessionContext.anonymous()
