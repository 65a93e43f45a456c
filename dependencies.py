"""
FastAPI dependency providers.

All injectable dependencies are defined here as plain functions used with
FastAPI's Depends() system. Collaborators are created once in the app
lifespan and stored on app.state; the per-request SessionContext is built
here from the signed session cookie and the session store.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request

from config import AppSettings
from errors import AuthenticationError, VerificationRequiredError
from infrastructure.oauth_clients import GoogleIdentityProvider
from infrastructure.session.protocol import SessionStore
from schemas.models.session import SessionContext, SessionState
from services.login_service import LoginOrchestrator

SESSION_ID_KEY = "sid"


def get_settings(request: Request) -> AppSettings:
    """Return the AppSettings instance stored on app.state."""
    return request.app.state.settings


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_identity_provider(request: Request) -> Optional[GoogleIdentityProvider]:
    """Return the Google provider, or None when OAuth is not configured."""
    return request.app.state.identity_provider


def get_login_orchestrator(request: Request) -> LoginOrchestrator:
    return request.app.state.login_orchestrator


async def get_session_context(
    request: Request, store: SessionStore = Depends(get_session_store)
) -> SessionContext:
    """Load the caller's session; unknown or expired ids read as anonymous.

    Only a confirmed miss drops the sid from the cookie. A store outage
    propagates as a 503 and leaves the cookie alone.
    """
    session_id = request.session.get(SESSION_ID_KEY)
    if not session_id:
        return SessionContext.anonymous()
    data = await store.load(session_id)
    if data is None:
        request.session.pop(SESSION_ID_KEY, None)
        return SessionContext.anonymous()
    return SessionContext(session_id=session_id, data=data)


def bind_session(request: Request, ctx: SessionContext) -> None:
    """Point the browser's signed cookie at *ctx* (or clear it when anonymous)."""
    if ctx.session_id is None:
        request.session.clear()
    else:
        request.session[SESSION_ID_KEY] = ctx.session_id


async def require_authenticated(
    ctx: SessionContext = Depends(get_session_context),
) -> SessionContext:
    if ctx.state is SessionState.ANONYMOUS:
        raise AuthenticationError("Authentication required")
    return ctx


async def require_verified(
    ctx: SessionContext = Depends(get_session_context),
) -> SessionContext:
    if ctx.state is SessionState.ANONYMOUS:
        raise AuthenticationError("Authentication required")
    if ctx.state is not SessionState.VERIFIED:
        raise VerificationRequiredError("Double verification required")
    return ctx
