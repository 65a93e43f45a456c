"""
Integration test harness.

Builds the real routers, middleware and error handlers around fake
collaborators injected through the lifespan (same pattern as test_health).
No network connections are made: Google, the mail API and MongoDB are mocks;
sessions use the in-memory store.
"""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.responses import RedirectResponse
from starlette.middleware.sessions import SessionMiddleware

from config import AppSettings, OAuthProviderSettings
from errors import register_error_handlers
from infrastructure.oauth_clients import IdentityRejected, IdentityVerified
from infrastructure.session.memory_store import MemorySessionStore
from routes.auth_routes import router as auth_router
from routes.web_routes import router as web_router
from schemas.models.session import GoogleProfile
from services.login_service import LoginOrchestrator

# Ensure a MONGODB_URI is present so AppSettings can be instantiated
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017/")

ADA = GoogleProfile(id="1093", email="ada@example.com", display_name="Ada Lovelace")
CODES = ("482913", "135790", "246801")


class FakeIdentityProvider:
    """Stands in for GoogleIdentityProvider; the callback outcome is preset."""

    def __init__(self, result) -> None:
        self.result = result
        self.callback_url: Optional[str] = None

    async def authorize_redirect(self, request, callback_url):
        self.callback_url = callback_url
        return RedirectResponse("https://accounts.google.test/o/oauth2/auth", status_code=302)

    async def authenticate(self, request):
        return self.result


class FakeClock:
    def __init__(self) -> None:
        self.now = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now


def build_harness(
    *,
    identity=IdentityVerified(profile=ADA),
    oauth_configured: bool = True,
    email_ok: bool = True,
) -> SimpleNamespace:
    store = MemorySessionStore()
    email = AsyncMock()
    email.send_verification_email.return_value = email_ok
    users = AsyncMock()
    clock = FakeClock()
    codes = iter(CODES)
    provider = FakeIdentityProvider(identity) if oauth_configured else None

    orchestrator = LoginOrchestrator(
        store,
        email,
        users=users,
        code_ttl_seconds=600,
        clock=clock,
        code_generator=lambda: next(codes),
    )
    oauth_settings = OAuthProviderSettings(
        google_oauth_client_id="cid" if oauth_configured else "",
        google_oauth_client_secret="cs" if oauth_configured else "",
        google_client_id="",
        google_client_secret="",
    )
    settings = AppSettings(oauth=oauth_settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.settings = settings
        app.state.db = MagicMock()
        app.state.redis = None
        app.state.session_store = store
        app.state.identity_provider = provider
        app.state.login_orchestrator = orchestrator
        yield

    app = FastAPI(lifespan=lifespan)
    app.add_middleware(SessionMiddleware, secret_key="test-session-secret")
    register_error_handlers(app)
    app.include_router(auth_router)
    app.include_router(web_router)

    return SimpleNamespace(
        app=app,
        store=store,
        email=email,
        users=users,
        clock=clock,
        provider=provider,
    )


@pytest.fixture
def harness():
    return build_harness()


@pytest.fixture
def rejecting_harness():
    return build_harness(identity=IdentityRejected(reason="access_denied"))


@pytest.fixture
def failing_email_harness():
    return build_harness(email_ok=False)


@pytest.fixture
def unconfigured_harness():
    return build_harness(oauth_configured=False)
