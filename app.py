"""
FastAPI application factory.
create_app() is the single entry point for building the app.
"""

from __future__ import annotations

import secrets
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import redis.asyncio as aioredis
import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo.asynchronous.mongo_client import AsyncMongoClient
from starlette.middleware.sessions import SessionMiddleware

from config import AppSettings
from errors import register_error_handlers
from infrastructure.email.zeptomail import ZeptoMailProvider
from infrastructure.http_client import HttpClient
from infrastructure.oauth_clients import init_google_oauth
from infrastructure.session.memory_store import MemorySessionStore
from infrastructure.session.redis_store import RedisSessionStore
from repositories.user_repository import UserRepository
from routes.auth_routes import router as auth_router
from routes.health_routes import router as health_router
from routes.web_routes import router as web_router
from services.login_service import LoginOrchestrator
from shared.logging import get_logger, setup_logging

log = get_logger(__name__)


def _session_secret(settings: AppSettings) -> str:
    if settings.session.session_secret:
        return settings.session.session_secret
    if settings.is_production:
        raise RuntimeError("SESSION_SECRET must be set in production")
    # Cookies signed with a throwaway key stop validating on restart
    log.warning("session_secret_missing", fallback="ephemeral")
    return secrets.token_urlsafe(32)


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    """Create and return a fully configured FastAPI application."""
    if settings is None:
        settings = AppSettings()

    setup_logging(settings.logging, env=settings.env)

    # Initialise Sentry before anything else so it captures startup errors
    if settings.sentry.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry.sentry_dsn,
            send_default_pii=settings.sentry.sentry_send_pii,
            traces_sample_rate=settings.sentry.sentry_traces_sample_rate,
            profiles_sample_rate=settings.sentry.sentry_profile_sample_rate,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # ── Startup ──────────────────────────────────────────────────────────
        mongo_client: AsyncMongoClient = AsyncMongoClient(settings.db.mongodb_uri)
        app.state.mongo_client = mongo_client
        app.state.db = mongo_client[settings.db.db_name]
        app.state.settings = settings

        users = UserRepository(app.state.db["users"])
        await users.ensure_indexes()

        # Redis is optional; without it sessions are kept in process memory
        redis_client = None
        if settings.redis.redis_uri:
            redis_client = aioredis.from_url(
                settings.redis.redis_uri,
                encoding="utf-8",
                decode_responses=True,
            )
            session_store = RedisSessionStore(
                redis_client, ttl_seconds=settings.session.session_ttl_seconds
            )
        else:
            session_store = MemorySessionStore(
                ttl_seconds=settings.session.session_ttl_seconds
            )
        app.state.redis = redis_client
        app.state.session_store = session_store

        http_client = HttpClient(timeout=settings.email.email_timeout_seconds)
        email_provider = ZeptoMailProvider(
            settings.email,
            http_client,
            code_ttl_seconds=settings.session.verification_code_ttl_seconds,
        )

        app.state.identity_provider = init_google_oauth(settings.oauth)
        app.state.login_orchestrator = LoginOrchestrator(
            session_store,
            email_provider,
            users=users,
            code_ttl_seconds=settings.session.verification_code_ttl_seconds,
        )

        log.info(
            "app_started",
            env=settings.env,
            session_backend="redis" if redis_client is not None else "memory",
            oauth_configured=app.state.identity_provider is not None,
        )

        yield

        # ── Shutdown ─────────────────────────────────────────────────────────
        await http_client.aclose()
        await mongo_client.close()
        if redis_client is not None:
            await redis_client.aclose()

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url=settings.docs_url,
        redoc_url=None,
        lifespan=lifespan,
    )

    app.add_middleware(
        SessionMiddleware,
        secret_key=_session_secret(settings),
        session_cookie=settings.session.session_cookie_name,
        max_age=settings.session.session_ttl_seconds,
        same_site="lax",
        https_only=settings.session.cookie_secure,
    )
    # the storefront frontend calls the JSON API with credentials
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(web_router)

    return app
