"""Google identity provider via Authlib's Starlette integration.

The callback is resolved into an explicit result instead of a callback chain:
``authenticate()`` returns either IdentityVerified(profile) or
IdentityRejected(reason). Authlib keeps its CSRF state in request.session,
so SessionMiddleware must be installed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import httpx
from authlib.integrations.starlette_client import OAuth, OAuthError
from starlette.requests import Request
from starlette.responses import Response

from config import OAuthProviderSettings
from schemas.models.session import GoogleProfile
from shared.logging import get_logger

log = get_logger(__name__)

GOOGLE_DISCOVERY_URL = "https://accounts.google.com/.well-known/openid-configuration"


# ── Result type ───────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class IdentityVerified:
    profile: GoogleProfile


@dataclass(frozen=True)
class IdentityRejected:
    reason: str


IdentityResult = Union[IdentityVerified, IdentityRejected]


# ── User-info extraction ──────────────────────────────────────────────────────


def extract_profile_from_google(userinfo: Dict[str, Any]) -> Optional[GoogleProfile]:
    """Map an OpenID userinfo payload onto a GoogleProfile.

    Returns None when the payload lacks a subject id or an email address,
    since the double-check code cannot be delivered without one.
    """
    subject = str(userinfo.get("sub") or "").strip()
    email = (userinfo.get("email") or "").lower().strip()
    if not subject or not email:
        return None
    name = userinfo.get("name") or " ".join(
        part for part in (userinfo.get("given_name"), userinfo.get("family_name")) if part
    )
    return GoogleProfile(
        id=subject,
        email=email,
        display_name=name or email.split("@")[0],
        picture=userinfo.get("picture") or None,
    )


# ── Provider ──────────────────────────────────────────────────────────────────


class GoogleIdentityProvider:
    """Wraps a registered Authlib client for the two ends of the OAuth flow."""

    def __init__(self, client: Any, redirect_uri: str = "") -> None:
        self._client = client
        self._redirect_uri = redirect_uri

    async def authorize_redirect(self, request: Request, callback_url: str) -> Response:
        """Redirect the browser to Google's consent screen.

        A configured GOOGLE_OAUTH_REDIRECT_URI wins over *callback_url*, which
        callers build from the incoming request.
        """
        redirect_uri = self._redirect_uri or callback_url
        return await self._client.authorize_redirect(request, redirect_uri)

    async def authenticate(self, request: Request) -> IdentityResult:
        """Exchange the callback's authorization code for a verified profile."""
        try:
            token = await self._client.authorize_access_token(request)
            userinfo = token.get("userinfo")
            if userinfo is None:
                userinfo = await self._client.userinfo(token=token)
        except OAuthError as e:
            log.warning("oauth_callback_rejected", provider="google", error=e.error)
            return IdentityRejected(reason=e.error or "oauth_error")
        except httpx.HTTPError as e:
            log.error(
                "oauth_provider_unreachable",
                provider="google",
                error=str(e),
                error_type=type(e).__name__,
            )
            return IdentityRejected(reason="provider_unreachable")

        profile = extract_profile_from_google(dict(userinfo or {}))
        if profile is None:
            log.warning("oauth_profile_incomplete", provider="google")
            return IdentityRejected(reason="missing_email")

        log.info("oauth_identity_verified", provider="google", user_id=profile.id)
        return IdentityVerified(profile=profile)


def init_google_oauth(settings: OAuthProviderSettings) -> Optional[GoogleIdentityProvider]:
    """Register the Google client with Authlib.

    Returns None when client id/secret are not configured; routes then
    report OAuth as unavailable instead of failing at startup.
    """
    if not settings.google_configured:
        log.warning("oauth_no_providers_configured")
        return None

    oauth = OAuth()
    client = oauth.register(
        name="google",
        client_id=settings.google_oauth_client_id,
        client_secret=settings.google_oauth_client_secret,
        server_metadata_url=GOOGLE_DISCOVERY_URL,
        client_kwargs={
            "scope": "openid email profile",
            "prompt": "select_account",
        },
    )
    log.info("oauth_provider_initialized", provider="google")
    return GoogleIdentityProvider(client, redirect_uri=settings.google_oauth_redirect_uri)
