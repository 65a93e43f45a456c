"""
Authentication endpoints.

Browser redirects:
    GET  /auth/google           — start Google OAuth
    GET  /auth/google/callback  — finish OAuth, email the double-check code

JSON API used by the storefront frontend:
    GET  /auth/config       — is Google OAuth configured?
    POST /auth/verify-code  — submit the emailed code
    POST /auth/resend-code  — email a fresh code
    GET  /auth/user         — current user and double-check status
    GET  /auth/protected    — example resource gated on a verified session
    POST /auth/logout       — end the session
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse, Response

from dependencies import (
    bind_session,
    get_identity_provider,
    get_login_orchestrator,
    get_session_context,
    get_settings,
    require_authenticated,
    require_verified,
)
from config import AppSettings
from errors import EmailDeliveryError, ValidationError
from infrastructure.oauth_clients import GoogleIdentityProvider, IdentityRejected
from routes.templating import templates
from schemas.dto.requests.auth import VerifyCodeRequest
from schemas.dto.responses.auth import (
    AuthConfigResponse,
    CurrentUserResponse,
    LogoutResponse,
    ResendCodeResponse,
    SessionUserResponse,
    VerifyCodeResponse,
)
from schemas.models.session import SessionContext, SessionState
from services.login_service import ChallengeOutcome, LoginOrchestrator
from shared.logging import get_logger

log = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

_CHALLENGE_ERRORS = {
    ChallengeOutcome.MISMATCH: "Invalid verification code",
    ChallengeOutcome.EXPIRED: "Verification code has expired",
    ChallengeOutcome.NO_CHALLENGE: "No verification code has been issued",
}


# ── OAuth redirects ───────────────────────────────────────────────────────────


@router.get("/google")
async def google_login(
    request: Request,
    provider: Optional[GoogleIdentityProvider] = Depends(get_identity_provider),
) -> Response:
    if provider is None:
        return RedirectResponse("/login?error=oauth_not_configured", status_code=302)
    callback_url = str(request.url_for("google_callback"))
    return await provider.authorize_redirect(request, callback_url)


@router.get("/google/callback", name="google_callback")
async def google_callback(
    request: Request,
    provider: Optional[GoogleIdentityProvider] = Depends(get_identity_provider),
    orchestrator: LoginOrchestrator = Depends(get_login_orchestrator),
    ctx: SessionContext = Depends(get_session_context),
) -> Response:
    if provider is None:
        return RedirectResponse("/login?error=oauth_not_configured", status_code=302)

    result = await provider.authenticate(request)
    if isinstance(result, IdentityRejected):
        return RedirectResponse("/login?error=oauth_failed", status_code=302)

    session = await orchestrator.begin_session(result.profile, previous=ctx)
    bind_session(request, session)

    try:
        await orchestrator.issue_challenge(session)
    except EmailDeliveryError:
        return templates.TemplateResponse(
            request,
            "pages/email_error.html",
            {"user": session.data.user},
            status_code=502,
        )
    return RedirectResponse("/double-check", status_code=302)


# ── JSON API ──────────────────────────────────────────────────────────────────


@router.get("/config", response_model=AuthConfigResponse)
async def auth_config(settings: AppSettings = Depends(get_settings)) -> AuthConfigResponse:
    configured = settings.oauth.google_configured
    return AuthConfigResponse(
        oauth_configured=configured,
        message=(
            "Google OAuth is properly configured"
            if configured
            else "Google OAuth credentials missing. Set GOOGLE_OAUTH_CLIENT_ID "
            "and GOOGLE_OAUTH_CLIENT_SECRET"
        ),
    )


@router.post("/verify-code", response_model=VerifyCodeResponse)
async def verify_code(
    body: VerifyCodeRequest,
    ctx: SessionContext = Depends(require_authenticated),
    orchestrator: LoginOrchestrator = Depends(get_login_orchestrator),
) -> VerifyCodeResponse:
    if not body.code:
        raise ValidationError("Verification code is required", field="code")

    outcome = await orchestrator.submit_challenge(ctx, body.code)
    if outcome is not ChallengeOutcome.VERIFIED:
        raise ValidationError(_CHALLENGE_ERRORS[outcome], field="code")

    return VerifyCodeResponse(
        success=True,
        message="Verification successful",
        user=SessionUserResponse.from_profile(ctx.data.user),
    )


@router.post("/resend-code", response_model=ResendCodeResponse)
async def resend_code(
    ctx: SessionContext = Depends(require_authenticated),
    orchestrator: LoginOrchestrator = Depends(get_login_orchestrator),
) -> ResendCodeResponse:
    if ctx.state is SessionState.VERIFIED:
        return ResendCodeResponse(success=True, message="Already verified")
    await orchestrator.issue_challenge(ctx)
    return ResendCodeResponse(success=True, message="Verification code sent")


@router.get("/user", response_model=CurrentUserResponse)
async def current_user(
    ctx: SessionContext = Depends(require_authenticated),
) -> CurrentUserResponse:
    return CurrentUserResponse(
        user=SessionUserResponse.from_profile(ctx.data.user),
        double_checked=ctx.data.double_checked,
    )


@router.get("/protected")
async def protected_resource(ctx: SessionContext = Depends(require_verified)) -> dict:
    return {"message": f"Welcome, {ctx.data.user.display_name}"}


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    request: Request,
    ctx: SessionContext = Depends(get_session_context),
    orchestrator: LoginOrchestrator = Depends(get_login_orchestrator),
) -> LogoutResponse:
    bind_session(request, await orchestrator.end_session(ctx))
    return LogoutResponse(success=True, message="Logged out successfully")
