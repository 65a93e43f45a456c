"""
Server-rendered pages for the login flow.

GET  /                     — welcome (verified) / redirect to code form / login link
GET  /login                — login page
GET  /double-check         — code entry form
POST /double-check         — submit the code
POST /double-check/resend  — email a fresh code
GET  /logout               — end the session
GET  /protected            — served only to verified sessions
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse, Response

from dependencies import bind_session, get_login_orchestrator, get_session_context
from errors import EmailDeliveryError
from routes.templating import LOGIN_ERRORS, templates
from schemas.models.session import SessionContext, SessionState
from services.login_service import ChallengeOutcome, LoginOrchestrator

router = APIRouter(tags=["pages"])

_FORM_ERRORS = {
    ChallengeOutcome.MISMATCH: "Invalid code. Please try again.",
    ChallengeOutcome.EXPIRED: "This code has expired. Request a new one below.",
    ChallengeOutcome.NO_CHALLENGE: "No code has been sent yet. Request one below.",
}


def _render_form(
    request: Request,
    ctx: SessionContext,
    error: Optional[str] = None,
    notice: Optional[str] = None,
    status_code: int = 200,
) -> Response:
    return templates.TemplateResponse(
        request,
        "pages/double_check.html",
        {"user": ctx.data.user, "error": error, "notice": notice},
        status_code=status_code,
    )


@router.get("/")
async def index(
    request: Request, ctx: SessionContext = Depends(get_session_context)
) -> Response:
    if ctx.state is SessionState.VERIFIED:
        return templates.TemplateResponse(request, "pages/home.html", {"user": ctx.data.user})
    if ctx.state is SessionState.AUTHENTICATED:
        return RedirectResponse("/double-check", status_code=302)
    return templates.TemplateResponse(request, "pages/login.html", {"error": None})


@router.get("/login")
async def login_page(request: Request, error: Optional[str] = None) -> Response:
    message = LOGIN_ERRORS.get(error, "Sign-in failed.") if error else None
    return templates.TemplateResponse(request, "pages/login.html", {"error": message})


@router.get("/double-check")
async def double_check_form(
    request: Request, ctx: SessionContext = Depends(get_session_context)
) -> Response:
    if ctx.state is SessionState.ANONYMOUS:
        return RedirectResponse("/login", status_code=302)
    if ctx.state is SessionState.VERIFIED:
        return RedirectResponse("/", status_code=302)
    return _render_form(request, ctx)


@router.post("/double-check")
async def double_check_submit(
    request: Request,
    code: str = Form(""),
    ctx: SessionContext = Depends(get_session_context),
    orchestrator: LoginOrchestrator = Depends(get_login_orchestrator),
) -> Response:
    if ctx.state is SessionState.ANONYMOUS:
        return RedirectResponse("/login", status_code=303)

    outcome = await orchestrator.submit_challenge(ctx, code)
    if outcome is ChallengeOutcome.VERIFIED:
        return RedirectResponse("/", status_code=303)
    return _render_form(request, ctx, error=_FORM_ERRORS[outcome], status_code=400)


@router.post("/double-check/resend")
async def double_check_resend(
    request: Request,
    ctx: SessionContext = Depends(get_session_context),
    orchestrator: LoginOrchestrator = Depends(get_login_orchestrator),
) -> Response:
    if ctx.state is SessionState.ANONYMOUS:
        return RedirectResponse("/login", status_code=303)
    if ctx.state is SessionState.VERIFIED:
        return RedirectResponse("/", status_code=303)

    try:
        await orchestrator.issue_challenge(ctx)
    except EmailDeliveryError:
        return templates.TemplateResponse(
            request, "pages/email_error.html", {"user": ctx.data.user}, status_code=502
        )
    return _render_form(request, ctx, notice="A new code has been sent to your email.")


@router.get("/logout")
async def logout(
    request: Request,
    ctx: SessionContext = Depends(get_session_context),
    orchestrator: LoginOrchestrator = Depends(get_login_orchestrator),
) -> Response:
    bind_session(request, await orchestrator.end_session(ctx))
    return RedirectResponse("/", status_code=302)


@router.get("/protected")
async def protected_page(
    request: Request, ctx: SessionContext = Depends(get_session_context)
) -> Response:
    if ctx.state is not SessionState.VERIFIED:
        return RedirectResponse("/login", status_code=302)
    return templates.TemplateResponse(request, "pages/protected.html", {"user": ctx.data.user})
