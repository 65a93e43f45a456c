"""
Response DTOs for authentication endpoints.

SessionUserResponse — user profile embedded in other responses
AuthConfigResponse  — GET /auth/config
VerifyCodeResponse  — POST /auth/verify-code  (200)
ResendCodeResponse  — POST /auth/resend-code  (200)
CurrentUserResponse — GET /auth/user  (200)
LogoutResponse      — POST /auth/logout  (200)
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

from schemas.models.session import GoogleProfile


class SessionUserResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    email: str
    display_name: str
    picture: Optional[str] = None

    @classmethod
    def from_profile(cls, profile: GoogleProfile) -> "SessionUserResponse":
        return cls(
            id=profile.id,
            email=profile.email,
            display_name=profile.display_name,
            picture=profile.picture,
        )


class AuthConfigResponse(BaseModel):
    """Response body for GET /auth/config."""

    model_config = ConfigDict(populate_by_name=True)

    oauth_configured: bool
    message: str


class VerifyCodeResponse(BaseModel):
    """Response body for POST /auth/verify-code (200)."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str
    user: SessionUserResponse


class ResendCodeResponse(BaseModel):
    """Response body for POST /auth/resend-code (200)."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str


class CurrentUserResponse(BaseModel):
    """Response body for GET /auth/user (200)."""

    model_config = ConfigDict(populate_by_name=True)

    user: SessionUserResponse
    double_checked: bool


class LogoutResponse(BaseModel):
    """Response body for POST /auth/logout (200)."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str
