"""
Request DTOs for authentication endpoints.

VerifyCodeRequest — POST /auth/verify-code
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class VerifyCodeRequest(BaseModel):
    """Request body for POST /auth/verify-code.

    ``code`` is the 6-digit double-check code emailed after Google sign-in.
    Left optional so a missing code yields the API's own 400 message.
    """

    model_config = ConfigDict(populate_by_name=True)

    code: Optional[str] = None
