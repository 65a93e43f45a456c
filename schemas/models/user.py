"""
User document model.

Maps to the `users` MongoDB collection. Users are created on their first
Google sign-in and refreshed on every later one.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from schemas.models.base import MongoBaseModel


class UserDoc(MongoBaseModel):
    """
    Document model for the `users` collection.

    google_id is the provider's stable subject id and carries a unique index.
    """

    email: str
    google_id: str
    display_name: Optional[str] = None
    picture: Optional[str] = None
    provider: str = "google"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None
