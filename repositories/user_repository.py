"""
Users collection access.

Every successful Google sign-in upserts the user keyed on google_id, so the
profile stays current and last_login_at reflects the latest login.
"""

from __future__ import annotations

from typing import Any

from pymongo import ASCENDING, ReturnDocument

from schemas.models.session import GoogleProfile
from schemas.models.user import UserDoc
from shared.datetime_utils import utcnow
from shared.logging import get_logger

log = get_logger(__name__)

# Refreshed on every login; everything else is written only when the user is created
_PROFILE_FIELDS = ("email", "display_name", "picture", "updated_at", "last_login_at")


class UserRepository:
    def __init__(self, collection: Any) -> None:
        self._col = collection

    async def ensure_indexes(self) -> None:
        await self._col.create_index([("google_id", ASCENDING)], unique=True)
        await self._col.create_index([("email", ASCENDING)])

    async def upsert_google_user(self, profile: GoogleProfile) -> UserDoc:
        now = utcnow()
        fields = UserDoc(
            email=profile.email,
            google_id=profile.id,
            display_name=profile.display_name,
            picture=profile.picture,
            created_at=now,
            updated_at=now,
            last_login_at=now,
        ).to_mongo()
        on_login = {k: fields.pop(k) for k in _PROFILE_FIELDS}

        doc = await self._col.find_one_and_update(
            {"google_id": profile.id},
            {"$set": on_login, "$setOnInsert": fields},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        log.info("user_login_recorded", user_id=str(doc.get("_id")), provider="google")
        return UserDoc.from_mongo(doc)
