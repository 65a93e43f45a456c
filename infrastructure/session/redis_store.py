"""Redis-backed session store.

Stores SessionData as JSON (not pickle) so entries are debuggable and safe to
deserialise across Python versions. Every save refreshes the TTL, giving a
sliding expiry.

A Redis outage is not a missing session: load raises
SessionStoreUnavailableError so callers keep the browser's session id.
"""

from typing import Optional

import redis.asyncio as aioredis
from pydantic import ValidationError
from redis.exceptions import RedisError

from errors import SessionStoreUnavailableError
from schemas.models.session import SessionData
from shared.logging import get_logger

log = get_logger(__name__)


class RedisSessionStore:
    def __init__(self, redis_client: aioredis.Redis, ttl_seconds: int = 86400) -> None:
        self._redis = redis_client
        self.ttl_seconds = ttl_seconds

    def _key(self, session_id: str) -> str:
        return f"session:{session_id}"

    async def load(self, session_id: str) -> Optional[SessionData]:
        try:
            raw = await self._redis.get(self._key(session_id))
        except (RedisError, OSError) as e:
            log.error("session_load_error", error=str(e), error_type=type(e).__name__)
            raise SessionStoreUnavailableError("Session store unavailable") from e
        if raw is None:
            return None
        try:
            return SessionData.model_validate_json(raw)
        except ValidationError as e:
            # An unreadable record is treated as no session: the user logs in again
            log.warning("session_payload_invalid", error_type=type(e).__name__)
            return None

    async def save(self, session_id: str, session: SessionData) -> None:
        try:
            await self._redis.setex(
                self._key(session_id), self.ttl_seconds, session.model_dump_json()
            )
        except Exception as e:
            log.error("session_save_error", error=str(e), error_type=type(e).__name__)
            raise

    async def delete(self, session_id: str) -> None:
        try:
            await self._redis.delete(self._key(session_id))
        except Exception as e:
            log.error("session_delete_error", error=str(e), error_type=type(e).__name__)
            raise
