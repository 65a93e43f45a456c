"""In-process session store for deployments without Redis.

Sessions do not survive a restart and are not shared between workers, so this
only suits single-process setups and tests.
"""

import time
from typing import Callable, Dict, Optional, Tuple

from schemas.models.session import SessionData


class MemorySessionStore:
    def __init__(
        self,
        ttl_seconds: int = 86400,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, Tuple[float, str]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    async def load(self, session_id: str) -> Optional[SessionData]:
        entry = self._entries.get(session_id)
        if entry is None:
            return None
        expires_at, raw = entry
        if expires_at <= self._clock():
            del self._entries[session_id]
            return None
        return SessionData.model_validate_json(raw)

    async def save(self, session_id: str, session: SessionData) -> None:
        self._purge_expired()
        self._entries[session_id] = (
            self._clock() + self.ttl_seconds,
            session.model_dump_json(),
        )

    async def delete(self, session_id: str) -> None:
        self._entries.pop(session_id, None)

    def _purge_expired(self) -> None:
        now = self._clock()
        for sid in [sid for sid, (exp, _) in self._entries.items() if exp <= now]:
            del self._entries[sid]
