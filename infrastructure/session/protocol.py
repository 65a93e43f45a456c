"""SessionStore protocol — services depend on this, not the concrete implementation."""

from typing import Optional, Protocol

from schemas.models.session import SessionData


class SessionStore(Protocol):
    async def load(self, session_id: str) -> Optional[SessionData]:
        """Return the session, or None when it does not exist.

        Raises SessionStoreUnavailableError when the backend cannot answer.
        """
        ...

    async def save(self, session_id: str, session: SessionData) -> None: ...

    async def delete(self, session_id: str) -> None: ...
