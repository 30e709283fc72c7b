"""In-memory store holding exactly one Session per correspondent."""

import logging
from dataclasses import replace

from src.schemas.session_schema import Session

logger = logging.getLogger(__name__)


class SessionStore:
    """
    Owns every correspondent's Session for the process lifetime.

    ``get`` hands out a copy so a caller can build the next state without
    touching the stored one; ``put`` commits it. Last write wins per
    correspondent. There is no eviction and no expiry.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}

    def get(self, correspondent_id: str) -> Session:
        """Return the correspondent's session, creating a default one if absent."""
        session = self._sessions.get(correspondent_id)
        if session is None:
            session = Session()
            self._sessions[correspondent_id] = session
            logger.debug("Session created for %s", correspondent_id)
        return replace(session)

    def put(self, correspondent_id: str, session: Session) -> None:
        self._sessions[correspondent_id] = replace(session)

    def __contains__(self, correspondent_id: object) -> bool:
        return correspondent_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
