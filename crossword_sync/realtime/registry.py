import json
import logging
from typing import Any, Dict, Hashable, Optional, Protocol, Set

logger = logging.getLogger(__name__)


class LiveConnection(Protocol):
    """Anything the registry can push a text frame to"""

    @property
    def is_open(self) -> bool: ...

    async def send_text(self, data: str) -> None: ...


class ConnectionRegistry:
    """
    Maps a session id to the set of live connections viewing that session.

    Mutations are plain synchronous dict/set operations, so within one event loop
    they never interleave. The registry lives for the lifetime of the server
    process and is not shared between processes.
    """

    def __init__(self):
        self._sessions: Dict[Hashable, Set[LiveConnection]] = {}

    def register(self, session_id, connection: LiveConnection) -> None:
        """Add a connection to the session, creating the entry if absent"""
        self._sessions.setdefault(session_id, set()).add(connection)
        logger.debug("Registered connection on session %s (%d live)", session_id, len(self._sessions[session_id]))

    def unregister(self, session_id, connection: LiveConnection) -> None:
        """Remove a connection; an emptied session entry is dropped"""
        connections = self._sessions.get(session_id)
        if connections is None:
            return
        connections.discard(connection)
        if not connections:
            del self._sessions[session_id]
        logger.debug("Unregistered connection from session %s", session_id)

    async def broadcast(self, session_id, message: Dict[str, Any], exclude: Optional[LiveConnection] = None) -> int:
        """
        Send one JSON message to every open connection on the session except `exclude`.
        Closed or failing connections are skipped, never retried. Returns how many sends succeeded.
        """
        connections = self._sessions.get(session_id)
        if not connections:
            return 0

        payload = json.dumps(message)
        delivered = 0
        # snapshot, a send may yield to a handler that unregisters
        for connection in list(connections):
            if connection is exclude or not connection.is_open:
                continue
            try:
                await connection.send_text(payload)
            except Exception as e:
                logger.debug("Skipped dead connection on session %s: %s", session_id, e)
                continue
            delivered += 1
        return delivered

    def connections(self, session_id) -> Set[LiveConnection]:
        return set(self._sessions.get(session_id, ()))

    def session_ids(self):
        return list(self._sessions)

    def clear(self) -> None:
        self._sessions.clear()

    def __contains__(self, session_id) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
