import json
import logging
from typing import Optional

from fastapi import WebSocket
from fastapi.websockets import WebSocketState
from pydantic import ValidationError

from crossword_sync.realtime.registry import ConnectionRegistry
from crossword_sync.schemas import JoinSession, CellUpdate

logger = logging.getLogger(__name__)


class RelayConnection:
    """One browser socket and the session it has joined, if any"""

    def __init__(self, websocket: WebSocket):
        self.websocket = websocket
        self.session_id: Optional[str] = None
        self.user_id: Optional[str] = None

    @property
    def joined(self) -> bool:
        return self.session_id is not None

    @property
    def is_open(self) -> bool:
        return (self.websocket.client_state == WebSocketState.CONNECTED
                and self.websocket.application_state == WebSocketState.CONNECTED)

    async def send_text(self, data: str) -> None:
        await self.websocket.send_text(data)


class GridRelay:
    """
    Fan-out of live grid edits between the participants of a session.

    Each socket starts unjoined; a `join_session` frame registers it under a
    session id, after which its `cell_update` frames are rebroadcast to every
    other socket on that session. Nothing here touches the database.
    """

    def __init__(self, registry: ConnectionRegistry):
        self.registry = registry

    async def serve(self, websocket: WebSocket) -> None:
        """Run one socket until the peer goes away"""
        await websocket.accept()
        connection = RelayConnection(websocket)
        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break
                raw = message.get("text")
                if raw is None and message.get("bytes") is not None:
                    raw = message["bytes"].decode("utf-8", errors="replace")
                await self.handle_message(connection, raw)
        finally:
            await self.leave(connection)

    async def handle_message(self, connection: RelayConnection, raw: Optional[str]) -> None:
        """Dispatch one frame; bad frames are logged and dropped, the socket stays up"""
        try:
            data = json.loads(raw or "")
        except (ValueError, RecursionError) as e:
            logger.warning("Dropping malformed WebSocket frame: %s", e)
            return
        if not isinstance(data, dict):
            logger.warning("Dropping WebSocket frame that is not an object")
            return

        message_type = data.get("type")
        try:
            if message_type == "join_session":
                await self.join(connection, JoinSession.model_validate(data))
            elif message_type == "cell_update":
                if not connection.joined:
                    return
                await self.relay_cell_update(connection, CellUpdate.model_validate(data))
            else:
                logger.debug("Ignoring WebSocket frame of type %r", message_type)
        except ValidationError as e:
            logger.warning("Dropping invalid %s frame: %s", message_type, e.errors())

    async def join(self, connection: RelayConnection, message: JoinSession) -> None:
        if connection.session_id == message.session_id:
            return
        if connection.joined:
            await self.leave(connection)

        connection.session_id = message.session_id
        connection.user_id = message.user_id
        self.registry.register(connection.session_id, connection)
        logger.info("User %s joined live session %s", connection.user_id, connection.session_id)

        await self.registry.broadcast(
            connection.session_id,
            {"type": "user_joined", "userId": connection.user_id},
            exclude=connection,
        )

    async def relay_cell_update(self, connection: RelayConnection, message: CellUpdate) -> None:
        await self.registry.broadcast(
            connection.session_id,
            {
                "type": "cell_update",
                "row": message.row,
                "col": message.col,
                "value": message.value,
                "userId": connection.user_id,
            },
            exclude=connection,
        )

    async def leave(self, connection: RelayConnection) -> None:
        """Unregister a joined connection and tell the rest of the session"""
        if not connection.joined:
            return
        session_id, user_id = connection.session_id, connection.user_id
        connection.session_id = None
        connection.user_id = None

        self.registry.unregister(session_id, connection)
        logger.info("User %s left live session %s", user_id, session_id)
        await self.registry.broadcast(session_id, {"type": "user_left", "userId": user_id})

    async def publish_progress(self, session_id: str, grid, updated_by: str) -> int:
        """Push a freshly persisted grid to every live participant of the session"""
        return await self.registry.broadcast(
            session_id,
            {"type": "progress_update", "grid": grid, "updatedBy": updated_by},
        )
