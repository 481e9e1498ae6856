from fastapi import APIRouter, WebSocket

from crossword_sync.core.config import settings


router = APIRouter()


# live grid sync
@router.websocket(settings.WS_PATH)
async def grid_socket(websocket: WebSocket):
    """Relay join/cell_update frames between participants of a session"""
    relay = websocket.app.state.relay
    await relay.serve(websocket)
