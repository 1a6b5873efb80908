from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from ..broadcast import DebugBroadcaster
from ..deps import get_ws_broadcaster


router = APIRouter()


@router.websocket("/ws")
async def debug_console(
    websocket: WebSocket,
    broadcaster: DebugBroadcaster = Depends(get_ws_broadcaster),
) -> None:
    await websocket.accept()
    broadcaster.subscribe(websocket)
    await broadcaster.log("Debug console connected", "success")
    try:
        # Viewers only listen; incoming frames are read to notice the disconnect.
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        broadcaster.unsubscribe(websocket)
        await broadcaster.log("Debug console disconnected", "info")
