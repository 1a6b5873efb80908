from typing import Optional

from fastapi import Header, HTTPException, Request, WebSocket, status

from .broadcast import DebugBroadcaster
from .config import CONFIG
from .llm import FragmentSource


def get_api_key(x_api_key: Optional[str] = Header(default=None)) -> Optional[str]:
    expected_api_key = CONFIG.api_key
    if expected_api_key is None:
        return None
    if x_api_key != expected_api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key",
        )
    return x_api_key


def get_broadcaster(request: Request) -> DebugBroadcaster:
    broadcaster = getattr(request.app.state, "broadcaster", None)
    if broadcaster is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Debug broadcaster not initialized",
        )
    return broadcaster


def get_ws_broadcaster(websocket: WebSocket) -> DebugBroadcaster:
    # Raising HTTPException is not possible once the socket is upgraded.
    return websocket.app.state.broadcaster


def get_fragment_source(request: Request) -> FragmentSource:
    source = getattr(request.app.state, "fragment_source", None)
    if source is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Text generator not initialized",
        )
    return source
