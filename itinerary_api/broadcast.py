import asyncio
import logging
from typing import Any, Set

from fastapi.websockets import WebSocketState

from .schemas import DebugLog, LogLevel


logger = logging.getLogger(__name__)


def _is_ready(observer: Any) -> bool:
    return (
        getattr(observer, "client_state", None) == WebSocketState.CONNECTED
        and getattr(observer, "application_state", WebSocketState.CONNECTED) == WebSocketState.CONNECTED
    )


class DebugBroadcaster:
    """Pushes debug records to every connected debug viewer.

    One instance lives for the whole process (created in the app lifespan)
    and is shared by all requests. Observers are WebSocket-like objects
    exposing ``client_state`` and an async ``send_text``.
    """

    def __init__(self) -> None:
        self._observers: Set[Any] = set()

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    def subscribe(self, observer: Any) -> None:
        self._observers.add(observer)

    def unsubscribe(self, observer: Any) -> None:
        self._observers.discard(observer)

    async def broadcast(self, record: DebugLog) -> None:
        # Snapshot: subscribe/unsubscribe may run while sends are awaited.
        targets = [o for o in list(self._observers) if _is_ready(o)]
        if not targets:
            return
        payload = record.model_dump_json()
        results = await asyncio.gather(
            *(o.send_text(payload) for o in targets), return_exceptions=True
        )
        for observer, result in zip(targets, results):
            if isinstance(result, Exception):
                logger.warning("Debug observer %r dropped a record: %s", observer, result)

    async def publish(self, record: DebugLog) -> None:
        logger.info("[%s] %s", record.timestamp, record.message)
        await self.broadcast(record)

    async def log(self, message: str, level: LogLevel = "info") -> DebugLog:
        record = DebugLog(level=level, message=message)
        await self.publish(record)
        return record

    async def close(self) -> None:
        observers = list(self._observers)
        self._observers.clear()
        for observer in observers:
            if not _is_ready(observer):
                continue
            try:
                await observer.close()
            except Exception as e:
                logger.warning("Failed to close debug observer %r: %s", observer, e)
