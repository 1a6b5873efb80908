import json
import logging
import time
from datetime import datetime
from typing import AsyncIterator

from pydantic import BaseModel

from .broadcast import DebugBroadcaster
from .errors import UpstreamError
from .schemas import ChunkEvent, DoneEvent, ErrorEvent
from .stream import StreamClassifier, extract_result


def sse_event(event: BaseModel) -> str:
    return f"data: {event.model_dump_json()}\n\n"


async def stream_itinerary(
    fragments: AsyncIterator[str],
    broadcaster: DebugBroadcaster,
) -> AsyncIterator[str]:
    """Relay generator fragments as SSE frames while narrating them to debug viewers.

    Notifications derived from a fragment are broadcast before that fragment
    is yielded. If the generator fails before anything was yielded the
    ``UpstreamError`` propagates so the caller can still answer with an error
    status; later failures end the stream with an ``error`` frame instead of
    ``done``.
    """
    start_time = time.monotonic()
    classifier = StreamClassifier()
    relayed = False
    try:
        try:
            async for fragment in fragments:
                if not fragment:
                    continue
                for note in classifier.feed(fragment):
                    await broadcaster.publish(note)
                relayed = True
                yield sse_event(ChunkEvent(content=fragment))
        except Exception as e:
            # Any failure of the fragment source counts as an upstream failure.
            error = e if isinstance(e, UpstreamError) else UpstreamError(str(e))
            await broadcaster.log(f"Error: {str(error)}", "error")
            if not relayed:
                raise error
            yield sse_event(ErrorEvent(error=str(error)))
            return

        latency_ms = (time.monotonic() - start_time) * 1000
        await broadcaster.log(f"Gemini response complete ({latency_ms:.0f}ms)", "success")

        extracted = extract_result(classifier.accumulated_text)
        summary = extracted.summary()
        if summary is not None:
            await broadcaster.publish(summary)

        yield sse_event(DoneEvent(response=extracted.result))
        await broadcaster.log("Itinerary generated successfully", "success")

        log_data = {
            "ts": datetime.utcnow().isoformat(),
            "tool": "itinerary-api",
            "fn": "generate_itinerary",
            "latency_ms": f"{latency_ms:.2f}",
            "ok": True,
            "chars": len(classifier.accumulated_text),
        }
        logging.info(json.dumps(log_data))
    finally:
        # Caller disconnects close this generator; release the upstream stream too.
        aclose = getattr(fragments, "aclose", None)
        if aclose is not None:
            await aclose()
