from typing import AsyncIterator

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse, StreamingResponse

from ..broadcast import DebugBroadcaster
from ..deps import get_api_key, get_broadcaster, get_fragment_source
from ..errors import UpstreamError
from ..geo import filter_activities
from ..llm import FragmentSource
from ..pipeline import stream_itinerary
from ..prompts import build_prompt, format_number
from ..schemas import ItineraryRequest


router = APIRouter(dependencies=[Depends(get_api_key)])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


async def _prepend(first: str, rest: AsyncIterator[str]) -> AsyncIterator[str]:
    try:
        yield first
        async for frame in rest:
            yield frame
    finally:
        await rest.aclose()


@router.post("/generate-itinerary")
async def generate_itinerary(
    req: ItineraryRequest,
    broadcaster: DebugBroadcaster = Depends(get_broadcaster),
    source: FragmentSource = Depends(get_fragment_source),
):
    prefs = req.preferences
    await broadcaster.log(f"Received {req.mode} itinerary request for {req.hotel.name}")
    await broadcaster.log(
        f"Preferences: Budget=${format_number(prefs.budget)}, Distance={format_number(prefs.maxDistance)}mi, Duration={prefs.duration}"
    )

    await broadcaster.log(f"Filtering {len(req.activities)} activities...")
    filtered = filter_activities(req.hotel, req.activities, prefs)
    await broadcaster.log(f"Found {len(filtered)} activities within criteria", "success")

    prompt = build_prompt(req.mode, req.hotel, filtered, prefs)
    await broadcaster.log("Calling Gemini...")

    # Pull the first frame here so a generator that fails up front still
    # gets a plain error status instead of an empty event stream.
    events = stream_itinerary(source(prompt), broadcaster)
    try:
        first = await events.__anext__()
    except UpstreamError as e:
        return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content={"error": str(e)})

    return StreamingResponse(
        _prepend(first, events),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
