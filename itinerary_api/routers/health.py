from fastapi import APIRouter, Request

from ..schemas import HealthResponse


router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    source = getattr(request.app.state, "fragment_source", None)
    return HealthResponse(status="ok", gemini=bool(getattr(source, "configured", False)))
