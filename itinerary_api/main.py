import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
import uvicorn

from itinerary_api.routers.itinerary import router as itinerary_router
from itinerary_api.routers.health import router as health_router
from itinerary_api.routers.debug import router as debug_router
from itinerary_api.routers.pages import router as pages_router
from .broadcast import DebugBroadcaster
from .config import CONFIG
from .errors import PlannerError, UpstreamError, ValidationError
from .llm import GeminiFragmentSource


# --- Logging Configuration ---
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler()  # Ensure logs go to stdout/stderr
    ]
)
# --------------------------

limiter = Limiter(key_func=get_remote_address, default_limits=[CONFIG.rate_limit])


@asynccontextmanager
async def lifespan(app: FastAPI):
    broadcaster = DebugBroadcaster()
    app.state.broadcaster = broadcaster
    # Tests and embedders may install their own generator before startup.
    if getattr(app.state, "fragment_source", None) is None:
        app.state.fragment_source = GeminiFragmentSource(
            api_key=CONFIG.gemini_api_key,
            model_name=CONFIG.gemini_model,
            temperature=CONFIG.llm_temperature,
            timeout_sec=CONFIG.llm_timeout_sec,
        )
    await broadcaster.log(f"Server started on port {CONFIG.port}", "success")
    try:
        yield
    finally:
        await broadcaster.close()
        app.state.broadcaster = None


async def _narrate_error(request: Request, message: str) -> None:
    broadcaster = getattr(request.app.state, "broadcaster", None)
    if broadcaster is not None:
        await broadcaster.log(f"Error: {message}", "error")


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Body errors are located as ("body", field, ...); JSON decode errors carry a byte offset instead.
    fields = set()
    for err in exc.errors():
        loc = tuple(err.get("loc", ()))
        if len(loc) > 1 and isinstance(loc[1], str):
            fields.add(loc[1])
    missing = sorted(fields)
    message = f"Invalid itinerary request: {', '.join(missing)}" if missing else "Invalid itinerary request"
    await _narrate_error(request, message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": message, "detail": jsonable_errors(exc)},
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    return [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": str(err.get("msg", ""))}
        for err in exc.errors()
    ]


async def planner_error_handler(request: Request, exc: PlannerError) -> JSONResponse:
    if isinstance(exc, ValidationError):
        status_code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, UpstreamError):
        status_code = status.HTTP_502_BAD_GATEWAY
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    await _narrate_error(request, str(exc))
    return JSONResponse(status_code=status_code, content={"error": str(exc)})


app = FastAPI(title="Itinerary Stream Planner", lifespan=lifespan)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(PlannerError, planner_error_handler)
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CONFIG.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(itinerary_router, prefix="/api")
app.include_router(health_router, prefix="/api")
app.include_router(debug_router)
app.include_router(pages_router)

if CONFIG.static_dir and Path(CONFIG.static_dir).is_dir():
    app.mount("/static", StaticFiles(directory=CONFIG.static_dir), name="static")


def run() -> None:
    uvicorn.run(app, host="0.0.0.0", port=CONFIG.port)


if __name__ == "__main__":
    run()
