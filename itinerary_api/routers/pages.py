from pathlib import Path

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import FileResponse

from ..config import CONFIG


router = APIRouter()


def _page(name: str) -> FileResponse:
    if not CONFIG.static_dir:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="STATIC_DIR is not configured",
        )
    path = Path(CONFIG.static_dir) / name
    if not path.is_file():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{name} not found")
    return FileResponse(path)


@router.get("/", include_in_schema=False)
async def index() -> FileResponse:
    return _page(CONFIG.index_page)


@router.get("/debug", include_in_schema=False)
async def debug_page() -> FileResponse:
    return _page(CONFIG.debug_page)
