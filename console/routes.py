from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

ADMIN_HTML = (Path(__file__).parent / "admin.html").read_bytes()

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

router = APIRouter(tags=["console"])

# catch-all: must be included after every other router
@router.api_route("/{path:path}", methods=ALL_METHODS, include_in_schema=False)
async def admin_console(path: str):
    return HTMLResponse(ADMIN_HTML)
