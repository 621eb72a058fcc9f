# marketing_site/routers/pages.py
from datetime import datetime, timezone

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse

from marketing_site.schemas.contact import HealthResponse

router = APIRouter()


def _page(request: Request, name: str) -> FileResponse:
    return FileResponse(request.app.state.settings.STATIC_DIR / name, media_type="text/html")


@router.get("/", include_in_schema=False)
def index(request: Request):
    return _page(request, "index.html")


@router.get("/privacy.html", include_in_schema=False)
def privacy(request: Request):
    return _page(request, "privacy.html")


@router.get("/api/health", response_model=HealthResponse)
def health():
    timestamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return {"status": "ok", "timestamp": timestamp}
