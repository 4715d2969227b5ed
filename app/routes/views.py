"""
HTML routes: the index page and direct paste links (``/{id}``).
"""
import html
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends
from fastapi.responses import FileResponse, HTMLResponse

from app.dependencies import get_repository, request_now_ms
from app.exceptions import PasteNotFoundError, StoreFault
from app.ids import ID_LENGTH
from app.models import Paste
from app.repository import PasteRepository
from app.routes.pastes import purge_expired

router = APIRouter(include_in_schema=False)
logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


@router.get("/", response_class=FileResponse)
def index():
    """Serve the create/list page."""
    return FileResponse(TEMPLATES_DIR / "index.html", media_type="text/html")


@router.get("/{paste_id}", response_class=HTMLResponse)
def view_paste(
    paste_id: str,
    background_tasks: BackgroundTasks,
    repo: PasteRepository = Depends(get_repository),
    now_ms: Optional[int] = Depends(request_now_ms),
):
    """
    View a paste as HTML.

    Only 8-character segments without a dot are paste links; anything else
    (favicon.ico, robots.txt, ...) is a plain 404.
    """
    if len(paste_id) != ID_LENGTH or "." in paste_id:
        return HTMLResponse(_render_404_page(), status_code=404)

    try:
        paste = repo.get(paste_id, now_ms=now_ms)
    except PasteNotFoundError as e:
        if e.expired:
            background_tasks.add_task(purge_expired, repo, paste_id)
        return HTMLResponse(_render_404_page(), status_code=404)
    except StoreFault as e:
        logger.error(f"Error loading paste page {paste_id}: {e}")
        return HTMLResponse(_render_error_page(), status_code=500)

    return HTMLResponse(_render_paste_page(paste))


def _format_ms(value: int) -> str:
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc).strftime("%Y-%m-%d %H:%M UTC")


def _render_paste_page(paste: Paste) -> str:
    """Render a paste; every user-supplied field is escaped."""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{html.escape(paste.name)}</title>
    <style>
        body {{ font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif; background: #f5f5f5; padding: 2rem; }}
        .container {{ max-width: 800px; margin: 0 auto; background: white; padding: 2rem; border-radius: 8px; }}
        .paste-info {{ color: #555; margin: 1rem 0; }}
        .paste-content {{ font-family: "Courier New", monospace; background: #f8f9fa; padding: 1.5rem; white-space: pre-wrap; word-break: break-word; }}
    </style>
</head>
<body>
    <div class="container">
        <h1>{html.escape(paste.name)}</h1>
        <div class="paste-info">
            <p><strong>Language:</strong> {html.escape(paste.language.upper())}</p>
            <p><strong>Created:</strong> {_format_ms(paste.created_at)}</p>
            <p><strong>Expires:</strong> {_format_ms(paste.expires_at)}</p>
        </div>
        <div class="paste-content">{html.escape(paste.content)}</div>
        <p><a href="/">Create a new paste</a></p>
    </div>
</body>
</html>"""


def _render_404_page() -> str:
    """Render a 404 error page."""
    return """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>Not Found</title>
</head>
<body>
    <h1>404</h1>
    <p>This paste was not found or has expired. Pastes are deleted after 3 days.</p>
    <a href="/">Create a new paste</a>
</body>
</html>"""


def _render_error_page() -> str:
    """Render a 500 error page; store details stay in the log."""
    return """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>Error</title>
</head>
<body>
    <h1>Something went wrong</h1>
    <p>This paste could not be loaded right now. Please try again later.</p>
    <a href="/">Create a new paste</a>
</body>
</html>"""
