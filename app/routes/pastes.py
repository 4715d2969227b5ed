"""
Paste API routes.
Handles list, create, fetch and delete over JSON.

Errors are returned as responses rather than raised so the background tasks
queued for the request (retention sweep, lazy expiry) still run.
"""
import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends
from fastapi.responses import JSONResponse

from app.dependencies import get_repository, request_now_ms
from app.exceptions import PasteNotFoundError, StoreFault, ValidationError
from app.models import ErrorResponse, Paste, PasteCreate, PasteList
from app.repository import PasteRepository

router = APIRouter(prefix="/api/pastes", tags=["pastes"])
logger = logging.getLogger(__name__)


def _error(status_code: int, detail: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail})


@router.get("", response_model=PasteList)
def list_pastes(
    repo: PasteRepository = Depends(get_repository),
    now_ms: Optional[int] = Depends(request_now_ms),
):
    """
    List recent pastes, newest first.

    Returns:
        At most LIST_LIMIT live pastes
    """
    try:
        return PasteList(pastes=repo.list(now_ms=now_ms))
    except StoreFault as e:
        logger.error(f"Error listing pastes: {e}")
        return _error(500, "Failed to list pastes")


@router.post(
    "",
    response_model=Paste,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def create_paste(
    payload: PasteCreate,
    repo: PasteRepository = Depends(get_repository),
    now_ms: Optional[int] = Depends(request_now_ms),
):
    """
    Create a new paste.

    Args:
        payload: content, optional language, optional name

    Returns:
        The stored paste, including its id and expiry
    """
    try:
        return repo.create(
            content=payload.content,
            language=payload.language,
            name=payload.name,
            now_ms=now_ms,
        )
    except ValidationError as e:
        return _error(400, str(e))
    except StoreFault as e:
        logger.error(f"Error saving paste: {e}")
        return _error(500, "Failed to save paste")


@router.get(
    "/{paste_id}",
    response_model=Paste,
    responses={404: {"model": ErrorResponse}},
)
def fetch_paste(
    paste_id: str,
    background_tasks: BackgroundTasks,
    repo: PasteRepository = Depends(get_repository),
    now_ms: Optional[int] = Depends(request_now_ms),
):
    """
    Fetch a live paste.

    An expired record answers 404 and is queued for deletion.
    """
    try:
        return repo.get(paste_id, now_ms=now_ms)
    except PasteNotFoundError as e:
        if e.expired:
            background_tasks.add_task(purge_expired, repo, paste_id)
        return _error(404, "Paste not found or expired")
    except StoreFault as e:
        logger.error(f"Error fetching paste {paste_id}: {e}")
        return _error(500, "Failed to load paste")


@router.delete("/{paste_id}", responses={500: {"model": ErrorResponse}})
def delete_paste(
    paste_id: str,
    repo: PasteRepository = Depends(get_repository),
):
    """Delete a paste. Missing ids succeed too."""
    try:
        repo.delete(paste_id)
    except StoreFault as e:
        logger.error(f"Error deleting paste {paste_id}: {e}")
        return _error(500, "Failed to delete paste")
    return {"deleted": paste_id}


def purge_expired(repo: PasteRepository, paste_id: str) -> None:
    """Background deletion of a record found expired on read."""
    try:
        repo.delete(paste_id)
    except StoreFault as e:
        logger.warning(f"Lazy expiry of {paste_id} failed: {e}")
