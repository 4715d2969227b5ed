"""
FastAPI dependencies shared by the route modules.
"""
import logging
from typing import Optional

from fastapi import BackgroundTasks, Depends, Header, Request

from app.repository import PasteRepository
from app.sweeper import RetentionSweeper

logger = logging.getLogger(__name__)


def get_repository(request: Request) -> PasteRepository:
    return request.app.state.repository


def get_sweeper(request: Request) -> RetentionSweeper:
    return request.app.state.sweeper


def request_now_ms(
    request: Request,
    x_test_now_ms: Optional[str] = Header(None),
) -> Optional[int]:
    """
    Clock override for deterministic testing.

    Returns the ``X-Test-Now-Ms`` header value when test mode is on,
    otherwise None so the repository uses its own clock.
    """
    if request.app.state.test_mode and x_test_now_ms:
        try:
            return int(x_test_now_ms)
        except (ValueError, TypeError) as e:
            logger.warning(f"Invalid x-test-now-ms header: {e}")
    return None


def schedule_sweep(
    request: Request,
    background_tasks: BackgroundTasks,
    now_ms: Optional[int] = Depends(request_now_ms),
) -> None:
    """Queue a retention sweep to run after the response is sent."""
    if request.app.state.sweep_on_request:
        background_tasks.add_task(get_sweeper(request).run_in_background, now_ms)
