"""
Transient paste service - main FastAPI application.
"""
import logging
from typing import Callable, Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.database import KeyValueStore, create_store
from app.dependencies import schedule_sweep
from app.repository import PasteRepository, current_time_ms
from app.routes import health, pastes, views
from app.sweeper import RetentionSweeper

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(
    store: Optional[KeyValueStore] = None,
    clock: Callable[[], int] = current_time_ms,
    test_mode: bool = settings.TEST_MODE,
    sweep_on_request: bool = settings.SWEEP_ON_REQUEST,
) -> FastAPI:
    """
    Build the application around a store.

    Every routed request queues a retention sweep as a background task; it
    runs after the response is sent and its failures are only logged.
    """
    app = FastAPI(
        title="Pastebin",
        description="Share text snippets that are deleted after 3 days",
        version="1.0.0",
        dependencies=[Depends(schedule_sweep)],
    )

    # Add CORS middleware (optional, for cross-origin requests)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if store is None:
        store = create_store()
    app.state.store = store
    app.state.repository = PasteRepository(store, clock=clock)
    app.state.sweeper = RetentionSweeper(store, clock=clock)
    app.state.test_mode = test_mode
    app.state.sweep_on_request = sweep_on_request

    # API routers first: views owns the catch-all /{paste_id}
    app.include_router(health.router)
    app.include_router(pastes.router)
    app.include_router(views.router)

    if store.using_fallback:
        logger.warning("STORE: Using IN-MEMORY storage (Redis not available)")
        logger.warning("   Data will NOT persist across server restarts!")
    else:
        logger.info("STORE: Connected to Redis")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
