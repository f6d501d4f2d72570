import asyncio
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Environment is loaded by Pydantic Settings (see campushub.core.settings).
from campushub.api import register_routes
from campushub.core.dependencies import get_reminder_sweeper, get_typing_tracker
from campushub.core.exceptions import register_exception_handlers
from campushub.core.logging import setup_logging
from campushub.core.settings import settings

# Initialize logging early so all modules inherit the handlers/level
setup_logging(settings.log_level or settings.log_level_fallback)

app = FastAPI(title=settings.app_name)
register_exception_handlers(app)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_routes(app)

logger = logging.getLogger(__name__)
logger.info("%s initialized", settings.app_name)

_background_tasks: set[asyncio.Task[None]] = set()


@app.on_event("startup")
async def _start_reminder_sweep() -> None:
    if not settings.enable_reminder_sweep:
        logger.info("Reminder sweep disabled")
        return
    task = asyncio.create_task(get_reminder_sweeper().run(), name="reminder-sweep")
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)


@app.on_event("shutdown")
async def _stop_background_work() -> None:
    for task in list(_background_tasks):
        task.cancel()
    if _background_tasks:
        await asyncio.gather(*_background_tasks, return_exceptions=True)
    get_typing_tracker().shutdown()
    logger.info("%s stopped", settings.app_name)
