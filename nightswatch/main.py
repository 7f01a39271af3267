import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from .api import watch, websockets
from .dependencies import (
    get_event_bus,
    get_presentation_event_handlers,
    get_settings,
    get_watch_controller,
    get_websocket_manager,
)
from .logging_config import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    settings = get_settings()
    setup_logging(settings)

    logging.info("Nightswatch starting up...")
    logging.info(f"Initial directory: {settings.initial_directory or '<none>'}")
    logging.info(f"Poll interval: {settings.poll_interval_ms}ms")

    websocket_manager = get_websocket_manager()
    websocket_manager.start_sender_task()
    await get_presentation_event_handlers().register(get_event_bus())

    controller = get_watch_controller()
    await controller.start()
    logging.info("Watch loops started")

    yield

    logging.info("Nightswatch shutting down...")
    await controller.dispose()
    await websocket_manager.stop_sender_task()
    logging.info("Watch loops stopped")


app = FastAPI(
    title="Nightswatch",
    description="Polling drive and directory watcher",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(watch.router)
app.include_router(websockets.router)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "message": "Nightswatch is running"}


@app.get("/health")
async def health():
    controller = get_watch_controller()
    return {
        "status": "healthy",
        "service": "nightswatch",
        "drive_watcher_running": controller.is_drive_watcher_running,
        "directory_watcher_running": controller.is_directory_watcher_running,
    }


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "nightswatch.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
