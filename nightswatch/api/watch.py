import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from nightswatch.dependencies import get_watch_controller
from nightswatch.models import WatchStatus
from nightswatch.services.watch_controller import WatchController

router = APIRouter(prefix="/api/watch", tags=["watch"])


class ChangeDirectoryRequest(BaseModel):
    path: str = Field(..., description="Directory to monitor")


class WatchConfigUpdate(BaseModel):
    poll_interval_ms: Optional[int] = Field(None, ge=1, description="Poll interval in milliseconds")
    drive_watcher_enabled: Optional[bool] = None
    directory_watcher_enabled: Optional[bool] = None


@router.get("/status", response_model=WatchStatus)
async def get_watch_status(
    controller: WatchController = Depends(get_watch_controller),
) -> WatchStatus:
    return controller.get_status()


@router.post("/directory", response_model=WatchStatus)
async def change_directory(
    request: ChangeDirectoryRequest,
    controller: WatchController = Depends(get_watch_controller),
) -> WatchStatus:
    """
    Switch the monitored directory.

    Invalid paths are ignored rather than rejected; compare
    ``monitored_directory`` in the response to see whether the switch happened.
    """
    await controller.change_directory(request.path)
    logging.info(f"API: change directory requested: {request.path!r}")
    return controller.get_status()


@router.post("/directory/up", response_model=WatchStatus)
async def change_directory_up(
    controller: WatchController = Depends(get_watch_controller),
) -> WatchStatus:
    await controller.change_directory_up()
    return controller.get_status()


@router.post("/start", response_model=WatchStatus)
async def start_watchers(
    controller: WatchController = Depends(get_watch_controller),
) -> WatchStatus:
    await controller.start()
    return controller.get_status()


@router.post("/stop", response_model=WatchStatus)
async def stop_watchers(
    controller: WatchController = Depends(get_watch_controller),
) -> WatchStatus:
    await controller.stop()
    return controller.get_status()


@router.post("/drives/start", response_model=WatchStatus)
async def start_drive_watcher(
    controller: WatchController = Depends(get_watch_controller),
) -> WatchStatus:
    await controller.start_drive_watcher()
    return controller.get_status()


@router.post("/drives/stop", response_model=WatchStatus)
async def stop_drive_watcher(
    controller: WatchController = Depends(get_watch_controller),
) -> WatchStatus:
    await controller.stop_drive_watcher()
    return controller.get_status()


@router.post("/directory-watcher/start", response_model=WatchStatus)
async def start_directory_watcher(
    controller: WatchController = Depends(get_watch_controller),
) -> WatchStatus:
    await controller.start_directory_watcher()
    return controller.get_status()


@router.post("/directory-watcher/stop", response_model=WatchStatus)
async def stop_directory_watcher(
    controller: WatchController = Depends(get_watch_controller),
) -> WatchStatus:
    await controller.stop_directory_watcher()
    return controller.get_status()


@router.put("/config", response_model=WatchStatus)
async def update_watch_config(
    update: WatchConfigUpdate,
    controller: WatchController = Depends(get_watch_controller),
) -> WatchStatus:
    try:
        if update.poll_interval_ms is not None:
            await controller.set_poll_interval(update.poll_interval_ms)
        if update.drive_watcher_enabled is not None:
            await controller.enable_drive_watcher(update.drive_watcher_enabled)
        if update.directory_watcher_enabled is not None:
            await controller.enable_directory_watcher(update.directory_watcher_enabled)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

    return controller.get_status()
