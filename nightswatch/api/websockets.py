import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from nightswatch.dependencies import get_watch_controller, get_websocket_manager
from nightswatch.presentation.websocket_manager import WebSocketManager
from nightswatch.services.watch_controller import WatchController

router = APIRouter(prefix="/api/ws", tags=["websockets"])


def _status_message(controller: WatchController) -> dict:
    return {"type": "watch_status", "data": controller.get_status().model_dump(mode="json")}


@router.websocket("/live")
async def live_watch_events(
    websocket: WebSocket,
    ws_manager: WebSocketManager = Depends(get_websocket_manager),
    controller: WatchController = Depends(get_watch_controller),
):
    """
    Stream watcher notifications to the client.

    The current watch status is sent right after connecting so the client
    knows the monitored directory before the first change arrives. The client
    may send "status" for a fresh copy or "ping" as keep-alive.
    """
    await ws_manager.connect(websocket)

    try:
        await websocket.send_json(_status_message(controller))
        while True:
            message = (await websocket.receive_text()).strip().lower()
            if message == "ping":
                await websocket.send_text("pong")
            elif message == "status":
                await websocket.send_json(_status_message(controller))
            else:
                logging.debug(f"Ignoring websocket message: {message!r}")

    except WebSocketDisconnect:
        ws_manager.disconnect(websocket)
