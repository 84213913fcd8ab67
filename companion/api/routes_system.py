import asyncio
import logging
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from companion.core.logger_stream import stream_handler

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/health")
async def health_check():
    return {"status": "ok"}


@router.get("/logs/recent")
async def recent_logs(limit: int = 100):
    return {"logs": stream_handler.recent(max(0, limit))}


@router.websocket("/ws/logs")
async def websocket_logs(websocket: WebSocket):
    await websocket.accept()

    # Send the buffered history first, then stream
    for log in list(stream_handler.logs):
        await websocket.send_text(log)

    queue = asyncio.Queue()
    stream_handler.add_listener(queue)
    try:
        while True:
            log = await queue.get()
            await websocket.send_text(log)
    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.warning(f"[WebSocket] Error in log stream: {e}")
    finally:
        stream_handler.remove_listener(queue)
