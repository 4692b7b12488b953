from __future__ import annotations

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ..dispatcher import ProtocolDispatcher
from ..logging_config import get_logger
from ..session import ConnectionSession

logger = get_logger(__name__)

router = APIRouter(prefix="", tags=["ws"])


@router.websocket("/ws")
@router.websocket("/")
async def websocket_endpoint(ws: WebSocket):
    dispatcher: ProtocolDispatcher = ws.app.state.dispatcher
    await ws.accept()
    session = ConnectionSession(ws)
    logger.info(f"Connection {session.connection_id} opened")

    # Frames from one socket are handled strictly in arrival order
    try:
        while True:
            message = await ws.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            data = message.get("text")
            if data is None:
                data = message.get("bytes")
            await dispatcher.handle_raw(session, data)
    except WebSocketDisconnect:
        logger.info(f"Connection {session.connection_id} closed")
    except Exception as e:
        logger.error(f"WebSocket error on connection {session.connection_id}: {e}", exc_info=True)
    finally:
        await dispatcher.disconnect(session)
