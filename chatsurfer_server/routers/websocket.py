"""
WebSocket endpoints: timed message push and frame echo
"""
import asyncio

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
import structlog

from chatsurfer_server.routers.dependencies import record_api_key
from chatsurfer_server.utils.metrics import websocket_frames, websocket_sessions

logger = structlog.get_logger()

router = APIRouter(tags=["websocket"])

# A write to a peer that has gone away surfaces as one of these,
# depending on the server implementation underneath Starlette.
PEER_GONE = (WebSocketDisconnect, OSError, RuntimeError)


@router.websocket("/ws/echo")
async def echo(websocket: WebSocket):
    """Send every received frame straight back to the peer"""
    record_api_key(websocket.headers.get("api-key"))
    await websocket.accept()
    websocket_sessions.labels(route="echo").inc()
    logger.info("Echo session opened", client=str(websocket.client))
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            if message.get("text") is not None:
                await websocket.send_text(message["text"])
            elif message.get("bytes") is not None:
                await websocket.send_bytes(message["bytes"])
            websocket_frames.labels(route="echo").inc()
    except PEER_GONE as e:
        logger.info("Echo peer went away", error=str(e))
    finally:
        websocket_sessions.labels(route="echo").dec()
        logger.info("Echo session closed")


@router.websocket("/ws/{room_name}")
async def push_messages(websocket: WebSocket, room_name: str):
    """
    Push one freshly built message per interval until a write fails

    Each frame is a ChatMessage serialized with its wire names. There is no
    queue: a peer that stops reading ends the loop on the next failed write.
    """
    state = websocket.app.state
    settings = state.settings
    generator = state.fixture_generator
    seed_source = state.seed_source

    record_api_key(websocket.headers.get("api-key"))
    await websocket.accept()
    websocket_sessions.labels(route="push").inc()
    logger.info("Push session opened", room=room_name, interval=settings.WS_PUSH_INTERVAL)
    try:
        while True:
            await asyncio.sleep(settings.WS_PUSH_INTERVAL)
            seed = seed_source.randint(0, settings.MAX_SEED)
            message = generator.build_message(seed, settings.WS_SENDER)
            await websocket.send_text(message.model_dump_json(by_alias=True))
            websocket_frames.labels(route="push").inc()
    except PEER_GONE as e:
        logger.info("Push peer went away", room=room_name, error=str(e))
    finally:
        websocket_sessions.labels(route="push").dec()
        logger.info("Push session closed", room=room_name)
