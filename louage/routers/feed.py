"""
Live collection feed over WebSocket.
WS /feed/{collection}?token=...: full record set on connect and after every change.
"""

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from louage.services.change_feed import COLLECTIONS, stream_collection
from louage.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.websocket("/feed/{collection}")
async def collection_feed(websocket: WebSocket, collection: str, token: str = None):
    if collection not in COLLECTIONS:
        await websocket.close(code=4404)
        return

    await websocket.accept()
    logger.info(f"Feed subscriber connected: {collection}")
    try:
        await stream_collection(websocket, collection, token, websocket.app.state.session_gate)
    except WebSocketDisconnect:
        logger.info(f"Feed subscriber disconnected: {collection}")
