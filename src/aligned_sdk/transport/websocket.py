"""
WebSocket Transport for the batcher

- Async duplex transport over one connection
- Sends ClientMessage JSON as text frames; writes are serialized by a lock
- Yields BatchInclusionData decoded from inbound frames until the stream closes
"""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Optional

import websockets
from websockets.exceptions import ConnectionClosed, ConnectionClosedOK, WebSocketException

from aligned_sdk.protocol.errors import BatcherConnectionError, SerializationError
from aligned_sdk.protocol.models import BatchInclusionData, ClientMessage
from aligned_sdk.utils.json import json_dumps, json_loads

logger = logging.getLogger(__name__)


class BatcherConnection:
    """
    Duplex message stream to the batcher.

    The write half is guarded by an asyncio.Lock held only for the duration
    of a single send. The read half may be consumed concurrently from another
    task.

    Usage:
        conn = await BatcherConnection.connect("ws://localhost:8080")
        await conn.send(message)
        async for inclusion in conn.responses():
            ...
        await conn.close()
    """

    def __init__(self, ws) -> None:
        self._ws = ws
        self._write_lock = asyncio.Lock()
        self.malformed_frames = 0

    @classmethod
    async def connect(cls, url: str) -> "BatcherConnection":
        try:
            ws = await websockets.connect(url)
        except (OSError, WebSocketException, asyncio.TimeoutError) as e:
            raise BatcherConnectionError(f"Could not connect to batcher at {url}: {e}") from e

        logger.info("WebSocket handshake has been successfully completed")
        return cls(ws)

    async def send(self, message: ClientMessage) -> None:
        payload = json_dumps(message.to_dict())
        async with self._write_lock:
            try:
                await self._ws.send(payload)
            except (ConnectionClosed, OSError) as e:
                raise BatcherConnectionError(f"Connection dropped while sending: {e}") from e
        logger.debug("Sent client message (%d bytes)", len(payload))

    async def responses(self) -> AsyncIterator[BatchInclusionData]:
        """
        Yield decoded BatchInclusionData until the stream closes.

        Malformed frames are logged and skipped. An abnormal close ends the
        iteration like a normal one; callers decide what missing responses mean.
        """
        while True:
            try:
                raw = await self._ws.recv()
            except ConnectionClosedOK:
                logger.debug("Batcher closed the connection")
                return
            except ConnectionClosed as e:
                logger.warning("Connection to batcher closed abnormally: %s", e)
                return

            inclusion = self._decode(raw)
            if inclusion is not None:
                yield inclusion

    def _decode(self, raw) -> Optional[BatchInclusionData]:
        try:
            return BatchInclusionData.from_dict(json_loads(raw))
        except SerializationError as e:
            self.malformed_frames += 1
            logger.warning("Skipping malformed batcher message: %s", e)
            return None

    async def close(self) -> None:
        await self._ws.close()
