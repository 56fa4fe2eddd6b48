# Filename: websocket_listener.py

import asyncio
import json
import logging
from typing import AsyncGenerator, Optional

import websockets

from models import LogNotification

logger = logging.getLogger("WebSocketListener")


def parse_log_notification(message: dict) -> Optional[LogNotification]:
    """Turn a logsNotification JSON-RPC frame into a LogNotification."""
    if not isinstance(message, dict) or message.get("method") != "logsNotification":
        return None

    value = message
    for field_name in ("params", "result", "value"):
        value = value.get(field_name) if isinstance(value, dict) else None
    if not isinstance(value, dict):
        return None

    logs = value.get("logs")
    return LogNotification(
        logs=[line for line in logs if isinstance(line, str)] if isinstance(logs, list) else [],
        signature=str(value.get("signature") or ""),
        has_error=value.get("err") is not None,
    )


class WebSocketListener:
    """
    logsSubscribe on one program, exposed as an async stream.
    Reconnects after a fixed delay when the connection drops.
    """

    def __init__(self, uri: str, program_id: str, commitment: str = "processed",
                 reconnect_delay: float = 5):
        self.uri = uri
        self.program_id = program_id
        self.commitment = commitment
        self.reconnect_delay = reconnect_delay
        self._stopped = False

    def stop(self):
        self._stopped = True

    def subscribe_message(self) -> str:
        return json.dumps({
            "jsonrpc": "2.0",
            "id": 1,
            "method": "logsSubscribe",
            "params": [
                {"mentions": [self.program_id]},
                {"commitment": self.commitment}
            ]
        })

    async def stream(self) -> AsyncGenerator[LogNotification, None]:
        while not self._stopped:
            try:
                async with websockets.connect(self.uri, ping_interval=20, ping_timeout=10) as ws:
                    await ws.send(self.subscribe_message())
                    logger.info(f"[WS] Connected and subscribed to logs of {self.program_id}")

                    async for raw_msg in ws:
                        if self._stopped:
                            break
                        try:
                            msg = json.loads(raw_msg)
                        except ValueError as e:
                            logger.error(f"[WS] Failed to parse message: {e}")
                            continue

                        if not isinstance(msg, dict):
                            logger.warning(f"[WS] Skipping non-object frame: {raw_msg[:100]!r}")
                            continue

                        if "result" in msg and "id" in msg:
                            logger.info(f"[WS] Subscription confirmed - ID: {msg['result']}")
                            continue

                        notification = parse_log_notification(msg)
                        if notification is not None:
                            yield notification
            except (OSError, websockets.exceptions.WebSocketException) as e:
                logger.error(f"[WS] WebSocket connection error: {e}")

            if not self._stopped:
                await asyncio.sleep(self.reconnect_delay)
