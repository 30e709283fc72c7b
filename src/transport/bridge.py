"""
JSON-lines bridge to an external WhatsApp Web client.

The client process (which owns the socket, the QR pairing and the
credentials under AUTH_DIR) writes one ``messages.upsert`` payload per
line to our stdin and reads one ``{"to": ..., "text": ...}`` object per
line from our stdout, sending each as a WhatsApp message.
"""

import asyncio
import json
import logging
import sys
from typing import IO, Optional

from pydantic import ValidationError

from src.conversation.dispatcher import ConversationDispatcher
from src.transport.base import TransportError
from src.transport.whatsapp import parse_upsert

logger = logging.getLogger(__name__)


class JsonLinesTransport:
    """Writes outbound messages as JSON objects, one per line."""

    def __init__(self, stream: Optional[IO[str]] = None) -> None:
        self._stream = stream or sys.stdout

    async def send_text(self, correspondent_id: str, text: str) -> None:
        line = json.dumps({"to": correspondent_id, "text": text}, ensure_ascii=False)
        try:
            self._stream.write(line + "\n")
            self._stream.flush()
        except (OSError, ValueError) as exc:
            raise TransportError(f"Could not write message for {correspondent_id}: {exc}") from exc


async def run_bridge(
    dispatcher: ConversationDispatcher,
    operator_id: str,
    source: Optional[IO[str]] = None,
) -> int:
    """
    Feed every line of ``source`` through the dispatcher until EOF.

    Malformed lines are logged and skipped. Returns the number of events
    dispatched.

    Raises:
        Exception: The first exception raised while dispatching an event.
            Reading stops once a dispatch has failed, and the events
            already in flight are awaited before it is re-raised.
    """
    source = source or sys.stdin
    loop = asyncio.get_running_loop()
    pending: set[asyncio.Task] = set()
    failures: list[BaseException] = []
    dispatched = 0

    def _collect(task: asyncio.Task) -> None:
        pending.discard(task)
        if not task.cancelled() and task.exception() is not None:
            failures.append(task.exception())

    while not failures:
        raw = await loop.run_in_executor(None, source.readline)
        if not raw:
            break
        raw = raw.strip()
        if not raw:
            continue
        try:
            parsed = parse_upsert(json.loads(raw), operator_id)
        except (json.JSONDecodeError, ValidationError) as exc:
            logger.warning("Skipping malformed bridge line: %s", exc)
            continue
        if parsed is None:
            continue

        correspondent_id, event = parsed
        task = asyncio.create_task(dispatcher.dispatch(correspondent_id, event))
        pending.add(task)
        task.add_done_callback(_collect)
        dispatched += 1

    if pending:
        await asyncio.gather(*pending, return_exceptions=True)
    if failures:
        logger.error("Bridge stopped after %d events: %d dispatch(es) failed", dispatched, len(failures))
        raise failures[0]
    logger.info("Bridge input closed after %d events", dispatched)
    return dispatched
