"""
Async dispatcher between the transport and the session engine.

Events for the same correspondent are serialized with one asyncio.Lock
per correspondent: an event and every send it produces finish before the
next event for that correspondent is looked at. Different correspondents
never wait on each other.

Sends are fire-and-forget from the state machine's point of view. The
engine has already committed the session when sending starts, so a
transport failure is logged and the remaining sends for that event are
dropped without touching the session.

The messaging library reports the automation's own sends back as
messages from the linked account. On the operator's thread those would
look like the operator typing, so the dispatcher remembers what it
delivered to each thread and strips the operator flag from a matching
echo before the engine sees it.
"""

import asyncio
from collections import deque

from src.conversation.session_engine import SessionEngine
from src.logging_context import correspondent_context, get_correspondent_logger
from src.schemas.event_schema import InboundEvent, InboundText, OutboundMessage
from src.transport.base import MessageTransport, TransportError
from src.utils import normalize_reply

logger = get_correspondent_logger(__name__)

# Delivered texts remembered per thread while waiting for their echo.
ECHO_MEMORY = 16


class ConversationDispatcher:
    """Routes inbound events through the engine and delivers the replies."""

    def __init__(self, engine: SessionEngine, transport: MessageTransport) -> None:
        self._engine = engine
        self._transport = transport
        self._locks: dict[str, asyncio.Lock] = {}
        self._delivered: dict[str, deque[str]] = {}

    def _lock_for(self, correspondent_id: str) -> asyncio.Lock:
        lock = self._locks.get(correspondent_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[correspondent_id] = lock
        return lock

    async def dispatch(self, correspondent_id: str, event: InboundEvent) -> list[OutboundMessage]:
        """
        Handle one event end to end.

        Returns:
            The messages the engine produced, whether or not every one
            of them was delivered.
        """
        with correspondent_context(correspondent_id):
            async with self._lock_for(correspondent_id):
                event = self._claim_echo(correspondent_id, event)
                messages = self._engine.handle_event(correspondent_id, event)
                delivered = await self._deliver(messages)
                if delivered < len(messages):
                    logger.warning(
                        "Delivered %d of %d messages to %s",
                        delivered, len(messages), correspondent_id,
                    )
                return messages

    def _claim_echo(self, correspondent_id: str, event: InboundEvent) -> InboundEvent:
        """Mark a linked-account message that repeats one of our sends as an echo."""
        if not isinstance(event, InboundText) or not event.from_me or event.text is None:
            return event
        recent = self._delivered.get(correspondent_id)
        text = normalize_reply(event.text)
        if not recent or text not in recent:
            return event
        recent.remove(text)
        if event.from_operator:
            logger.debug("Own send echoed on %s, not treated as the operator", correspondent_id)
            return event.model_copy(update={"from_operator": False})
        return event

    async def _deliver(self, messages: list[OutboundMessage]) -> int:
        delivered = 0
        for message in messages:
            try:
                await self._transport.send_text(message.correspondent_id, message.text)
            except TransportError:
                logger.exception("Send to %s failed", message.correspondent_id)
                break
            recent = self._delivered.setdefault(
                message.correspondent_id, deque(maxlen=ECHO_MEMORY)
            )
            recent.append(normalize_reply(message.text))
            delivered += 1
        return delivered

    async def dispatch_many(
        self, events: list[tuple[str, InboundEvent]]
    ) -> list[list[OutboundMessage]]:
        """Dispatch a batch concurrently; per-correspondent order is preserved."""
        return list(await asyncio.gather(*(self.dispatch(cid, ev) for cid, ev in events)))
