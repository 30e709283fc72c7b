"""Boundary with the messaging transport."""

from typing import Protocol, runtime_checkable


class TransportError(Exception):
    """Raised by a transport when a message could not be handed off for delivery."""


@runtime_checkable
class MessageTransport(Protocol):
    """Anything that can send literal text to a correspondent."""

    async def send_text(self, correspondent_id: str, text: str) -> None:
        """Request delivery of ``text``. Raises TransportError on failure."""
        ...
