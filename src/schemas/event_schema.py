"""Inbound event and outbound message schemas exchanged with the transport."""

from typing import Literal, Optional, Union

from pydantic import BaseModel


class InboundText(BaseModel):
    """A message observed on a correspondent's thread.

    ``text`` is None for non-text messages (media, reactions, stickers).
    ``from_me`` marks messages sent from the linked account; of those,
    ``from_operator`` marks the ones the operator typed by hand. A
    ``from_me`` message that is not ``from_operator`` is an echo of the
    automation's own send.
    """

    kind: Literal["text"] = "text"
    text: Optional[str] = None
    from_me: bool = False
    from_operator: bool = False


class OperatorInterrupt(BaseModel):
    """Explicit request by the operator to take over a thread."""

    kind: Literal["operator_interrupt"] = "operator_interrupt"


InboundEvent = Union[InboundText, OperatorInterrupt]


class OutboundMessage(BaseModel):
    """A single text the transport should deliver, in emission order."""

    correspondent_id: str
    text: str
