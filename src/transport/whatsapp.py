"""
Translation of WhatsApp Web ``messages.upsert`` payloads into engine events.

The transport library reports every message seen on the linked account,
including the ones the automation sent itself. Only the first message of
an upsert is considered. Text comes from either the plain ``conversation``
field or an ``extendedTextMessage``; anything else is a non-text message.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from src.schemas.event_schema import InboundText


class MessageKey(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    remote_jid: str = Field(alias="remoteJid")
    from_me: bool = Field(default=False, alias="fromMe")
    id: Optional[str] = None


class ExtendedTextMessage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    text: Optional[str] = None


class MessageContent(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    conversation: Optional[str] = None
    extended_text_message: Optional[ExtendedTextMessage] = Field(
        default=None, alias="extendedTextMessage"
    )

    def text(self) -> Optional[str]:
        if self.conversation:
            return self.conversation
        if self.extended_text_message is not None:
            return self.extended_text_message.text or ""
        return self.conversation


class WebMessage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    key: MessageKey
    message: Optional[MessageContent] = None


class UpsertPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    messages: list[WebMessage] = Field(default_factory=list)


def parse_upsert(payload: dict, operator_id: str) -> Optional[tuple[str, InboundText]]:
    """
    Turn a raw upsert payload into ``(correspondent_id, InboundText)``.

    A message sent from the linked account on the operator's own thread
    counts as the operator acting by hand; any other message sent from
    the linked account is an echo of the automation.

    Returns:
        None when the payload carries no message body at all.

    Raises:
        pydantic.ValidationError: If the payload does not have the upsert shape.
    """
    upsert = UpsertPayload.model_validate(payload)
    if not upsert.messages:
        return None
    first = upsert.messages[0]
    if first.message is None:
        return None

    correspondent_id = first.key.remote_jid
    text = first.message.text()
    return correspondent_id, InboundText(
        text=text.lower() if text is not None else None,
        from_me=first.key.from_me,
        from_operator=first.key.from_me and correspondent_id == operator_id,
    )
