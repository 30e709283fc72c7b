"""Shared utilities used across the conversation agent."""

import re

BROADCAST_STATUS_ID = "status@broadcast"
MULTI_PARTY_SUFFIXES = ("@g.us", "@broadcast", "@newsletter")


def normalize_reply(value: str) -> str:
    """Normalize a reply for vocabulary matching: trimmed, case-folded, single-spaced.

    Examples:
        >>> normalize_reply("  YES ")
        'yes'
        >>> normalize_reply("Business")
        'business'
    """
    return re.sub(r"\s+", " ", value.strip()).casefold()


def is_one_to_one(correspondent_id: str) -> bool:
    """Return True unless the id denotes a status broadcast or a multi-party chat.

    Examples:
        >>> is_one_to_one("255617513064@s.whatsapp.net")
        True
        >>> is_one_to_one("120363025246125486@g.us")
        False
    """
    if not correspondent_id or correspondent_id == BROADCAST_STATUS_ID:
        return False
    return not correspondent_id.endswith(MULTI_PARTY_SUFFIXES)
