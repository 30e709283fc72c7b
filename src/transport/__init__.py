from src.transport.base import MessageTransport, TransportError
from src.transport.whatsapp import parse_upsert

__all__ = ["MessageTransport", "TransportError", "parse_upsert"]
