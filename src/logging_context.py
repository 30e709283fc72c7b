"""Correspondent-aware logging context for tracing one conversation.

Attaches the correspondent identifier currently being processed to every
log record, so a single correspondent's journey through the dispatcher
and the session engine can be followed in interleaved logs.

Usage:
    from src.logging_context import correspondent_context, get_correspondent_logger

    logger = get_correspondent_logger(__name__)
    with correspondent_context("255617513064@s.whatsapp.net"):
        logger.info("Processing event")  # record.correspondent_id is set
"""

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Union

_correspondent_id: ContextVar[str] = ContextVar("correspondent_id", default="-")


def set_correspondent_id(correspondent_id: str) -> None:
    """Set the correspondent for the current async context."""
    _correspondent_id.set(correspondent_id)


def get_correspondent_id() -> str:
    """Retrieve the correspondent for the current async context."""
    return _correspondent_id.get()


@contextmanager
def correspondent_context(correspondent_id: str) -> Iterator[None]:
    """Scope the correspondent id to a block, restoring the previous value."""
    token = _correspondent_id.set(correspondent_id)
    try:
        yield
    finally:
        _correspondent_id.reset(token)


class CorrespondentIdFilter(logging.Filter):
    """Injects correspondent_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correspondent_id = _correspondent_id.get()  # type: ignore[attr-defined]
        return True


def install_correspondent_filter(target: Union[logging.Logger, logging.Handler]) -> None:
    """Attach a CorrespondentIdFilter to a logger or handler exactly once."""
    if not any(isinstance(f, CorrespondentIdFilter) for f in target.filters):
        target.addFilter(CorrespondentIdFilter())


def get_correspondent_logger(name: str) -> logging.Logger:
    """Return a logger with the CorrespondentIdFilter attached.

    The filter adds ``correspondent_id`` to each record so formatters can
    include ``%(correspondent_id)s`` in their format string.
    """
    logger = logging.getLogger(name)
    install_correspondent_filter(logger)
    return logger
