"""
Conversation agent entry point.

Bridge mode connects the session engine to an external WhatsApp Web
client over JSON lines on stdin/stdout. Console mode runs the offline
terminal demo.

Usage:
    Bridge:       node wa-client.js | python main.py bridge | node wa-sender.js
    Console mode: python main.py console
"""

import asyncio
import logging
import sys

from src.config import settings

logger = logging.getLogger(__name__)


def _build_dispatcher():
    """Build the dispatcher wired to the JSON-lines transport."""
    from src.conversation.dispatcher import ConversationDispatcher
    from src.conversation.session_engine import SessionEngine
    from src.conversation.session_store import SessionStore
    from src.transport.bridge import JsonLinesTransport

    engine = SessionEngine(SessionStore())
    return ConversationDispatcher(engine, JsonLinesTransport())


def _run_bridge_mode() -> None:
    """Serve events from stdin until the client closes the pipe."""
    from src.transport.bridge import run_bridge

    logger.info(
        "%s is online for operator %s (credentials in %s)",
        settings.agent_name, settings.operator.operator_id, settings.operator.auth_dir,
    )
    asyncio.run(run_bridge(_build_dispatcher(), settings.operator.operator_id))


def _run_console_mode() -> None:
    """Start the offline console demo."""
    from console_demo import ConsoleSession

    session = ConsoleSession()
    session.run()


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "console":
        _run_console_mode()
    else:
        _run_bridge_mode()
