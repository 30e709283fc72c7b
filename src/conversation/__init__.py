from src.conversation.dispatcher import ConversationDispatcher
from src.conversation.session_engine import SessionEngine
from src.conversation.session_store import SessionStore

__all__ = [
    "SessionEngine",
    "SessionStore",
    "ConversationDispatcher",
]
