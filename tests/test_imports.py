"""Tests for import chains and module integrity.

Ensures all public modules can be imported without errors and
that re-exports from __init__.py files work correctly.
"""


class TestSchemaImports:
    def test_import_session_schema(self):
        from src.schemas.session_schema import Branch, Session, Step
        session = Session()
        assert session.step == Step.GREETING
        assert Branch.BUSINESS == "business"
        assert len(Step) == 17

    def test_import_event_schema(self):
        from src.schemas.event_schema import InboundText, OperatorInterrupt, OutboundMessage
        assert InboundText().text is None
        assert OperatorInterrupt().kind == "operator_interrupt"
        assert OutboundMessage(correspondent_id="x", text="y").text == "y"


class TestPackageImports:
    def test_import_conversation_package(self):
        from src.conversation import ConversationDispatcher, SessionEngine, SessionStore
        assert SessionEngine is not None
        assert len(SessionStore()) == 0
        assert ConversationDispatcher is not None

    def test_import_dialogue_package(self):
        from src.dialogue import EXPECTED_REPLIES, SCRIPT, validate_script
        assert len(SCRIPT) == 17
        assert len(EXPECTED_REPLIES) == 15
        assert callable(validate_script)

    def test_import_transport_package(self):
        from src.transport import MessageTransport, TransportError, parse_upsert
        assert issubclass(TransportError, Exception)
        assert callable(parse_upsert)
        assert MessageTransport is not None


class TestConfigImport:
    def test_import_config(self):
        from src.config import settings
        assert settings.operator.operator_id
        assert settings.dialogue.cooldown_seconds >= 1
        assert settings.dialogue.max_invalid_replies >= 1


class TestConsoleDemo:
    def test_console_session_imports(self):
        from console_demo import ConsoleSession
        session = ConsoleSession()
        assert session.store.get(session.correspondent_id).step == 0
