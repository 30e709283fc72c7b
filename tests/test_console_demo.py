"""Tests for the offline console demo."""

import pytest

from console_demo import ConsoleSession
from src.schemas.session_schema import Branch, Step


@pytest.fixture
def console(capsys):
    session = ConsoleSession()
    yield session
    capsys.readouterr()


def current(console: ConsoleSession):
    return console.store.get(console.correspondent_id)


class TestConsoleSession:
    def test_quit_stops(self, console):
        assert console.handle_line("quit") is False

    def test_blank_line_ignored(self, console):
        assert console.handle_line("   ") is True
        assert console.transport.sent == []

    def test_chat_advances_session(self, console):
        console.handle_line("hi")
        console.handle_line("yes")
        assert current(console).step == Step.NAME_ORIGIN
        assert len(console.transport.sent) == 3

    def test_operator_commands(self, console):
        console.handle_line("hi")
        console.handle_line("/operator hello, it's me")
        assert current(console).operator_override_active
        console.handle_line("/operator resume")
        assert not current(console).operator_override_active
        console.handle_line("/takeover")
        assert current(console).operator_override_active

    def test_advance_skips_cooldown(self, console):
        console.handle_line("hi")
        console.handle_line("wait")
        sent = len(console.transport.sent)
        console.handle_line("hello?")
        assert len(console.transport.sent) == sent
        console.handle_line("/advance 121")
        console.handle_line("hello?")
        assert len(console.transport.sent) == sent + 2

    def test_bad_advance_argument(self, console, capsys):
        console.handle_line("/advance soon")
        assert "Usage" in capsys.readouterr().out

    @pytest.mark.parametrize("scenario", sorted(ConsoleSession.SCENARIOS))
    def test_scenarios_run(self, console, scenario):
        console.run_scenario(scenario)
        assert console.transport.sent

    def test_business_scenario_completes_cycle(self, console):
        console.run_scenario("business")
        session = current(console)
        assert session.step == Step.GREETING
        assert session.branch == Branch.UNSET
        assert session.cooldown_until is not None
