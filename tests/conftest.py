"""Shared test fixtures and helpers."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from src.config import DialogueConfig, OperatorConfig
from src.conversation.session_engine import SessionEngine
from src.conversation.session_store import SessionStore
from src.schemas.event_schema import InboundText
from src.schemas.session_schema import Branch, Session, Step

CUSTOMER = "255617000001@s.whatsapp.net"
OTHER_CUSTOMER = "255617000002@s.whatsapp.net"
OPERATOR = "255617513064@s.whatsapp.net"
COOLDOWN = timedelta(hours=2)


class FakeClock:
    """Deterministic UTC clock for cooldown tests."""

    def __init__(self, start: Optional[datetime] = None) -> None:
        self.now = start or datetime(2025, 3, 15, 10, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


class RecordingTransport:
    """Collects every send as (correspondent_id, text)."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []

    async def send_text(self, correspondent_id: str, text: str) -> None:
        self.sent.append((correspondent_id, text))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return SessionStore()


@pytest.fixture
def dialogue_config():
    return DialogueConfig(cooldown_seconds=7200, max_invalid_replies=3, resume_command="resume")


@pytest.fixture
def operator_config():
    return OperatorConfig(operator_id=OPERATOR, owner_name="Yopinto", auth_dir="./auth_info")


@pytest.fixture
def engine(store, clock, dialogue_config, operator_config):
    return SessionEngine(store, dialogue=dialogue_config, operator=operator_config, clock=clock)


def say(engine: SessionEngine, text: Optional[str], correspondent_id: str = CUSTOMER) -> list[str]:
    """Send ``text`` as the correspondent and return the reply texts."""
    messages = engine.handle_event(correspondent_id, InboundText(text=text))
    return [m.text for m in messages]


def operator_says(engine: SessionEngine, text: str, correspondent_id: str = CUSTOMER) -> list[str]:
    """Send ``text`` as the operator on the correspondent's thread."""
    event = InboundText(text=text, from_me=True, from_operator=True)
    return [m.text for m in engine.handle_event(correspondent_id, event)]


def put_session(
    store: SessionStore,
    step: Step,
    branch: Branch = Branch.UNSET,
    correspondent_id: str = CUSTOMER,
    **kwargs,
) -> Session:
    """Place a correspondent mid-dialogue, awaiting a reply at ``step``."""
    session = Session(step=step, branch=branch, awaiting_reply=True, **kwargs)
    store.put(correspondent_id, session)
    return session


def walk_to_track(engine: SessionEngine, track: str, correspondent_id: str = CUSTOMER) -> None:
    """Drive a fresh correspondent through the intro up to the chosen track."""
    for text in ("hi", "yes", "yes", "yes", track):
        say(engine, text, correspondent_id)
