"""
Offline console demo: chat with the agent in the terminal, no WhatsApp needed.

Runs the real session store, session engine and dispatcher against a
terminal transport. A simulated clock lets the cooldown be skipped.

Commands while chatting:
    /operator <text>   send <text> as the operator on this thread
    /takeover          operator interrupt without a message
    /advance <minutes> move the simulated clock forward
    /state             print the current session
    quit               leave

Usage:
    python console_demo.py
    python console_demo.py --scenario business
    python console_demo.py --scenario strikes
"""

import argparse
import asyncio
import sys
from datetime import datetime, timedelta, timezone

from src.config import settings
from src.conversation.dispatcher import ConversationDispatcher
from src.conversation.session_engine import SessionEngine
from src.conversation.session_store import SessionStore
from src.schemas.event_schema import InboundEvent, InboundText, OperatorInterrupt

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"

DEMO_CORRESPONDENT = "255700000001@s.whatsapp.net"


class ConsoleTransport:
    """Prints outbound messages instead of sending them."""

    def __init__(self, agent_name: str) -> None:
        self.agent_name = agent_name
        self.sent: list[str] = []

    async def send_text(self, correspondent_id: str, text: str) -> None:
        self.sent.append(text)
        print(f"{GREEN}{BOLD}[{self.agent_name}]{RESET} {GREEN}{text}{RESET}")


class SimulatedClock:
    """A UTC clock that only moves when told to."""

    def __init__(self) -> None:
        self._now = datetime.now(timezone.utc)

    def __call__(self) -> datetime:
        return self._now

    def advance(self, minutes: float) -> None:
        self._now += timedelta(minutes=minutes)


class ConsoleSession:
    """Simulates one correspondent's thread in the terminal."""

    # Pre-scripted scenarios for --scenario flag
    SCENARIOS: dict[str, list[str]] = {
        "business": ["hi", "yes", "yes", "yes", "business"] + ["yes"] * 11 + ["thanks"],
        "fun": ["hello", "yep", "yes", "yes", "fun"] + ["yep"] * 11 + ["thanks"],
        "wait": ["hi", "wait", "are you there?", "/advance 121", "hi again"],
        "strikes": ["hi", "maybe", "what?", "no idea", "yes"],
        "operator": ["hi", "/operator Hey, it's Yopinto here!", "yes", "/operator resume", "yes"],
    }

    MAX_INPUT_LENGTH = 500

    def __init__(self, correspondent_id: str = DEMO_CORRESPONDENT) -> None:
        self.correspondent_id = correspondent_id
        self.clock = SimulatedClock()
        self.store = SessionStore()
        self.engine = SessionEngine(self.store, clock=self.clock)
        self.transport = ConsoleTransport(settings.agent_name)
        self.dispatcher = ConversationDispatcher(self.engine, self.transport)

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    def describe_session(self) -> str:
        session = self.store.get(self.correspondent_id)
        cooldown = session.cooldown_until.isoformat() if session.cooldown_until else "none"
        return (
            f"step={int(session.step)} ({session.step.name.lower()}) "
            f"branch={session.branch.value} strikes={session.invalid_reply_count} "
            f"override={session.operator_override_active} cooldown={cooldown}"
        )

    def handle_line(self, line: str) -> bool:
        """Process one line of input. Returns False when the user wants to leave."""
        line = line.strip()
        if not line:
            return True
        if line.lower() in ("quit", "exit", "q"):
            return False
        if len(line) > self.MAX_INPUT_LENGTH:
            self.system_log("Input too long, ignored.")
            return True

        event: InboundEvent
        if line.startswith("/advance"):
            _, _, minutes = line.partition(" ")
            try:
                self.clock.advance(float(minutes or "120"))
            except ValueError:
                print(f"{RED}Usage: /advance <minutes>{RESET}")
                return True
            self.system_log(f"Clock now {self.clock().isoformat()}")
            return True
        if line == "/state":
            self.system_log(self.describe_session())
            return True
        if line == "/takeover":
            print(f"{YELLOW}[Operator] (takes over){RESET}")
            event = OperatorInterrupt()
        elif line.startswith("/operator "):
            text = line[len("/operator "):]
            print(f"{YELLOW}[Operator] {RESET}{text}")
            event = InboundText(text=text, from_me=True, from_operator=True)
        else:
            event = InboundText(text=line)

        asyncio.run(self.dispatcher.dispatch(self.correspondent_id, event))
        self.system_log(self.describe_session())
        return True

    def _banner(self, title: str) -> None:
        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  {settings.agent_name.upper()} - {title}{RESET}")
        print(f"{BOLD}  Correspondent: {self.correspondent_id}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")
        print()

    def run_scenario(self, scenario: str) -> None:
        """Auto-play a pre-scripted scenario for demo purposes."""
        steps = self.SCENARIOS.get(scenario)
        if not steps:
            print(f"{RED}Unknown scenario: {scenario}{RESET}")
            return

        self._banner(f"Scenario: {scenario}")
        for step in steps:
            if not step.startswith("/"):
                print(f"\n{BLUE}[Correspondent] {RESET}{step}")
            self.handle_line(step)

        print(f"\n{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  Scenario '{scenario}' complete.{RESET}")
        print(f"{DIM}  Messages sent: {len(self.transport.sent)}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")

    def run(self) -> None:
        self._banner("Console Demo (type 'quit' to exit)")
        while True:
            try:
                user_input = input(f"\n{BLUE}[Correspondent] {RESET}")
            except EOFError:
                break
            if not self.handle_line(user_input):
                break
        print(f"\n{DIM}Session ended.{RESET}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Offline conversation agent demo")
    parser.add_argument(
        "--scenario",
        choices=sorted(ConsoleSession.SCENARIOS),
        help="Play a pre-scripted conversation instead of reading input",
    )
    args = parser.parse_args()

    session = ConsoleSession()
    if args.scenario:
        session.run_scenario(args.scenario)
    else:
        session.run()


if __name__ == "__main__":
    sys.exit(main())
