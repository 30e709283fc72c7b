"""Per-correspondent dialogue state."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum, IntEnum
from typing import Optional


class Step(IntEnum):
    """Positions in the dialogue graph, named after the script sent at that step."""
    GREETING = 0
    INTRO_CHOICE = 1
    NAME_ORIGIN = 2
    TRACK_PROMPT = 3
    TRACK_CHOICE = 4
    TRACK_OVERVIEW = 5
    RESULTS = 6
    VALUE = 7
    PRICING = 8
    FIRST_STORY = 9
    SECOND_STORY = 10
    HOW_IT_WORKS = 11
    VISION = 12
    LOYALTY_STORY = 13
    FINAL_ADVANTAGE = 14
    SIGN_UP = 15
    FAREWELL = 16


# Where a three-strikes reset lands: the first step that expects a reply.
ENTRY_STEP = Step.INTRO_CHOICE


class Branch(str, Enum):
    """Thematic track chosen once per dialogue cycle."""
    UNSET = "unset"
    BUSINESS = "business"
    FUN = "fun"


@dataclass
class Session:
    """
    Dialogue state for a single correspondent.

    Lives in the SessionStore for the whole process lifetime. A finished
    cycle is reset in place and gated by ``cooldown_until`` rather than
    being removed.
    """
    step: Step = Step.GREETING
    branch: Branch = Branch.UNSET
    invalid_reply_count: int = 0
    operator_override_active: bool = False
    cooldown_until: Optional[datetime] = None
    awaiting_reply: bool = False

    def is_cooling_down(self, now: datetime) -> bool:
        return self.cooldown_until is not None and now < self.cooldown_until

    def reset_cycle(self) -> None:
        """Return to a fresh start. Operator override and cooldown are untouched."""
        self.step = Step.GREETING
        self.branch = Branch.UNSET
        self.invalid_reply_count = 0
        self.awaiting_reply = False
