"""
Script table: the content of the dialogue tree as typed transitions.

Each step owns a ScriptEntry. Entries are keyed one of three ways:
- not keyed: the same line is sent whatever the reply
- by the matched reply token (the intro choice and the track choice)
- by the session's branch (every step of the business/fun tracks)

A ScriptLine carries the outbound messages, the successor step and what
happens to the session afterwards. ``validate_script`` checks the table
is total over every reachable (step, key) pair so a gap is caught at
startup instead of mid-conversation.

Usage:
    line = lookup(Step.TRACK_CHOICE, Branch.UNSET, "business")
    assert line.select_branch == Branch.BUSINESS
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

from src.dialogue.vocabulary import EXPECTED_REPLIES
from src.schemas.session_schema import Branch, Step

logger = logging.getLogger(__name__)

DEFAULT_KEY = "*"


class ScriptConfigurationError(Exception):
    """Raised when the script table has no line for a reachable step."""


class StepAction(str, Enum):
    """What the engine does with the session after sending a line."""
    AWAIT_REPLY = "await_reply"
    DEFER_TO_OWNER = "defer_to_owner"
    COMPLETE_CYCLE = "complete_cycle"


class ScriptKey(str, Enum):
    """How a step's lines are selected."""
    NONE = "none"
    TOKEN = "token"
    BRANCH = "branch"


@dataclass(frozen=True)
class ScriptLine:
    """Outbound messages for one (step, key) and the resulting transition."""
    messages: tuple[str, ...]
    next_step: Step
    action: StepAction = StepAction.AWAIT_REPLY
    select_branch: Optional[Branch] = None


@dataclass(frozen=True)
class ScriptEntry:
    """All lines a step can send."""
    keyed_by: ScriptKey
    lines: Mapping[str, ScriptLine]


def _single(line: ScriptLine) -> ScriptEntry:
    return ScriptEntry(ScriptKey.NONE, {DEFAULT_KEY: line})


def _by_branch(next_step: Step, business: str, fun: str) -> ScriptEntry:
    return ScriptEntry(ScriptKey.BRANCH, {
        Branch.BUSINESS.value: ScriptLine((business,), next_step),
        Branch.FUN.value: ScriptLine((fun,), next_step),
    })


GREETING_MESSAGE = (
    "👋 Greetings! I’m Josephine, your dedicated assistant, crafted by the exceptional Yopinto.\n\n"
    "Yopinto is a visionary expert in:\n"
    "🌐 Crafting elegant, high-performing websites that captivate.\n"
    "📱 Developing innovative apps tailored to your needs.\n"
    "📈 Designing strategic business solutions for growth.\n"
    "📣 Creating impactful advertising campaigns that shine.\n"
    "💻 Offering insightful computing advice to solve challenges.\n\n"
    "I’m here to assist you with his top-tier services. How may I support you today?"
)

GREETING_PROMPT = (
    "🤝 Would you like to explore my capabilities, or connect with Yopinto personally?\n"
    "Please reply with ‘yes’ to continue with me, or ‘wait’ to reach Yopinto."
)

_CONTINUE_WITH_AGENT = ScriptLine(
    (
        "🎉 Excellent choice! I’m excited to assist you.\n"
        "Are you curious about the inspiration behind my name, Josephine?\n"
        "Please reply with ‘yes’ to find out!",
    ),
    Step.NAME_ORIGIN,
)

_REACH_OWNER = ScriptLine(
    (
        "✅ No problem! I’m notifying Yopinto to bring his expertise your way.\n"
        "He’ll reach out soon—feel free to check back in 2 hours if needed!",
    ),
    Step.INTRO_CHOICE,
    action=StepAction.DEFER_TO_OWNER,
)

SCRIPT: dict[Step, ScriptEntry] = {
    Step.GREETING: _single(ScriptLine((GREETING_MESSAGE, GREETING_PROMPT), Step.INTRO_CHOICE)),

    Step.INTRO_CHOICE: ScriptEntry(ScriptKey.TOKEN, {
        "yes": _CONTINUE_WITH_AGENT,
        "yep": _CONTINUE_WITH_AGENT,
        "wait": _REACH_OWNER,
    }),

    Step.NAME_ORIGIN: _single(ScriptLine(
        (
            "🙌 Thank you for your interest! My name’s origin is a mystery—perhaps a tribute to someone special to Yopinto.\n"
            "Would you like to learn how a custom bot like me can enhance your WhatsApp experience?\n"
            "Please reply with ‘yes’ to explore more!",
        ),
        Step.TRACK_PROMPT,
    )),

    Step.TRACK_PROMPT: _single(ScriptLine(
        (
            "🌟 Wonderful! I’m built to elevate your communication.\n"
            "Are you looking for a bot for business efficiency or personal enjoyment?\n"
            "Please reply with ‘business’ or ‘fun’ to choose.",
        ),
        Step.TRACK_CHOICE,
    )),

    Step.TRACK_CHOICE: ScriptEntry(ScriptKey.TOKEN, {
        "business": ScriptLine(
            (
                "📊 A strategic choice! Businesses flourish with automation like me.\n"
                "I optimize client interactions, save time, and boost revenue.\n"
                "Want to know how? Please reply with ‘yes’!",
            ),
            Step.TRACK_OVERVIEW,
            select_branch=Branch.BUSINESS,
        ),
        "fun": ScriptLine(
            (
                "😊 A delightful pick! I bring joy and engagement to your chats.\n"
                "Curious why I’m so entertaining? Please reply with ‘yes’!",
            ),
            Step.TRACK_OVERVIEW,
            select_branch=Branch.FUN,
        ),
    }),

    Step.TRACK_OVERVIEW: _by_branch(
        Step.RESULTS,
        business=(
            "🚀 Here’s how I empower businesses:\n"
            "• Instant client responses.\n"
            "• Enhanced satisfaction and loyalty.\n"
            "• 24/7 availability.\n"
            "Interested in the benefits? Reply with ‘yes’!"
        ),
        fun=(
            "🎈 Here’s what makes me fun:\n"
            "• Engaging chats that spark joy.\n"
            "• Unique flair for lively talks.\n"
            "• A companion for great moments.\n"
            "Want more perks? Reply with ‘yes’!"
        ),
    ),

    Step.RESULTS: _by_branch(
        Step.VALUE,
        business=(
            "📈 The results speak for themselves:\n"
            "• Attract more clients effortlessly.\n"
            "• Project professionalism with ease.\n"
            "• Increase revenue seamlessly.\n"
            "More benefits? Reply with ‘yes’!"
        ),
        fun=(
            "✨ The perks are exciting:\n"
            "• Daily engaging conversations.\n"
            "• Stand out with charm.\n"
            "• Create a buzz in your chats.\n"
            "More details? Reply with ‘yes’!"
        ),
    ),

    Step.VALUE: _by_branch(
        Step.PRICING,
        business=(
            "💼 Here’s the value:\n"
            "• Cost-effective over staff.\n"
            "• Quick setup, instant results.\n"
            "• Outshines traditional ads.\n"
            "Curious about pricing? Reply with ‘yes’!"
        ),
        fun=(
            "🎉 Why it’s a win:\n"
            "• Affordable chat enhancement.\n"
            "• Unique presence in your circle.\n"
            "• Engaging at your fingertips.\n"
            "Want the cost? Reply with ‘yes’!"
        ),
    ),

    Step.PRICING: _by_branch(
        Step.FIRST_STORY,
        business=(
            "💰 Just 20,000 TSH for a business bot!\n"
            "A smart investment for growth.\n"
            "Want success stories? Reply with ‘yes’!"
        ),
        fun=(
            "💸 Only 5,000 TSH for a fun bot!\n"
            "A small price to shine in chats.\n"
            "Hear success tales? Reply with ‘yes’!"
        ),
    ),

    Step.FIRST_STORY: _by_branch(
        Step.SECOND_STORY,
        business=(
            "🏆 A retailer doubled orders in a week with me!\n"
            "Clients loved the prompt service.\n"
            "Another example? Reply with ‘yes’!"
        ),
        fun=(
            "🌟 A user became the chat star with me!\n"
            "Friends loved the daily fun.\n"
            "More stories? Reply with ‘yes’!"
        ),
    ),

    Step.SECOND_STORY: _by_branch(
        Step.HOW_IT_WORKS,
        business=(
            "☕ A café saved hours daily with my order management!\n"
            "Sales soared with happy customers.\n"
            "How it works? Reply with ‘yes’!"
        ),
        fun=(
            "💖 A user connected meaningfully with my charm!\n"
            "Chats led to great outcomes.\n"
            "The approach? Reply with ‘yes’!"
        ),
    ),

    Step.HOW_IT_WORKS: _by_branch(
        Step.VISION,
        business=(
            "🛠️ It’s simple:\n"
            "• Always on for clients.\n"
            "• Build trust effortlessly.\n"
            "• Drive profits automatically.\n"
            "More insights? Reply with ‘yes’!"
        ),
        fun=(
            "😄 It’s easy:\n"
            "• Fresh, engaging chats.\n"
            "• Boost your presence.\n"
            "• Rewarding interactions.\n"
            "More benefits? Reply with ‘yes’!"
        ),
    ),

    Step.VISION: _by_branch(
        Step.LOYALTY_STORY,
        business=(
            "🌍 Imagine: Competitors lag while you thrive.\n"
            "I handle it all with precision.\n"
            "A unique edge? Reply with ‘yes’!"
        ),
        fun=(
            "👑 Picture: Your chats outshine others.\n"
            "I make you the focal point.\n"
            "A special twist? Reply with ‘yes’!"
        ),
    ),

    Step.LOYALTY_STORY: _by_branch(
        Step.FINAL_ADVANTAGE,
        business=(
            "📢 One business retained clients with my flair!\n"
            "Sales grew with deeper engagement.\n"
            "Ready to start? Reply with ‘yes’!"
        ),
        fun=(
            "💬 One user built lasting ties with my wit!\n"
            "Chats became rewarding.\n"
            "Ready to go? Reply with ‘yes’!"
        ),
    ),

    Step.FINAL_ADVANTAGE: _by_branch(
        Step.SIGN_UP,
        business=(
            "🏁 Final advantage:\n"
            "• Stand out effortlessly.\n"
            "• Grow with proven results.\n"
            "• Simplify with confidence.\n"
            "Join now? Reply with ‘yes’!"
        ),
        fun=(
            "🎯 Closing benefit:\n"
            "• Elevate your presence.\n"
            "• Delight contacts consistently.\n"
            "• Enjoy exceptional chats.\n"
            "Begin now? Reply with ‘yes’!"
        ),
    ),

    Step.SIGN_UP: _by_branch(
        Step.FAREWELL,
        business=(
            "🎉 Fantastic! Visit https://yopinto241.github.io/yopinto.github.io/\n"
            "Secure your business bot for 20,000 TSH!\n"
            "Say ‘thanks’ to wrap up!"
        ),
        fun=(
            "🌟 Excellent! Visit https://yopinto241.github.io/yopinto.github.io/\n"
            "Get your fun bot for 5,000 TSH!\n"
            "Say ‘thanks’ to finish!"
        ),
    ),

    Step.FAREWELL: _single(ScriptLine(
        (
            "🙏 Thank you for your time! I’m Josephine, and it’s been a pleasure.\n"
            "Reach out again in 2 hours for more support! 🌟",
        ),
        Step.GREETING,
        action=StepAction.COMPLETE_CYCLE,
    )),
}


def lookup(
    step: Step,
    branch: Branch,
    token: str,
    script: Mapping[Step, ScriptEntry] = SCRIPT,
) -> ScriptLine:
    """
    Resolve the line to send at ``step``.

    Args:
        step: The session's current step.
        branch: The session's branch, used by branch-keyed steps.
        token: The normalized reply, used by token-keyed steps.

    Raises:
        ScriptConfigurationError: If no line exists for the resolved key.
    """
    entry = script.get(step)
    if entry is None:
        raise ScriptConfigurationError(f"No script entry for step {int(step)}")

    if entry.keyed_by is ScriptKey.TOKEN:
        key = token
    elif entry.keyed_by is ScriptKey.BRANCH:
        key = branch.value
    else:
        key = DEFAULT_KEY

    line = entry.lines.get(key)
    if line is None:
        raise ScriptConfigurationError(
            f"Script entry for step {int(step)} has no line for {entry.keyed_by.value} "
            f"'{key}'. Available: {sorted(entry.lines)}"
        )
    return line


def validate_script(
    script: Mapping[Step, ScriptEntry] = SCRIPT,
    vocabulary: Mapping[Step, tuple[str, ...]] = EXPECTED_REPLIES,
) -> None:
    """Check the script is total over every step and every key it can be asked for.

    Raises:
        ScriptConfigurationError: Describing the first gap found.
    """
    for step in Step:
        entry = script.get(step)
        if entry is None:
            raise ScriptConfigurationError(f"No script entry for step {int(step)}")

        if entry.keyed_by is ScriptKey.TOKEN:
            tokens = vocabulary.get(step, ())
            if not tokens:
                raise ScriptConfigurationError(
                    f"Step {int(step)} is keyed by reply token but has no vocabulary"
                )
            required = set(tokens)
        elif entry.keyed_by is ScriptKey.BRANCH:
            required = {Branch.BUSINESS.value, Branch.FUN.value}
        else:
            required = {DEFAULT_KEY}

        missing = required - set(entry.lines)
        if missing:
            raise ScriptConfigurationError(
                f"Step {int(step)} is missing lines for {sorted(missing)}"
            )

        for key, line in entry.lines.items():
            if not line.messages or not all(m.strip() for m in line.messages):
                raise ScriptConfigurationError(
                    f"Step {int(step)} line '{key}' has an empty message"
                )
            if line.select_branch is not None and entry.keyed_by is not ScriptKey.TOKEN:
                raise ScriptConfigurationError(
                    f"Step {int(step)} selects a branch without being keyed by reply token"
                )
            if line.select_branch is Branch.UNSET:
                raise ScriptConfigurationError(
                    f"Step {int(step)} line '{key}' selects the unset branch"
                )

    logger.debug("Script table validated: %d steps", len(script))
