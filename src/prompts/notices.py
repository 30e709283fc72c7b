"""Fixed system notices sent outside the scripted dialogue."""

OPERATOR_TAKEOVER_NOTICE = (
    "👋 I’ve paused Josephine to let you take over! Use 'resume' to bring me back."
)

OPERATOR_RESUME_NOTICE = "▶️ Josephine is back online! How can I assist you now?"

REORIENTATION_MESSAGE = (
    "🤔 It seems we’re not quite aligned! I’m Josephine—let’s start fresh.\n"
    "Please reply with ‘yes’ to continue or ‘wait’ to reach Yopinto directly."
)


def build_correction_prompt(expected_token: str) -> str:
    """Build the nudge sent after an unmatched reply."""
    return f"❌ I didn’t catch that! Please respond with ‘{expected_token}’ to proceed."
