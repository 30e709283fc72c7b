from src.dialogue.script import (
    SCRIPT,
    ScriptConfigurationError,
    ScriptLine,
    StepAction,
    lookup,
    validate_script,
)
from src.dialogue.vocabulary import EXPECTED_REPLIES, accepted_replies, first_accepted, is_accepted

__all__ = [
    "SCRIPT",
    "ScriptLine",
    "StepAction",
    "ScriptConfigurationError",
    "lookup",
    "validate_script",
    "EXPECTED_REPLIES",
    "accepted_replies",
    "is_accepted",
    "first_accepted",
]
