"""Accepted reply tokens per dialogue step.

A step listed here only advances when the correspondent's normalized reply
is one of its tokens. The first token is the one named in corrections.
Steps absent from the table accept any text.
"""

from typing import Mapping

from src.schemas.session_schema import Step
from src.utils import normalize_reply

_AFFIRMATIVE = ("yes", "yep")

EXPECTED_REPLIES: dict[Step, tuple[str, ...]] = {
    Step.INTRO_CHOICE: ("yes", "yep", "wait"),
    Step.NAME_ORIGIN: _AFFIRMATIVE,
    Step.TRACK_PROMPT: _AFFIRMATIVE,
    Step.TRACK_CHOICE: ("business", "fun"),
    Step.TRACK_OVERVIEW: _AFFIRMATIVE,
    Step.RESULTS: _AFFIRMATIVE,
    Step.VALUE: _AFFIRMATIVE,
    Step.PRICING: _AFFIRMATIVE,
    Step.FIRST_STORY: _AFFIRMATIVE,
    Step.SECOND_STORY: _AFFIRMATIVE,
    Step.HOW_IT_WORKS: _AFFIRMATIVE,
    Step.VISION: _AFFIRMATIVE,
    Step.LOYALTY_STORY: _AFFIRMATIVE,
    Step.FINAL_ADVANTAGE: _AFFIRMATIVE,
    # The prompt before sign-up asks for 'yes'; 'thanks' is kept for
    # correspondents who answer the wrap-up line early.
    Step.SIGN_UP: _AFFIRMATIVE + ("thanks",),
}


def accepted_replies(
    step: Step, vocabulary: Mapping[Step, tuple[str, ...]] = EXPECTED_REPLIES
) -> tuple[str, ...]:
    """Return the tokens accepted at ``step``, empty when any text is accepted."""
    return vocabulary.get(step, ())


def is_accepted(
    step: Step, text: str, vocabulary: Mapping[Step, tuple[str, ...]] = EXPECTED_REPLIES
) -> bool:
    """Case-insensitive exact match of ``text`` against the step's tokens."""
    return normalize_reply(text) in accepted_replies(step, vocabulary)


def first_accepted(
    step: Step, vocabulary: Mapping[Step, tuple[str, ...]] = EXPECTED_REPLIES
) -> str:
    """The token a correction message asks for.

    Raises:
        KeyError: If the step has no vocabulary.
    """
    tokens = accepted_replies(step, vocabulary)
    if not tokens:
        raise KeyError(f"Step {step.value} has no accepted replies")
    return tokens[0]
