"""Tests for the script and vocabulary tables."""

import pytest

from src.dialogue.script import (
    DEFAULT_KEY,
    SCRIPT,
    ScriptConfigurationError,
    ScriptEntry,
    ScriptKey,
    ScriptLine,
    StepAction,
    lookup,
    validate_script,
)
from src.dialogue.vocabulary import (
    EXPECTED_REPLIES,
    accepted_replies,
    first_accepted,
    is_accepted,
)
from src.schemas.session_schema import Branch, Step


class TestScriptCompleteness:
    def test_default_script_is_complete(self):
        validate_script()  # should not raise

    def test_every_step_has_an_entry(self):
        assert set(SCRIPT) == set(Step)

    def test_missing_step_rejected(self):
        broken = {k: v for k, v in SCRIPT.items() if k != Step.PRICING}
        with pytest.raises(ScriptConfigurationError, match="step 8"):
            validate_script(broken)

    def test_missing_branch_line_rejected(self):
        broken = dict(SCRIPT)
        broken[Step.VALUE] = ScriptEntry(
            ScriptKey.BRANCH,
            {"business": SCRIPT[Step.VALUE].lines["business"]},
        )
        with pytest.raises(ScriptConfigurationError, match="fun"):
            validate_script(broken)

    def test_missing_token_line_rejected(self):
        broken = dict(SCRIPT)
        lines = dict(SCRIPT[Step.INTRO_CHOICE].lines)
        del lines["wait"]
        broken[Step.INTRO_CHOICE] = ScriptEntry(ScriptKey.TOKEN, lines)
        with pytest.raises(ScriptConfigurationError, match="wait"):
            validate_script(broken)

    def test_token_keyed_step_needs_vocabulary(self):
        vocabulary = {k: v for k, v in EXPECTED_REPLIES.items() if k != Step.TRACK_CHOICE}
        with pytest.raises(ScriptConfigurationError, match="no vocabulary"):
            validate_script(SCRIPT, vocabulary)

    def test_empty_message_rejected(self):
        broken = dict(SCRIPT)
        broken[Step.NAME_ORIGIN] = ScriptEntry(
            ScriptKey.NONE, {DEFAULT_KEY: ScriptLine(("  ",), Step.TRACK_PROMPT)}
        )
        with pytest.raises(ScriptConfigurationError, match="empty message"):
            validate_script(broken)

    def test_branch_selection_outside_token_step_rejected(self):
        broken = dict(SCRIPT)
        broken[Step.NAME_ORIGIN] = ScriptEntry(
            ScriptKey.NONE,
            {DEFAULT_KEY: ScriptLine(("hi",), Step.TRACK_PROMPT, select_branch=Branch.FUN)},
        )
        with pytest.raises(ScriptConfigurationError, match="selects a branch"):
            validate_script(broken)


class TestLookup:
    def test_greeting_sends_two_messages(self):
        line = lookup(Step.GREETING, Branch.UNSET, "hi")
        assert len(line.messages) == 2
        assert line.next_step == Step.INTRO_CHOICE
        assert line.action == StepAction.AWAIT_REPLY

    def test_intro_yes_and_yep_share_a_line(self):
        assert lookup(Step.INTRO_CHOICE, Branch.UNSET, "yes") == lookup(
            Step.INTRO_CHOICE, Branch.UNSET, "yep"
        )

    def test_intro_wait_defers(self):
        line = lookup(Step.INTRO_CHOICE, Branch.UNSET, "wait")
        assert line.action == StepAction.DEFER_TO_OWNER
        assert line.next_step == Step.INTRO_CHOICE

    def test_track_choice_selects_branch(self):
        assert lookup(Step.TRACK_CHOICE, Branch.UNSET, "business").select_branch == Branch.BUSINESS
        assert lookup(Step.TRACK_CHOICE, Branch.UNSET, "fun").select_branch == Branch.FUN

    def test_branch_keyed_step_ignores_token(self):
        line = lookup(Step.PRICING, Branch.BUSINESS, "anything")
        assert "20,000 TSH" in line.messages[0]
        assert "5,000 TSH" in lookup(Step.PRICING, Branch.FUN, "yes").messages[0]

    def test_farewell_completes_cycle(self):
        line = lookup(Step.FAREWELL, Branch.UNSET, "bye")
        assert line.action == StepAction.COMPLETE_CYCLE
        assert line.next_step == Step.GREETING

    def test_unknown_token_raises(self):
        with pytest.raises(ScriptConfigurationError, match="token 'maybe'"):
            lookup(Step.TRACK_CHOICE, Branch.UNSET, "maybe")

    def test_unset_branch_raises(self):
        with pytest.raises(ScriptConfigurationError, match="branch 'unset'"):
            lookup(Step.VISION, Branch.UNSET, "yes")

    def test_tracks_advance_one_step_at_a_time(self):
        for step in range(Step.TRACK_OVERVIEW, Step.FAREWELL):
            for branch in (Branch.BUSINESS, Branch.FUN):
                assert lookup(Step(step), branch, "yes").next_step == step + 1


class TestVocabulary:
    def test_bookend_steps_accept_any_text(self):
        assert accepted_replies(Step.GREETING) == ()
        assert accepted_replies(Step.FAREWELL) == ()

    def test_every_middle_step_has_tokens(self):
        for step in range(Step.INTRO_CHOICE, Step.FAREWELL):
            assert accepted_replies(Step(step))

    def test_is_accepted_normalizes(self):
        assert is_accepted(Step.TRACK_CHOICE, " Business ")
        assert not is_accepted(Step.TRACK_CHOICE, "busy")

    def test_first_accepted(self):
        assert first_accepted(Step.INTRO_CHOICE) == "yes"
        assert first_accepted(Step.TRACK_CHOICE) == "business"

    def test_first_accepted_without_vocabulary_raises(self):
        with pytest.raises(KeyError):
            first_accepted(Step.FAREWELL)

    def test_sign_up_also_accepts_thanks(self):
        assert is_accepted(Step.SIGN_UP, "thanks")
        assert is_accepted(Step.SIGN_UP, "yes")
