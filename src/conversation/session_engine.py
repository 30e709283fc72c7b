"""
Per-correspondent session engine: the dialogue state machine.

Given one inbound event and the correspondent's stored Session, decides
the next Session and the messages to send. Stages run in a fixed order
and any of them may end processing:

1. Filtering        : status broadcasts and group chats are dropped
2. Override gate    : while the operator has the thread, only 'resume' counts
3. Override engage  : an operator message hands the thread to the operator
4. Cooldown gate    : a finished or deferred dialogue stays quiet until expiry
5. Echo suppression : the automation's own sends are not user input
6. Reply validation : unmatched replies are corrected, three strikes reset
7. Script advance   : send the step's line and move to its successor

The engine does no I/O. It commits the new Session to the SessionStore
and returns the messages; delivering them is the caller's job.

Usage:
    engine = SessionEngine(SessionStore())
    messages = engine.handle_event("255617513064@s.whatsapp.net", InboundText(text="hi"))
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Mapping, Optional

from src.config import DialogueConfig, OperatorConfig, settings
from src.conversation.session_store import SessionStore
from src.dialogue.script import SCRIPT, ScriptEntry, StepAction, lookup, validate_script
from src.dialogue.vocabulary import EXPECTED_REPLIES, accepted_replies, first_accepted, is_accepted
from src.logging_context import get_correspondent_logger
from src.prompts.notices import (
    OPERATOR_RESUME_NOTICE,
    OPERATOR_TAKEOVER_NOTICE,
    REORIENTATION_MESSAGE,
    build_correction_prompt,
)
from src.schemas.event_schema import InboundEvent, OperatorInterrupt, OutboundMessage
from src.schemas.session_schema import ENTRY_STEP, Branch, Session, Step
from src.utils import is_one_to_one, normalize_reply

logger = get_correspondent_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionEngine:
    """
    Deterministic state machine over per-correspondent Sessions.

    The script table is validated on construction, so an incomplete
    table fails at startup rather than in the middle of a conversation.
    """

    def __init__(
        self,
        store: SessionStore,
        dialogue: Optional[DialogueConfig] = None,
        operator: Optional[OperatorConfig] = None,
        clock: Callable[[], datetime] = _utcnow,
        script: Mapping[Step, ScriptEntry] = SCRIPT,
        vocabulary: Mapping[Step, tuple[str, ...]] = EXPECTED_REPLIES,
    ) -> None:
        validate_script(script, vocabulary)
        self._store = store
        self._dialogue = dialogue or settings.dialogue
        self._operator = operator or settings.operator
        self._clock = clock
        self._script = script
        self._vocabulary = vocabulary
        self._cooldown = timedelta(seconds=self._dialogue.cooldown_seconds)
        self._resume_command = normalize_reply(self._dialogue.resume_command)

    @property
    def store(self) -> SessionStore:
        return self._store

    def handle_event(self, correspondent_id: str, event: InboundEvent) -> list[OutboundMessage]:
        """
        Process one inbound event for one correspondent.

        Args:
            correspondent_id: Stable id of the one-to-one thread.
            event: The message seen on the thread, or an operator interrupt.

        Returns:
            Messages to deliver to the correspondent, in order. Empty when
            the event is ignored.

        Raises:
            ScriptConfigurationError: If the script has no line for the
                session's step. This is a configuration defect.
        """
        if not is_one_to_one(correspondent_id):
            logger.debug("Ignoring event from %s (group or status)", correspondent_id)
            return []

        session = self._store.get(correspondent_id)
        from_operator = isinstance(event, OperatorInterrupt) or event.from_operator
        text = None if isinstance(event, OperatorInterrupt) else event.text

        if session.operator_override_active:
            if from_operator and text is not None and normalize_reply(text) == self._resume_command:
                session.operator_override_active = False
                self._store.put(correspondent_id, session)
                logger.info("Automation resumed for %s", correspondent_id)
                return [OutboundMessage(correspondent_id=correspondent_id, text=OPERATOR_RESUME_NOTICE)]
            logger.debug("Automation paused for %s, waiting for operator to resume", correspondent_id)
            return []

        if from_operator:
            session.operator_override_active = True
            self._store.put(correspondent_id, session)
            logger.info("Operator took over %s", correspondent_id)
            return [OutboundMessage(correspondent_id=correspondent_id, text=OPERATOR_TAKEOVER_NOTICE)]

        if text is None:
            logger.debug("Ignoring non-text message from %s", correspondent_id)
            return []

        now = self._clock()
        if session.cooldown_until is not None:
            if session.is_cooling_down(now):
                logger.debug(
                    "%s on cooldown until %s", correspondent_id, session.cooldown_until.isoformat()
                )
                return []
            session.cooldown_until = None
            session.reset_cycle()
            self._store.put(correspondent_id, session)
            logger.info("Cooldown expired for %s, starting fresh", correspondent_id)

        if event.from_me:
            logger.debug("Skipping automation echo for %s", correspondent_id)
            return []

        token = normalize_reply(text)
        if session.awaiting_reply and accepted_replies(session.step, self._vocabulary):
            if not is_accepted(session.step, token, self._vocabulary):
                expected = first_accepted(session.step, self._vocabulary)
                return self._reject_reply(correspondent_id, session, expected)
            session.invalid_reply_count = 0

        return self._advance(correspondent_id, session, token, now)

    def _reject_reply(
        self, correspondent_id: str, session: Session, expected: str
    ) -> list[OutboundMessage]:
        session.invalid_reply_count += 1
        if session.invalid_reply_count >= self._dialogue.max_invalid_replies:
            text = REORIENTATION_MESSAGE
            session.step = ENTRY_STEP
            session.branch = Branch.UNSET
            session.invalid_reply_count = 0
            logger.info("Too many unmatched replies from %s, back to the start", correspondent_id)
        else:
            text = build_correction_prompt(expected)
            logger.debug(
                "Unmatched reply %d/%d at step %d",
                session.invalid_reply_count, self._dialogue.max_invalid_replies, session.step,
            )
        session.awaiting_reply = True
        self._store.put(correspondent_id, session)
        return [OutboundMessage(correspondent_id=correspondent_id, text=text)]

    def _advance(
        self, correspondent_id: str, session: Session, token: str, now: datetime
    ) -> list[OutboundMessage]:
        old_step = session.step
        line = lookup(session.step, session.branch, token, self._script)

        if line.select_branch is not None:
            if session.branch is Branch.UNSET:
                session.branch = line.select_branch
            else:
                logger.warning(
                    "Branch already '%s' for %s, ignoring '%s'",
                    session.branch.value, correspondent_id, line.select_branch.value,
                )

        if line.action is StepAction.COMPLETE_CYCLE:
            session.cooldown_until = now + self._cooldown
            session.step = line.next_step
            session.branch = Branch.UNSET
            session.invalid_reply_count = 0
            logger.info(
                "Dialogue complete for %s, cooldown until %s",
                correspondent_id, session.cooldown_until.isoformat(),
            )
        elif line.action is StepAction.DEFER_TO_OWNER:
            session.cooldown_until = now + self._cooldown
            session.step = line.next_step
            logger.info(
                "%s asked for %s, cooldown until %s",
                correspondent_id, self._operator.owner_name, session.cooldown_until.isoformat(),
            )
        else:
            session.step = line.next_step

        session.awaiting_reply = True
        self._store.put(correspondent_id, session)
        logger.debug("Step %d -> %d for %s", old_step, session.step, correspondent_id)
        return [
            OutboundMessage(correspondent_id=correspondent_id, text=message)
            for message in line.messages
        ]
