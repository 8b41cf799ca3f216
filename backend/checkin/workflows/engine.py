# /checkin/workflows/engine.py

"""
Check-in conversation interpreter.

A CheckinSession walks the ordered steps of one FlowDefinition for one
recipient:
- greets the recipient by name
- skips steps whose showIf condition is false, without emitting anything
- emits each shown step's question and messages with simulated typing
- waits for a text/number/choice answer, photos, or a multi-input form
- records the answer, emits the first matching conditional follow-up
- advances until the last step, then signals completion

The session only ever moves forward. It owns its answers and attachments;
the definition it was built from is never mutated.
"""

import logging
import uuid
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

from checkin.config import strings
from checkin.models.flow import FlowDefinition, FlowStep, ImagePosition, StepType
from checkin.models.session import ChatMessage, InputRequest, MessageOrigin, SessionSnapshot
from checkin.workflows.conditions import evaluate, first_match
from checkin.workflows.errors import SessionStateError
from checkin.workflows.listener import SessionListener
from checkin.workflows.pacing import Delay, PacingConfig, real_delay
from checkin.workflows.validator import ensure_valid

logger = logging.getLogger(__name__)

CompletionHandler = Callable[[Dict[str, str], List[Any]], Awaitable[Any]]

DEFAULT_MAX_ATTACHMENTS = 4


class SessionState(str, Enum):
    NOT_STARTED = "not_started"
    GREETING = "greeting"
    EMITTING = "emitting"
    AWAITING_INPUT = "awaiting_input"
    COMPLETED = "completed"


class CheckinSession:
    def __init__(
        self,
        definition: FlowDefinition,
        recipient_name: str,
        listener: Optional[SessionListener] = None,
        pacing: Optional[PacingConfig] = None,
        delay: Optional[Delay] = None,
        max_attachments: int = DEFAULT_MAX_ATTACHMENTS,
        session_id: Optional[str] = None,
    ):
        ensure_valid(definition)
        self.definition = definition
        self.steps: List[FlowStep] = list(definition.steps)
        self.recipient_name = recipient_name
        self.listener = listener or SessionListener()
        self.pacing = pacing or PacingConfig()
        self.max_attachments = max_attachments
        self.session_id = session_id or str(uuid.uuid4())

        self.state = SessionState.NOT_STARTED
        self.current_index = -1
        self.answers: Dict[str, str] = {}
        self.attachments: List[Any] = []
        self.transcript: List[ChatMessage] = []

        self._delay = delay or real_delay
        self._message_seq = 0
        self._closed = False

    # ------------------------------------------------------------------ #
    # Introspection
    # ------------------------------------------------------------------ #

    @property
    def is_complete(self) -> bool:
        return self.state == SessionState.COMPLETED

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def current_step(self) -> Optional[FlowStep]:
        if 0 <= self.current_index < len(self.steps):
            return self.steps[self.current_index]
        return None

    def pending_input(self) -> Optional[InputRequest]:
        """The input the session is waiting for, or None."""
        step = self._awaiting_step()
        return self._input_request(step) if step else None

    # ------------------------------------------------------------------ #
    # Caller-facing operations
    # ------------------------------------------------------------------ #

    async def start(self) -> None:
        """Greet the recipient and run until the first step that needs input."""
        if self.state != SessionState.NOT_STARTED:
            raise SessionStateError(f"Session {self.session_id} has already started")

        logger.info(f"Starting check-in session {self.session_id} for flow '{self.definition.name}' ({len(self.steps)} steps)")
        self.state = SessionState.GREETING
        await self._say(strings.GREETING.format(name=self.recipient_name))
        await self._process_from(0)

    async def submit_answer(self, raw: str) -> bool:
        """
        Record a typed or chosen answer for the current step and advance.

        Returns False without changing anything when the session is not
        waiting for this kind of answer or when a required answer is blank.
        """
        step = self._awaiting_step()
        if step is None or step.type in (StepType.FILE, StepType.MULTI_INPUT):
            logger.debug(f"Session {self.session_id}: answer ignored in state {self.state.value}")
            return False

        raw = raw if raw is not None else ""
        if step.required and not raw.strip():
            logger.debug(f"Session {self.session_id}: blank answer rejected for required step '{step.id}'")
            return False

        self.state = SessionState.EMITTING
        await self._echo(raw)
        if step.field:
            self.answers[step.field] = raw
            logger.debug(f"Session {self.session_id}: recorded '{step.field}' on step '{step.id}'")

        await self._advance_after(step)
        return True

    def add_attachment(self, attachment: Any) -> bool:
        """Queue a photo on the current file step. The attachment past the limit is dropped."""
        if self._awaiting_step(StepType.FILE) is None:
            return False
        if len(self.attachments) >= self.max_attachments:
            logger.debug(f"Session {self.session_id}: attachment limit of {self.max_attachments} reached")
            return False
        self.attachments.append(attachment)
        return True

    def remove_attachment(self, index: int) -> bool:
        if self._awaiting_step(StepType.FILE) is None:
            return False
        if not 0 <= index < len(self.attachments):
            return False
        del self.attachments[index]
        return True

    async def submit_files(self) -> bool:
        """Confirm the queued photos (possibly none) and advance."""
        step = self._awaiting_step(StepType.FILE)
        if step is None:
            return False

        count = len(self.attachments)
        if count == 0:
            summary = strings.NO_PHOTOS
        elif count == 1:
            summary = strings.PHOTOS_SENT_SINGULAR.format(count=count)
        else:
            summary = strings.PHOTOS_SENT_PLURAL.format(count=count)

        self.state = SessionState.EMITTING
        await self._echo(summary)
        logger.debug(f"Session {self.session_id}: {count} attachment(s) confirmed on step '{step.id}'")

        await self._advance_after(step)
        return True

    async def submit_multi_input(self, values: Mapping[str, str]) -> bool:
        """
        Record every sub-input of a multi-input step and advance.

        Each sub-input is stored under its own field. When the step itself has
        a field, the combined "Label: value / Label: value" line is stored
        there too.
        """
        step = self._awaiting_step(StepType.MULTI_INPUT)
        if step is None:
            return False

        collected = {}
        for item in step.inputs:
            value = values.get(item.field)
            if value is None or not str(value).strip():
                return False
            collected[item.field] = str(value)

        combined = " / ".join(
            f"{item.label}: {collected[item.field]}{item.unit or ''}" for item in step.inputs
        )

        self.state = SessionState.EMITTING
        await self._echo(combined)
        self.answers.update(collected)
        if step.field:
            self.answers[step.field] = combined

        await self._advance_after(step)
        return True

    async def complete(self, handler: CompletionHandler) -> Any:
        """
        Hand the collected answers and attachments to `handler`.

        Failures of the handler propagate untouched. The session stays
        completed and may be handed off again.
        """
        if self.state != SessionState.COMPLETED:
            raise SessionStateError(f"Session {self.session_id} is not complete")
        return await handler(dict(self.answers), list(self.attachments))

    def close(self) -> None:
        """Dispose of the session. Pending emissions are dropped."""
        self._closed = True

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            step_index=self.current_index,
            answers=dict(self.answers),
            transcript=list(self.transcript),
        )

    @classmethod
    async def restore(
        cls,
        definition: FlowDefinition,
        recipient_name: str,
        snapshot: SessionSnapshot,
        **kwargs,
    ) -> "CheckinSession":
        """
        Rebuild a session from a snapshot and resume where it stopped.

        The saved step's prompt is not emitted again; the listener is simply
        told which input is pending. A snapshot taken before start yields an
        unstarted session.
        """
        session = cls(definition, recipient_name, **kwargs)
        if not -1 <= snapshot.step_index <= len(session.steps):
            raise SessionStateError(
                f"Snapshot step {snapshot.step_index} does not fit flow '{definition.name}'"
            )

        session.answers = dict(snapshot.answers)
        session.transcript = list(snapshot.transcript)
        session._message_seq = len(session.transcript)
        if snapshot.step_index < 0:
            return session

        logger.info(f"Restoring check-in session {session.session_id} at step {snapshot.step_index}")
        if snapshot.step_index >= len(session.steps):
            await session._finish()
            return session

        step = session.steps[snapshot.step_index]
        session.current_index = snapshot.step_index
        if step.requires_input:
            session.state = SessionState.AWAITING_INPUT
            await session.listener.on_awaiting_input(session._input_request(step))
        else:
            await session._process_from(snapshot.step_index + 1)
        return session

    # ------------------------------------------------------------------ #
    # Step processing
    # ------------------------------------------------------------------ #

    async def _process_from(self, index: int) -> None:
        while not self._closed:
            if index >= len(self.steps):
                await self._finish()
                return

            step = self.steps[index]
            if step.show_if is not None and not evaluate(step.show_if, self.answers):
                logger.debug(f"Session {self.session_id}: skipping step '{step.id}'")
                index += 1
                continue

            self.current_index = index
            self.state = SessionState.EMITTING
            await self._emit_step(step)

            if not step.requires_input:
                index += 1
                continue

            if self._closed:
                return
            self.state = SessionState.AWAITING_INPUT
            await self.listener.on_awaiting_input(self._input_request(step))
            return

    async def _emit_step(self, step: FlowStep) -> None:
        image_first = step.image_position == ImagePosition.ABOVE
        if step.image_url and image_first:
            await self._say("", image_url=step.image_url)
        if step.question:
            await self._say(step.question)
        for text in step.messages:
            await self._say(text)
        if step.image_url and not image_first:
            await self._say("", image_url=step.image_url)

    async def _advance_after(self, step: FlowStep) -> None:
        # First matching follow-up only
        match = first_match(step.conditional_messages, self.answers)
        if match is not None:
            for text in match.messages:
                await self._say(text)
        await self._process_from(self.current_index + 1)

    async def _finish(self) -> None:
        if self.state == SessionState.COMPLETED or self._closed:
            return
        self.state = SessionState.COMPLETED
        self.current_index = len(self.steps)
        logger.info(f"Check-in session {self.session_id} completed with {len(self.answers)} answer(s)")
        await self.listener.on_completed(dict(self.answers), list(self.attachments))

    # ------------------------------------------------------------------ #
    # Emission
    # ------------------------------------------------------------------ #

    async def _say(self, text: str, image_url: Optional[str] = None) -> None:
        if self._closed:
            return
        await self.listener.on_typing_start()
        await self._delay(self.pacing.typing_ms(text, has_image=bool(image_url)) / 1000)
        if self._closed:
            return
        await self.listener.on_typing_end()

        message = self._new_message(MessageOrigin.BOT, text, image_url)
        self.transcript.append(message)
        await self.listener.on_bot_message(message)
        await self._delay(self.pacing.settle_ms / 1000)

    async def _echo(self, text: str) -> None:
        message = self._new_message(MessageOrigin.USER, text)
        self.transcript.append(message)
        await self.listener.on_user_message(message)

    def _new_message(self, origin: MessageOrigin, text: str, image_url: Optional[str] = None) -> ChatMessage:
        self._message_seq += 1
        return ChatMessage(
            id=f"{origin.value}-{self._message_seq}",
            origin=origin,
            text=text,
            image_url=image_url,
        )

    def _awaiting_step(self, step_type: Optional[StepType] = None) -> Optional[FlowStep]:
        if self._closed or self.state != SessionState.AWAITING_INPUT:
            return None
        step = self.current_step
        if step is None or (step_type is not None and step.type != step_type):
            return None
        return step

    def _input_request(self, step: FlowStep) -> InputRequest:
        placeholder = step.placeholder
        if placeholder is None and step.type in (StepType.TEXT, StepType.NUMBER):
            placeholder = strings.DEFAULT_INPUT_PLACEHOLDER
        return InputRequest(
            step_id=step.id,
            type=step.type,
            options=list(step.options),
            placeholder=placeholder,
            required=step.required,
            inputs=list(step.inputs),
            max_attachments=self.max_attachments if step.type == StepType.FILE else None,
        )
