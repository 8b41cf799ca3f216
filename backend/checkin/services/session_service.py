# /checkin/services/session_service.py

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from checkin.config.settings import Settings, settings
from checkin.models.api import CheckinSubmission
from checkin.models.flow import FlowDefinition
from checkin.models.session import Attachment, MessageOrigin, SessionSnapshot
from checkin.services.flow_store import FlowStore, flow_store
from checkin.workflows.engine import CheckinSession, CompletionHandler
from checkin.workflows.errors import FlowNotFoundError, SessionNotFoundError
from checkin.workflows.listener import TranscriptListener
from checkin.workflows.pacing import PacingConfig, no_delay, real_delay

logger = logging.getLogger(__name__)


class HostedSession:
    """A live CheckinSession plus what the HTTP surface needs to report on it."""

    def __init__(self, session: CheckinSession, listener: TranscriptListener, flow_id: Optional[str]):
        self.session = session
        self.listener = listener
        self.flow_id = flow_id
        self.last_activity = datetime.utcnow()

    def touch(self):
        self.last_activity = datetime.utcnow()

    def expired(self, minutes: int) -> bool:
        return datetime.utcnow() > self.last_activity + timedelta(minutes=minutes)


class SubmissionLog:
    """Default completion handler: keeps finished check-ins in memory."""

    def __init__(self):
        self.submissions: List[CheckinSubmission] = []

    def handler_for(self, hosted: HostedSession) -> CompletionHandler:
        async def record(answers: Dict[str, str], attachments: List[Any]) -> CheckinSubmission:
            submission = CheckinSubmission(
                session_id=hosted.session.session_id,
                flow_id=hosted.flow_id,
                recipient_name=hosted.session.recipient_name,
                answers=answers,
                attachments=attachments,
            )
            self.submissions.append(submission)
            logger.info(f"Stored check-in submission for session {submission.session_id}")
            return submission
        return record


class SessionService:
    """
    Hosts check-in sessions for clients that talk to the engine over HTTP.

    Each call runs the session until it next waits for input and reports the
    messages emitted meanwhile. Unless server-side pacing is on, messages are
    returned at once with a typing hint so the client can animate them.
    """

    def __init__(self, store: FlowStore, config: Settings, submission_log: Optional[SubmissionLog] = None):
        self.store = store
        self.config = config
        self.pacing = PacingConfig.from_settings(config)
        self.submission_log = submission_log or SubmissionLog()
        self.sessions: Dict[str, HostedSession] = {}
        logger.info(f"SessionService initialized with {config.session_timeout_minutes}min timeout")

    async def start_session(
        self,
        recipient_name: str,
        flow_id: Optional[str] = None,
        owner_id: Optional[str] = None,
    ) -> HostedSession:
        """
        Start a conversation on a specific flow, or on the owner's active flow.

        Raises:
            FlowNotFoundError: when the flow is missing or the owner has no active flow
            FlowValidationError: when the stored flow is not runnable
        """
        self.purge_expired()
        if flow_id:
            definition = await self.store.get_flow(flow_id)
        else:
            definition = await self.store.get_active_flow(owner_id)
            if definition is None:
                raise FlowNotFoundError(f"active:{owner_id}")

        listener = TranscriptListener()
        session = CheckinSession(definition, recipient_name, listener=listener, **self._session_options())
        hosted = self._host(session, listener, definition)
        await session.start()
        return hosted

    async def restore_session(self, flow_id: str, recipient_name: str, snapshot: SessionSnapshot) -> HostedSession:
        """
        Resume an interrupted conversation from a snapshot under a new session id.

        Raises:
            FlowNotFoundError: when the flow no longer exists
            SessionStateError: when the snapshot does not fit the flow
        """
        self.purge_expired()
        definition = await self.store.get_flow(flow_id)
        listener = TranscriptListener()
        session = await CheckinSession.restore(
            definition, recipient_name, snapshot, listener=listener, **self._session_options()
        )
        return self._host(session, listener, definition)

    def _session_options(self) -> Dict[str, Any]:
        return {
            "pacing": self.pacing,
            "delay": real_delay if self.config.server_side_pacing else no_delay,
            "max_attachments": self.config.max_attachments,
        }

    def _host(self, session: CheckinSession, listener: TranscriptListener, definition: FlowDefinition) -> HostedSession:
        hosted = HostedSession(session, listener, definition.id)
        self.sessions[session.session_id] = hosted
        return hosted

    def get(self, session_id: str) -> HostedSession:
        hosted = self.sessions.get(session_id)
        if hosted is None or hosted.session.is_closed:
            raise SessionNotFoundError(session_id)
        if hosted.expired(self.config.session_timeout_minutes):
            logger.info(f"Session {session_id} expired after {self.config.session_timeout_minutes}min idle")
            self.discard(session_id)
            raise SessionNotFoundError(session_id)
        hosted.touch()
        return hosted

    async def submit_answer(self, session_id: str, text: str) -> bool:
        return await self.get(session_id).session.submit_answer(text)

    def add_attachment(self, session_id: str, attachment: Attachment) -> bool:
        return self.get(session_id).session.add_attachment(attachment)

    def remove_attachment(self, session_id: str, index: int) -> bool:
        return self.get(session_id).session.remove_attachment(index)

    async def submit_files(self, session_id: str) -> bool:
        return await self.get(session_id).session.submit_files()

    async def submit_multi_input(self, session_id: str, values: Dict[str, str]) -> bool:
        return await self.get(session_id).session.submit_multi_input(values)

    async def complete(self, session_id: str) -> CheckinSubmission:
        """
        Hand a finished session to the submission log and discard it.
        A failing handler leaves the session in place so the client can retry.
        """
        hosted = self.get(session_id)
        submission = await hosted.session.complete(self.submission_log.handler_for(hosted))
        self.discard(session_id)
        return submission

    def snapshot(self, session_id: str) -> SessionSnapshot:
        return self.get(session_id).session.snapshot()

    def discard(self, session_id: str) -> None:
        hosted = self.sessions.pop(session_id, None)
        if hosted is not None:
            hosted.session.close()

    def purge_expired(self) -> int:
        expired = [
            sid for sid, hosted in self.sessions.items()
            if hosted.expired(self.config.session_timeout_minutes)
        ]
        for sid in expired:
            self.discard(sid)
        if expired:
            logger.info(f"Discarded {len(expired)} idle check-in session(s)")
        return len(expired)

    def state_payload(self, hosted: HostedSession) -> Dict[str, Any]:
        """New messages since the last report, pending input and completion flag."""
        messages = []
        for message in hosted.listener.drain():
            item = message.model_dump(mode="json")
            if message.origin == MessageOrigin.BOT:
                item["typing_ms"] = self.pacing.typing_ms(message.text, has_image=bool(message.image_url))
            messages.append(item)

        pending = hosted.session.pending_input()
        return {
            "session_id": hosted.session.session_id,
            "messages": messages,
            "pending_input": pending.model_dump(mode="json") if pending else None,
            "attachments": len(hosted.session.attachments),
            "completed": hosted.session.is_complete,
        }


session_service = SessionService(flow_store, settings)


async def get_session_service() -> SessionService:
    return session_service
