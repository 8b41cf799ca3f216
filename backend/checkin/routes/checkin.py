# /checkin/routes/checkin.py

import logging
from fastapi import APIRouter, Depends, HTTPException, status

from checkin.config.settings import settings
from checkin.models.api import APIResponse, AnswerRequest, MultiInputRequest, RestoreSessionRequest, StartSessionRequest
from checkin.models.session import Attachment
from checkin.services.session_service import SessionService, get_session_service
from checkin.utils.logging import bind_session_context
from checkin.workflows.errors import FlowNotFoundError, FlowValidationError, SessionNotFoundError, SessionStateError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/checkin", tags=["Check-in"])


def _reply(message: str, data: dict) -> APIResponse:
    return APIResponse(success=True, message=message, data=data, version=settings.api_version)


def _lookup(service: SessionService, session_id: str):
    try:
        hosted = service.get(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    bind_session_context(session_id, hosted.flow_id)
    return hosted


@router.post("/sessions", response_model=APIResponse, status_code=status.HTTP_201_CREATED)
async def start_session(body: StartSessionRequest, service: SessionService = Depends(get_session_service)):
    """Start a check-in conversation and return the greeting and first prompt."""
    try:
        hosted = await service.start_session(body.recipient_name, flow_id=body.flow_id, owner_id=body.owner_id)
    except FlowNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Flow not found")
    except FlowValidationError as e:
        logger.warning(f"Refusing to start invalid flow: {e.error_code} {e.message}")
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message)
    bind_session_context(hosted.session.session_id, hosted.flow_id)
    return _reply("Session started", service.state_payload(hosted))


@router.post("/sessions/restore", response_model=APIResponse, status_code=status.HTTP_201_CREATED)
async def restore_session(body: RestoreSessionRequest, service: SessionService = Depends(get_session_service)):
    """Resume a conversation from a snapshot. The pending prompt is not repeated."""
    try:
        hosted = await service.restore_session(body.flow_id, body.recipient_name, body.snapshot)
    except FlowNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Flow not found")
    except (FlowValidationError, SessionStateError) as e:
        logger.warning(f"Refusing to restore session on flow {body.flow_id}: {e}")
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    bind_session_context(hosted.session.session_id, hosted.flow_id)
    return _reply("Session restored", service.state_payload(hosted))


@router.post("/sessions/{session_id}/answer", response_model=APIResponse)
async def submit_answer(session_id: str, body: AnswerRequest, service: SessionService = Depends(get_session_service)):
    hosted = _lookup(service, session_id)
    accepted = await service.submit_answer(session_id, body.text)
    return _reply("Answer recorded" if accepted else "Answer not accepted",
                  {**service.state_payload(hosted), "accepted": accepted})


@router.post("/sessions/{session_id}/attachments", response_model=APIResponse)
async def add_attachment(session_id: str, body: Attachment, service: SessionService = Depends(get_session_service)):
    hosted = _lookup(service, session_id)
    accepted = service.add_attachment(session_id, body)
    return _reply("Attachment added" if accepted else "Attachment not accepted",
                  {**service.state_payload(hosted), "accepted": accepted})


@router.delete("/sessions/{session_id}/attachments/{index}", response_model=APIResponse)
async def remove_attachment(session_id: str, index: int, service: SessionService = Depends(get_session_service)):
    hosted = _lookup(service, session_id)
    accepted = service.remove_attachment(session_id, index)
    return _reply("Attachment removed" if accepted else "Attachment not removed",
                  {**service.state_payload(hosted), "accepted": accepted})


@router.post("/sessions/{session_id}/files", response_model=APIResponse)
async def submit_files(session_id: str, service: SessionService = Depends(get_session_service)):
    hosted = _lookup(service, session_id)
    accepted = await service.submit_files(session_id)
    return _reply("Photos confirmed" if accepted else "Photos not accepted",
                  {**service.state_payload(hosted), "accepted": accepted})


@router.post("/sessions/{session_id}/multi-input", response_model=APIResponse)
async def submit_multi_input(session_id: str, body: MultiInputRequest, service: SessionService = Depends(get_session_service)):
    hosted = _lookup(service, session_id)
    accepted = await service.submit_multi_input(session_id, body.values)
    return _reply("Values recorded" if accepted else "Values not accepted",
                  {**service.state_payload(hosted), "accepted": accepted})


@router.post("/sessions/{session_id}/complete", response_model=APIResponse)
async def complete_session(session_id: str, service: SessionService = Depends(get_session_service)):
    """Hand the finished check-in over and close the session."""
    _lookup(service, session_id)
    try:
        submission = await service.complete(session_id)
    except SessionStateError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Check-in is not finished yet")
    except Exception:
        logger.error(f"Submitting check-in for session {session_id} failed.", exc_info=True)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Could not submit check-in, please retry")
    return _reply("Check-in submitted", {"submission": submission.model_dump(mode="json")})


@router.get("/sessions/{session_id}/snapshot", response_model=APIResponse)
async def get_snapshot(session_id: str, service: SessionService = Depends(get_session_service)):
    _lookup(service, session_id)
    snapshot = service.snapshot(session_id)
    return _reply("Snapshot", {"snapshot": snapshot.model_dump(mode="json")})


@router.delete("/sessions/{session_id}", response_model=APIResponse)
async def discard_session(session_id: str, service: SessionService = Depends(get_session_service)):
    _lookup(service, session_id)
    service.discard(session_id)
    return _reply("Session discarded", {"session_id": session_id})
