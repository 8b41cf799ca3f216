# /checkin/routes/flows.py

import logging
from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import ValidationError

from checkin.config.settings import settings
from checkin.models.api import APIResponse, CreateFlowRequest, UpdateFlowRequest, ValidateFlowRequest
from checkin.models.flow import FlowDefinition
from checkin.services.flow_store import FlowStore, get_flow_store
from checkin.workflows.authoring import update_theme
from checkin.workflows.errors import FlowNotFoundError, FlowValidationError
from checkin.workflows.validator import collect_errors

# Owner-facing endpoints for authoring check-in flows: list, create, edit,
# duplicate, activate and delete.

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/flows", tags=["Flows"])


def _reply(message: str, data: dict) -> APIResponse:
    return APIResponse(success=True, message=message, data=data, version=settings.api_version)


def _flow_data(definition: FlowDefinition) -> dict:
    return {"flow": definition.model_dump(mode="json", by_alias=True)}


async def _load(store: FlowStore, flow_id: str) -> FlowDefinition:
    try:
        return await store.get_flow(flow_id)
    except FlowNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Flow not found")


def _invalid(e: FlowValidationError) -> HTTPException:
    logger.info(f"Rejected flow edit: {e.error_code} {e.message}")
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={"error_code": e.error_code, "message": e.message},
    )


@router.get("", response_model=APIResponse)
async def list_flows(owner_id: str = Query(..., min_length=1), store: FlowStore = Depends(get_flow_store)):
    """Owner's flows, newest first."""
    flows = await store.list_flows(owner_id)
    return _reply(f"{len(flows)} flow(s)", {"flows": [f.model_dump(mode="json", by_alias=True) for f in flows]})


@router.post("", response_model=APIResponse, status_code=status.HTTP_201_CREATED)
async def create_flow(body: CreateFlowRequest, store: FlowStore = Depends(get_flow_store)):
    definition = await store.create_flow(body.owner_id, body.name, from_template=body.from_template)
    return _reply("Flow created", _flow_data(definition))


@router.get("/{flow_id}", response_model=APIResponse)
async def get_flow(flow_id: str, store: FlowStore = Depends(get_flow_store)):
    return _reply("Flow", _flow_data(await _load(store, flow_id)))


@router.post("/validate", response_model=APIResponse)
async def validate_draft(body: ValidateFlowRequest):
    """Every authoring problem in an unsaved list of steps, for editor feedback."""
    try:
        definition = FlowDefinition(steps=body.steps)
    except ValidationError as e:
        raise _invalid(FlowValidationError("INVALID_STEP", f"{e.error_count()} invalid field(s) in the submitted steps"))
    errors = [{"error_code": code, "message": message} for code, message in collect_errors(definition)]
    return _reply("Flow checked", {"errors": errors})


@router.put("/{flow_id}", response_model=APIResponse)
async def update_flow(flow_id: str, body: UpdateFlowRequest, store: FlowStore = Depends(get_flow_store)):
    """Replace the given fields. Theme keys are merged into the stored theme."""
    current = await _load(store, flow_id)
    updates = body.model_dump(exclude_unset=True, exclude_none=True)
    try:
        if "theme" in updates:
            updates["theme"] = update_theme(current, updates["theme"]).theme
        definition = await store.update_flow(flow_id, **updates)
    except FlowValidationError as e:
        raise _invalid(e)
    except ValidationError as e:
        raise _invalid(FlowValidationError("INVALID_STEP", f"{e.error_count()} invalid field(s) in the submitted steps"))
    return _reply("Flow updated", _flow_data(definition))


@router.post("/{flow_id}/duplicate", response_model=APIResponse, status_code=status.HTTP_201_CREATED)
async def duplicate_flow(flow_id: str, store: FlowStore = Depends(get_flow_store)):
    await _load(store, flow_id)
    return _reply("Flow duplicated", _flow_data(await store.duplicate_flow(flow_id)))


@router.post("/{flow_id}/activate", response_model=APIResponse)
async def activate_flow(flow_id: str, store: FlowStore = Depends(get_flow_store)):
    """Make this the owner's only active flow."""
    await _load(store, flow_id)
    await store.activate_flow(flow_id)
    return _reply("Flow activated", _flow_data(await store.get_flow(flow_id)))


@router.post("/{flow_id}/deactivate", response_model=APIResponse)
async def deactivate_flow(flow_id: str, store: FlowStore = Depends(get_flow_store)):
    await _load(store, flow_id)
    await store.deactivate_flow(flow_id)
    return _reply("Flow deactivated", _flow_data(await store.get_flow(flow_id)))


@router.delete("/{flow_id}", response_model=APIResponse)
async def delete_flow(flow_id: str, store: FlowStore = Depends(get_flow_store)):
    try:
        await store.delete_flow(flow_id)
    except FlowNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Flow not found")
    return _reply("Flow deleted", {"flow_id": flow_id})
