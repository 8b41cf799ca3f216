# /checkin/services/flow_store.py

import asyncio
import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from checkin.config import strings
from checkin.models.flow import FlowDefinition, FlowTheme
from checkin.workflows.definitions import default_checkin_steps
from checkin.workflows.errors import FlowNotFoundError
from checkin.workflows.validator import ensure_valid

logger = logging.getLogger(__name__)

# Fields an owner may change through update_flow
UPDATABLE_FIELDS = ("name", "description", "steps", "theme", "header_image_url")


class FlowStore:
    """
    Storage contract for check-in flow definitions.

    Records are saved whole; there is no partial-write or multi-editor
    coordination. Sessions only ever read from a store.
    """

    async def list_flows(self, owner_id: str) -> List[FlowDefinition]:
        raise NotImplementedError

    async def get_flow(self, flow_id: str) -> FlowDefinition:
        raise NotImplementedError

    async def get_active_flow(self, owner_id: str) -> Optional[FlowDefinition]:
        raise NotImplementedError

    async def create_flow(self, owner_id: str, name: Optional[str] = None, from_template: bool = True) -> FlowDefinition:
        raise NotImplementedError

    async def duplicate_flow(self, flow_id: str) -> FlowDefinition:
        raise NotImplementedError

    async def update_flow(self, flow_id: str, **updates: Any) -> FlowDefinition:
        raise NotImplementedError

    async def activate_flow(self, flow_id: str) -> None:
        raise NotImplementedError

    async def deactivate_flow(self, flow_id: str) -> None:
        raise NotImplementedError

    async def delete_flow(self, flow_id: str) -> None:
        raise NotImplementedError


class InMemoryFlowStore(FlowStore):
    """Process-local FlowStore. Every write replaces the whole record."""

    def __init__(self):
        self._flows: Dict[str, FlowDefinition] = {}
        self._lock = asyncio.Lock()
        logger.info("InMemoryFlowStore initialized.")

    async def list_flows(self, owner_id: str) -> List[FlowDefinition]:
        """Owner's flows, newest first."""
        flows = [f for f in self._flows.values() if f.owner_id == owner_id]
        return sorted(flows, key=lambda f: f.created_at, reverse=True)

    async def get_flow(self, flow_id: str) -> FlowDefinition:
        flow = self._flows.get(flow_id)
        if flow is None:
            raise FlowNotFoundError(flow_id)
        return flow

    async def get_active_flow(self, owner_id: str) -> Optional[FlowDefinition]:
        for flow in await self.list_flows(owner_id):
            if flow.is_active:
                return flow
        return None

    async def save(self, definition: FlowDefinition) -> FlowDefinition:
        """Insert or replace a complete definition, assigning an id when missing."""
        ensure_valid(definition)
        async with self._lock:
            if not definition.id:
                definition = definition.model_copy(update={"id": str(uuid.uuid4())})
            self._flows[definition.id] = definition
        return definition

    async def create_flow(self, owner_id: str, name: Optional[str] = None, from_template: bool = True) -> FlowDefinition:
        """New inactive flow, pre-filled with the default script unless `from_template` is False."""
        if not name:
            name = strings.TEMPLATE_FLOW_NAME if from_template else strings.EMPTY_FLOW_NAME
        definition = FlowDefinition(
            owner_id=owner_id,
            name=name,
            steps=default_checkin_steps() if from_template else [],
            theme=FlowTheme(),
            is_active=False,
        )
        definition = await self.save(definition)
        logger.info(f"Created flow {definition.id} '{name}' for owner {owner_id} (template={from_template})")
        return definition

    async def duplicate_flow(self, flow_id: str) -> FlowDefinition:
        original = await self.get_flow(flow_id)
        now = datetime.utcnow()
        copy = original.model_copy(
            deep=True,
            update={
                "id": None,
                "name": f"{original.name}{strings.DUPLICATE_SUFFIX}",
                "is_active": False,
                "created_at": now,
                "updated_at": now,
            },
        )
        copy = await self.save(copy)
        logger.info(f"Duplicated flow {flow_id} as {copy.id}")
        return copy

    async def update_flow(self, flow_id: str, **updates: Any) -> FlowDefinition:
        """
        Apply owner edits and save the whole record.

        Raises:
            ValueError: for fields that cannot be edited this way
            FlowValidationError: when the edited definition is invalid
        """
        unknown = set(updates) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        current = await self.get_flow(flow_id)
        data = current.model_dump()
        data.update(updates)
        data["updated_at"] = datetime.utcnow()
        updated = FlowDefinition.model_validate(data)
        updated = await self.save(updated)
        logger.info(f"Updated flow {flow_id}: {', '.join(sorted(updates)) or 'no fields'}")
        return updated

    async def activate_flow(self, flow_id: str) -> None:
        """Make this the owner's only active flow."""
        target = await self.get_flow(flow_id)
        async with self._lock:
            for other_id, flow in list(self._flows.items()):
                if flow.owner_id == target.owner_id and flow.is_active and other_id != flow_id:
                    self._flows[other_id] = flow.model_copy(update={"is_active": False})
            self._flows[flow_id] = target.model_copy(update={"is_active": True})
        logger.info(f"Activated flow {flow_id} for owner {target.owner_id}")

    async def deactivate_flow(self, flow_id: str) -> None:
        target = await self.get_flow(flow_id)
        async with self._lock:
            self._flows[flow_id] = target.model_copy(update={"is_active": False})

    async def delete_flow(self, flow_id: str) -> None:
        async with self._lock:
            if self._flows.pop(flow_id, None) is None:
                raise FlowNotFoundError(flow_id)
        logger.info(f"Deleted flow {flow_id}")


# Globally accessible instance
flow_store = InMemoryFlowStore()


async def get_flow_store() -> FlowStore:
    return flow_store


async def seed_default_flow(store: FlowStore, owner_id: str) -> Optional[FlowDefinition]:
    """Give an owner with no flows an active copy of the default script."""
    if await store.list_flows(owner_id):
        return None
    definition = await store.create_flow(owner_id)
    await store.activate_flow(definition.id)
    logger.info(f"Seeded default check-in flow {definition.id} for owner {owner_id}")
    return await store.get_flow(definition.id)
