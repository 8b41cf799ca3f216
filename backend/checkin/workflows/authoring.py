# /checkin/workflows/authoring.py

"""
Editor operations over a flow definition.

Every function takes a FlowDefinition and returns a new one; the input is
never modified. Step ids stay unique: a new step gets a fresh id and an
explicit clashing id is rejected. Nothing here stops a flow from becoming
empty, since an empty flow is still runnable.
"""

import time
from datetime import datetime
from typing import Any, Dict, Optional

from checkin.config import strings
from checkin.models.flow import FlowDefinition, FlowStep, FlowTheme, StepType
from checkin.workflows.errors import FlowValidationError
from checkin.workflows.validator import ensure_valid


def new_step_id(definition: FlowDefinition) -> str:
    """A `step_<millis>` id not yet used in the definition."""
    taken = {step.id for step in definition.steps}
    stamp = int(time.time() * 1000)
    candidate = f"step_{stamp}"
    while candidate in taken:
        stamp += 1
        candidate = f"step_{stamp}"
    return candidate


def _with_steps(definition: FlowDefinition, steps) -> FlowDefinition:
    return definition.model_copy(update={"steps": list(steps), "updated_at": datetime.utcnow()})


def add_step(definition: FlowDefinition, step: Optional[FlowStep] = None) -> FlowDefinition:
    """Append `step`, or a blank text question when none is given."""
    if step is None:
        step = FlowStep(
            id=new_step_id(definition),
            type=StepType.TEXT,
            question=strings.NEW_STEP_QUESTION,
            messages=[],
        )
    elif definition.step_index(step.id) != -1:
        raise FlowValidationError("DUPLICATE_STEP_ID", f"Step id '{step.id}' is used more than once")
    return _with_steps(definition, [*definition.steps, step])


def update_step(definition: FlowDefinition, step_id: str, changes: Dict[str, Any]) -> FlowDefinition:
    """
    Replace fields of one step. `changes` may use camelCase or snake_case keys
    and is validated like an authored step. The id cannot be changed.
    """
    index = definition.step_index(step_id)
    if index == -1:
        raise FlowValidationError("UNKNOWN_STEP", f"Step '{step_id}' is not in flow '{definition.name}'")

    current = definition.steps[index].model_dump(by_alias=True)
    aliased = {}
    for key, value in changes.items():
        info = FlowStep.model_fields.get(key)
        aliased[(info.alias or key) if info else key] = value
    merged = {**current, **aliased, "id": step_id}
    updated = FlowStep.model_validate(merged)

    steps = list(definition.steps)
    steps[index] = updated
    return ensure_valid(_with_steps(definition, steps))


def remove_step(definition: FlowDefinition, step_id: str) -> FlowDefinition:
    if definition.step_index(step_id) == -1:
        raise FlowValidationError("UNKNOWN_STEP", f"Step '{step_id}' is not in flow '{definition.name}'")
    return _with_steps(definition, [step for step in definition.steps if step.id != step_id])


def move_step(definition: FlowDefinition, step_id: str, new_index: int) -> FlowDefinition:
    """Move one step to `new_index`, shifting the others (drag-and-drop reorder)."""
    old_index = definition.step_index(step_id)
    if old_index == -1:
        raise FlowValidationError("UNKNOWN_STEP", f"Step '{step_id}' is not in flow '{definition.name}'")
    if not 0 <= new_index < len(definition.steps):
        raise FlowValidationError("INVALID_POSITION", f"Position {new_index} is outside the flow")

    steps = list(definition.steps)
    moved = steps.pop(old_index)
    steps.insert(new_index, moved)
    return _with_steps(definition, steps)


def update_theme(definition: FlowDefinition, changes: Dict[str, str]) -> FlowDefinition:
    unknown = set(changes) - set(FlowTheme.model_fields)
    if unknown:
        raise FlowValidationError("UNKNOWN_THEME_KEY", f"Unknown theme keys: {', '.join(sorted(unknown))}")
    theme = definition.theme.model_copy(update=changes)
    return definition.model_copy(update={"theme": theme, "updated_at": datetime.utcnow()})


def rename_flow(definition: FlowDefinition, name: str) -> FlowDefinition:
    if not name or not name.strip():
        raise FlowValidationError("EMPTY_FLOW_NAME", "Flow name cannot be empty")
    return definition.model_copy(update={"name": name.strip(), "updated_at": datetime.utcnow()})
