# /checkin/workflows/validator.py

"""
Pure validation functions for check-in flow definitions.

This module provides deterministic, side-effect-free checks that a flow
definition is safe to hand to a session:
- step ids are present and unique
- choice steps carry options, multi-input steps carry inputs
- multi-input sub-fields never share an answer key with another step
- every condition names a field
- "between" conditions carry a "min,max" numeric range

Unknown operators are not rejected. They evaluate to True at runtime and
authored flows rely on that, so they only produce a warning.
"""

import logging
import math
from typing import Iterable, List, Optional, Tuple, TypedDict

from checkin.models.flow import Condition, FlowDefinition, FlowStep, StepType
from checkin.workflows.conditions import KNOWN_OPERATORS, parse_range
from checkin.workflows.errors import FlowValidationError

logger = logging.getLogger(__name__)


class ValidationResult(TypedDict):
    """Result of a validation check."""
    is_valid: bool
    error_code: Optional[str]
    message: Optional[str]


def _ok() -> ValidationResult:
    return {
        "is_valid": True,
        "error_code": None,
        "message": None
    }


def _fail(error_code: str, message: str) -> ValidationResult:
    return {
        "is_valid": False,
        "error_code": error_code,
        "message": message
    }


def validate_step_ids(steps: Iterable[FlowStep]) -> ValidationResult:
    """
    Validate that every step has a non-empty id and that no id repeats.

    Args:
        steps: The ordered steps of a flow

    Returns:
        ValidationResult with is_valid=True if all ids are usable
    """
    seen = set()
    for position, step in enumerate(steps):
        if not step.id or not step.id.strip():
            return _fail("EMPTY_STEP_ID", f"Step at position {position} has no id")
        if step.id in seen:
            return _fail("DUPLICATE_STEP_ID", f"Step id '{step.id}' is used more than once")
        seen.add(step.id)
    return _ok()


def validate_condition(condition: Condition, step_id: str) -> ValidationResult:
    """
    Validate a showIf or conditional-message condition.

    Args:
        condition: The condition to check
        step_id: Owning step, used in messages

    Returns:
        ValidationResult with is_valid=True if the condition can be evaluated
    """
    if not isinstance(condition.field, str) or not condition.field.strip():
        return _fail("EMPTY_CONDITION_FIELD", f"Condition on step '{step_id}' does not name a field")

    if condition.operator == "between":
        low, high = parse_range(condition.value)
        if math.isnan(low) or math.isnan(high):
            return _fail(
                "INVALID_BETWEEN_RANGE",
                f"Condition on step '{step_id}' needs a 'min,max' range, got '{condition.value}'"
            )

    if condition.operator not in KNOWN_OPERATORS:
        logger.warning(
            f"Condition on step '{step_id}' uses unknown operator '{condition.operator}'; it will always match."
        )

    return _ok()


def validate_step(step: FlowStep) -> ValidationResult:
    """
    Validate the shape of a single step.

    Args:
        step: The step to check

    Returns:
        ValidationResult with is_valid=True if the step can be run
    """
    if step.type == StepType.CHOICE and not step.options:
        return _fail("CHOICE_WITHOUT_OPTIONS", f"Choice step '{step.id}' has no options")

    if step.type == StepType.MULTI_INPUT:
        if not step.inputs:
            return _fail("MULTI_INPUT_WITHOUT_INPUTS", f"Multi-input step '{step.id}' has no inputs")
        sub_fields = [item.field for item in step.inputs]
        if any(not name.strip() for name in sub_fields) or len(set(sub_fields)) != len(sub_fields):
            return _fail("INVALID_MULTI_INPUT_FIELDS", f"Multi-input step '{step.id}' has blank or repeated fields")

    conditions: List[Condition] = []
    if step.show_if is not None:
        conditions.append(step.show_if)
    conditions.extend(entry.condition for entry in step.conditional_messages)

    for condition in conditions:
        result = validate_condition(condition, step.id)
        if not result["is_valid"]:
            return result

    return _ok()


def validate_multi_input_fields(steps: Iterable[FlowStep]) -> ValidationResult:
    """
    Validate that each multi-input sub-field is an answer key of its own,
    shared with no step field and no other multi-input step.

    Args:
        steps: The ordered steps of a flow

    Returns:
        ValidationResult with is_valid=True if every sub-field key is its own
    """
    steps = list(steps)
    owners = {}
    for step in steps:
        if step.field:
            owners.setdefault(step.field, step.id)

    claimed = {}
    for step in steps:
        if step.type != StepType.MULTI_INPUT:
            continue
        for item in step.inputs:
            other = owners.get(item.field)
            if other is None and claimed.get(item.field, step.id) != step.id:
                other = claimed[item.field]
            if other is not None:
                return _fail(
                    "MULTI_INPUT_FIELD_COLLISION",
                    f"Multi-input step '{step.id}' field '{item.field}' is also the answer of step '{other}'"
                )
            claimed[item.field] = step.id
    return _ok()


def validate_flow(definition: FlowDefinition) -> ValidationResult:
    """
    Validate a whole flow definition before a session may start.

    An empty step list is valid: such a session completes right after the
    greeting.

    Args:
        definition: The flow definition to check

    Returns:
        ValidationResult for the first problem found, or is_valid=True
    """
    ids_result = validate_step_ids(definition.steps)
    if not ids_result["is_valid"]:
        return ids_result

    for step in definition.steps:
        step_result = validate_step(step)
        if not step_result["is_valid"]:
            return step_result

    return validate_multi_input_fields(definition.steps)


def collect_errors(definition: FlowDefinition) -> List[Tuple[str, str]]:
    """Every (error_code, message) found in the definition, for editor feedback."""
    errors = []
    ids_result = validate_step_ids(definition.steps)
    if not ids_result["is_valid"]:
        errors.append((ids_result["error_code"], ids_result["message"]))
    for step in definition.steps:
        step_result = validate_step(step)
        if not step_result["is_valid"]:
            errors.append((step_result["error_code"], step_result["message"]))
    fields_result = validate_multi_input_fields(definition.steps)
    if not fields_result["is_valid"]:
        errors.append((fields_result["error_code"], fields_result["message"]))
    return errors


def ensure_valid(definition: FlowDefinition) -> FlowDefinition:
    """Raise FlowValidationError if the definition is not valid, else return it."""
    result = validate_flow(definition)
    if not result["is_valid"]:
        raise FlowValidationError(result["error_code"], result["message"])
    return definition
