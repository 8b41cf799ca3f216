# /checkin/workflows/conditions.py

"""
Pure condition evaluation for check-in flows.

Conditions compare a collected answer against an authored value. The rules
are lenient on purpose and existing flows depend on them:
- numeric operators read the leading number of each side ("2 litros" -> 2)
- anything that does not start with a number reads as 0
- the literal answer "Nenhum" reads as 0
- "between" takes "min,max" and is inclusive on both ends
- an unknown operator evaluates to True
"""

import math
import re
from typing import Mapping

from checkin.config import strings
from checkin.models.flow import Condition

NUMERIC_OPERATORS = (">=", "<=", ">", "<")
KNOWN_OPERATORS = ("==", "!=", "between") + NUMERIC_OPERATORS

_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_leading_number(text: str) -> float:
    """
    Read the numeric prefix of `text`, returning NaN when there is none.
    Mirrors the browser's parseFloat.
    """
    if text is None:
        return math.nan
    stripped = text.lstrip()
    for prefix, value in (("+Infinity", math.inf), ("-Infinity", -math.inf), ("Infinity", math.inf)):
        if stripped.startswith(prefix):
            return value
    match = _LEADING_NUMBER.match(stripped)
    if not match:
        return math.nan
    return float(match.group(1))


def to_number(text: str) -> float:
    """Leading number of `text`, or 0 when it has none."""
    value = parse_leading_number(text)
    if math.isnan(value):
        return 0.0
    return value


def parse_bound(text: str) -> float:
    """Strict numeric parse of a 'between' bound. Blank is 0, garbage is NaN."""
    stripped = (text or "").strip()
    if not stripped:
        return 0.0
    try:
        return float(stripped)
    except ValueError:
        return math.nan


def parse_range(value: str):
    parts = value.split(",")
    low = parse_bound(parts[0])
    high = parse_bound(parts[1]) if len(parts) > 1 else math.nan
    return low, high


def evaluate(condition: Condition, answers: Mapping[str, str]) -> bool:
    """
    Evaluate `condition` against the answers collected so far.

    Never raises for missing fields or non-numeric answers. Comparisons
    against NaN are False, so a malformed 'between' value never matches.
    """
    field_value = answers.get(condition.field) or ""
    cond_value = condition.value

    operator = condition.operator
    if operator == "==":
        return field_value == cond_value
    if operator == "!=":
        return field_value != cond_value

    effective = 0.0 if field_value == strings.NONE_ANSWER else to_number(field_value)
    cond_number = to_number(cond_value)

    if operator == ">=":
        return effective >= cond_number
    if operator == "<=":
        return effective <= cond_number
    if operator == ">":
        return effective > cond_number
    if operator == "<":
        return effective < cond_number
    if operator == "between":
        low, high = parse_range(cond_value)
        return low <= effective <= high

    # Unknown operators fail open
    return True


def first_match(conditional_messages, answers: Mapping[str, str]):
    """Return the first entry whose condition holds, or None."""
    for entry in conditional_messages:
        if evaluate(entry.condition, answers):
            return entry
    return None
