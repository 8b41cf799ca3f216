# backend/tests/unit/test_conditions.py
import math

import pytest

from checkin.models.flow import Condition, ConditionalMessage
from checkin.workflows.conditions import evaluate, first_match, parse_leading_number, parse_range, to_number


def cond(field, operator, value):
    return Condition(field=field, operator=operator, value=value)


# --- Numeric coercion ---

@pytest.mark.parametrize("text,expected", [
    ("72.5", 72.5),
    ("2 litros", 2.0),
    ("  3,5 litros", 3.0),
    ("-1.5kg", -1.5),
    (".5", 0.5),
    ("1e3", 1000.0),
    ("Infinity", math.inf),
])
def test_parse_leading_number_reads_numeric_prefix(text, expected):
    assert parse_leading_number(text) == expected


@pytest.mark.parametrize("text", ["", "Nenhum", "abc 12", "(10) Vida tranquila!"])
def test_parse_leading_number_is_nan_without_prefix(text):
    assert math.isnan(parse_leading_number(text))


def test_to_number_treats_non_numeric_as_zero():
    assert to_number("Sim") == 0.0
    assert to_number("5 ou mais") == 5.0


def test_parse_range_missing_max_is_nan():
    low, high = parse_range("6")
    assert low == 6.0
    assert math.isnan(high)


def test_parse_range_rejects_garbage_bounds():
    low, high = parse_range("a,8")
    assert math.isnan(low)
    assert high == 8.0


# --- evaluate ---

def test_nenhum_counts_as_zero():
    """'Nenhum' is never above a positive threshold and always below one."""
    assert evaluate(cond("peso", ">=", "80"), {"peso": "Nenhum"}) is False
    assert evaluate(cond("peso", "<", "80"), {"peso": "Nenhum"}) is True


def test_between_is_inclusive():
    rule = cond("sono", "between", "6,8")
    assert evaluate(rule, {"sono": "7"}) is True
    assert evaluate(rule, {"sono": "6"}) is True
    assert evaluate(rule, {"sono": "8"}) is True
    assert evaluate(rule, {"sono": "9"}) is False


def test_between_without_max_never_matches():
    assert evaluate(cond("sono", "between", "6"), {"sono": "7"}) is False


def test_equality_compares_raw_strings():
    assert evaluate(cond("agua", "==", "2 litros"), {"agua": "2 litros"}) is True
    assert evaluate(cond("agua", "==", "2"), {"agua": "2 litros"}) is False
    assert evaluate(cond("ref_livre", "!=", "0"), {"ref_livre": "1-2"}) is True


def test_missing_field_reads_as_empty():
    assert evaluate(cond("cardio", "!=", "Nenhum"), {}) is True
    assert evaluate(cond("cardio", "<=", "0"), {}) is True
    assert evaluate(cond("cardio", ">", "0"), {}) is False


def test_numeric_operators_use_leading_numbers():
    answers = {"agua": "3,5 litros"}
    assert evaluate(cond("agua", ">=", "3 litros"), answers) is True
    assert evaluate(cond("agua", ">", "3"), answers) is False
    assert evaluate(cond("agua", "<=", "3"), answers) is True


def test_number_condition_value_is_stringified():
    rule = Condition(field="treino", operator=">=", value=5)
    assert rule.value == "5"
    assert evaluate(rule, {"treino": "5"}) is True


def test_unknown_operator_matches():
    assert evaluate(cond("peso", "contains", "80"), {"peso": "70"}) is True


# --- first_match ---

def test_first_match_returns_first_true_entry_only():
    entries = [
        ConditionalMessage(condition=cond("sono", "<=", "8"), messages=["primeiro"]),
        ConditionalMessage(condition=cond("sono", ">=", "5"), messages=["segundo"]),
    ]
    match = first_match(entries, {"sono": "6"})
    assert match.messages == ["primeiro"]


def test_first_match_none_when_nothing_matches():
    entries = [ConditionalMessage(condition=cond("sono", ">=", "7"), messages=["ok"])]
    assert first_match(entries, {"sono": "5"}) is None
    assert first_match([], {"sono": "5"}) is None
