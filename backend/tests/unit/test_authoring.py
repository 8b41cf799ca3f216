# backend/tests/unit/test_authoring.py
import pytest

from checkin.models.flow import FlowDefinition, FlowStep, ImagePosition, StepType
from checkin.workflows import authoring
from checkin.workflows.errors import FlowValidationError


@pytest.fixture
def definition():
    return FlowDefinition(name="Check-in", steps=[
        FlowStep(id="a", type="text", field="a", question="A?"),
        FlowStep(id="b", type="choice", field="b", options=["1", "2"]),
        FlowStep(id="c", type="message", messages=["fim"]),
    ])


def ids(definition):
    return [step.id for step in definition.steps]


def test_add_step_appends_blank_question(definition):
    updated = authoring.add_step(definition)

    new = updated.steps[-1]
    assert new.id.startswith("step_")
    assert new.type == StepType.TEXT
    assert new.question == "Nova pergunta"
    assert ids(definition) == ["a", "b", "c"]


def test_add_step_generates_unique_ids(definition):
    updated = authoring.add_step(authoring.add_step(definition))
    assert len(set(ids(updated))) == len(updated.steps)


def test_add_step_rejects_clashing_id(definition):
    with pytest.raises(FlowValidationError) as exc:
        authoring.add_step(definition, FlowStep(id="b"))
    assert exc.value.error_code == "DUPLICATE_STEP_ID"


def test_update_step_accepts_either_key_style(definition):
    updated = authoring.update_step(definition, "a", {
        "imageUrl": "https://example.com/x.png",
        "image_position": "above",
        "required": True,
    })

    step = updated.steps[0]
    assert step.image_url == "https://example.com/x.png"
    assert step.image_position == ImagePosition.ABOVE
    assert step.required is True
    assert step.question == "A?"
    assert definition.steps[0].required is False


def test_update_step_keeps_id(definition):
    updated = authoring.update_step(definition, "a", {"id": "zzz", "question": "Novo?"})
    assert ids(updated) == ["a", "b", "c"]
    assert updated.steps[0].question == "Novo?"


def test_update_step_validates_result(definition):
    with pytest.raises(FlowValidationError) as exc:
        authoring.update_step(definition, "b", {"options": []})
    assert exc.value.error_code == "CHOICE_WITHOUT_OPTIONS"


def test_update_unknown_step(definition):
    with pytest.raises(FlowValidationError) as exc:
        authoring.update_step(definition, "nope", {"question": "?"})
    assert exc.value.error_code == "UNKNOWN_STEP"


def test_remove_step(definition):
    updated = authoring.remove_step(definition, "b")
    assert ids(updated) == ["a", "c"]


def test_removing_every_step_leaves_runnable_flow(definition):
    for step_id in ids(definition):
        definition = authoring.remove_step(definition, step_id)
    assert definition.steps == []


@pytest.mark.parametrize("target,expected", [
    (0, ["c", "a", "b"]),
    (1, ["a", "c", "b"]),
    (2, ["a", "b", "c"]),
])
def test_move_step(definition, target, expected):
    assert ids(authoring.move_step(definition, "c", target)) == expected


def test_move_step_out_of_range(definition):
    with pytest.raises(FlowValidationError) as exc:
        authoring.move_step(definition, "a", 3)
    assert exc.value.error_code == "INVALID_POSITION"


def test_update_theme(definition):
    updated = authoring.update_theme(definition, {"accent_color": "#ff0000"})
    assert updated.theme.accent_color == "#ff0000"
    assert updated.theme.button_bg == definition.theme.button_bg


def test_update_theme_rejects_unknown_key(definition):
    with pytest.raises(FlowValidationError) as exc:
        authoring.update_theme(definition, {"font": "Comic Sans"})
    assert exc.value.error_code == "UNKNOWN_THEME_KEY"


def test_rename_flow(definition):
    assert authoring.rename_flow(definition, "  Semanal ").name == "Semanal"
    with pytest.raises(FlowValidationError):
        authoring.rename_flow(definition, "   ")
