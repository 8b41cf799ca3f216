# backend/tests/unit/test_definitions.py
import pytest

from checkin.models.flow import FlowDefinition, StepType
from checkin.workflows.definitions import default_checkin_steps
from checkin.workflows.validator import validate_flow


def test_default_script_is_valid():
    definition = FlowDefinition(name="Padrão", steps=default_checkin_steps())
    result = validate_flow(definition)
    assert result["is_valid"], result["message"]


def test_default_script_opens_and_closes_with_messages():
    steps = default_checkin_steps()
    assert steps[0].id == "intro"
    assert steps[-1].id == "fim"
    assert steps[0].type == StepType.MESSAGE
    assert steps[-1].type == StepType.MESSAGE


def test_default_script_returns_fresh_steps():
    assert default_checkin_steps() is not default_checkin_steps()


@pytest.mark.asyncio
async def test_default_script_runs_to_completion(make_session, listener):
    """Answer every prompt of the default script with its first option or a number."""
    from checkin.workflows.definitions import DEFAULT_CHECKIN_FLOW

    session = make_session(DEFAULT_CHECKIN_FLOW)
    await session.start()

    while not session.is_complete:
        pending = session.pending_input()
        if pending.type == StepType.FILE:
            await session.submit_files()
        elif pending.options:
            assert await session.submit_answer(pending.options[0])
        else:
            assert await session.submit_answer("1")

    assert listener.bot_texts[-1].startswith("Em até 48 horas")
    assert session.answers["agua"] == "1 litro"
    assert "Bora tentar bater pelo menos 2 litros" in " ".join(listener.bot_texts)
