# backend/tests/integration/test_flows_api.py
import pytest

from checkin.workflows.definitions import DEFAULT_CHECKIN_FLOW

FLOWS = "/api/v1/flows"
CHECKIN = "/api/v1/checkin"

STEPS = [
    {"id": "nome", "type": "text", "field": "nome", "question": "Nome?"},
    {"id": "agua", "type": "choice", "field": "agua", "options": ["1 litro", "2 litros"],
     "conditionalMessages": [{"condition": {"field": "agua", "operator": "==", "value": "1 litro"},
                              "messages": ["Beba mais água!"]}]},
]


@pytest.fixture
def created(test_client):
    response = test_client.post(FLOWS, json={"owner_id": "coach-1", "name": "Semanal"})
    assert response.status_code == 201
    return response.json()["data"]["flow"]


def test_create_flow_from_template(created):
    assert created["id"]
    assert created["name"] == "Semanal"
    assert created["owner_id"] == "coach-1"
    assert created["is_active"] is False
    assert len(created["steps"]) == len(DEFAULT_CHECKIN_FLOW)


def test_create_empty_flow_with_default_name(test_client):
    flow = test_client.post(FLOWS, json={"owner_id": "coach-1", "from_template": False}).json()["data"]["flow"]
    assert flow["name"] == "Novo Check-in"
    assert flow["steps"] == []


def test_create_flow_requires_owner(test_client):
    assert test_client.post(FLOWS, json={"name": "Sem dono"}).status_code == 422


def test_list_flows_by_owner(test_client, created):
    test_client.post(FLOWS, json={"owner_id": "coach-2", "from_template": False})

    flows = test_client.get(FLOWS, params={"owner_id": "coach-1"}).json()["data"]["flows"]
    assert [f["id"] for f in flows] == [created["id"]]
    assert test_client.get(FLOWS).status_code == 422


def test_get_flow(test_client, created):
    response = test_client.get(f"{FLOWS}/{created['id']}")
    assert response.status_code == 200
    assert response.json()["data"]["flow"]["name"] == "Semanal"
    assert test_client.get(f"{FLOWS}/missing").status_code == 404


def test_update_name_and_steps(test_client, created):
    response = test_client.put(f"{FLOWS}/{created['id']}", json={"name": "Quinzenal", "steps": STEPS})
    assert response.status_code == 200

    flow = response.json()["data"]["flow"]
    assert flow["name"] == "Quinzenal"
    assert [s["id"] for s in flow["steps"]] == ["nome", "agua"]
    assert flow["steps"][1]["conditionalMessages"][0]["messages"] == ["Beba mais água!"]
    assert flow["description"] == created["description"]


def test_update_with_duplicate_step_ids_is_rejected(test_client, created):
    steps = [{"id": "a", "type": "text"}, {"id": "a", "type": "text"}]
    response = test_client.put(f"{FLOWS}/{created['id']}", json={"steps": steps})

    assert response.status_code == 422
    assert response.json()["detail"]["error_code"] == "DUPLICATE_STEP_ID"
    stored = test_client.get(f"{FLOWS}/{created['id']}").json()["data"]["flow"]
    assert len(stored["steps"]) == len(DEFAULT_CHECKIN_FLOW)


def test_update_with_colliding_multi_input_field_is_rejected(test_client, created):
    steps = [
        {"id": "cintura", "type": "text", "field": "cintura"},
        {"id": "medidas", "type": "multi-input", "inputs": [{"field": "cintura", "label": "Cintura"}]},
    ]
    response = test_client.put(f"{FLOWS}/{created['id']}", json={"steps": steps})
    assert response.status_code == 422
    assert response.json()["detail"]["error_code"] == "MULTI_INPUT_FIELD_COLLISION"


def test_update_with_malformed_step_is_rejected(test_client, created):
    response = test_client.put(f"{FLOWS}/{created['id']}", json={"steps": [{"id": "a", "type": "video"}]})
    assert response.status_code == 422
    assert response.json()["detail"]["error_code"] == "INVALID_STEP"


def test_update_theme_merges_keys(test_client, created):
    response = test_client.put(f"{FLOWS}/{created['id']}", json={"theme": {"button_bg": "#000000"}})
    assert response.status_code == 200

    theme = response.json()["data"]["flow"]["theme"]
    assert theme["button_bg"] == "#000000"
    assert theme["button_text"] == created["theme"]["button_text"]


def test_update_theme_rejects_unknown_key(test_client, created):
    response = test_client.put(f"{FLOWS}/{created['id']}", json={"theme": {"sparkles": "yes"}})
    assert response.status_code == 422
    assert response.json()["detail"]["error_code"] == "UNKNOWN_THEME_KEY"


def test_update_missing_flow(test_client):
    assert test_client.put(f"{FLOWS}/missing", json={"name": "X"}).status_code == 404


def test_duplicate_flow(test_client, created):
    response = test_client.post(f"{FLOWS}/{created['id']}/duplicate")
    assert response.status_code == 201

    copy = response.json()["data"]["flow"]
    assert copy["id"] != created["id"]
    assert copy["name"] == "Semanal (cópia)"
    assert copy["is_active"] is False
    assert test_client.post(f"{FLOWS}/missing/duplicate").status_code == 404


def test_activated_flow_serves_new_sessions(test_client, created):
    test_client.put(f"{FLOWS}/{created['id']}", json={"steps": STEPS})
    activated = test_client.post(f"{FLOWS}/{created['id']}/activate").json()["data"]["flow"]
    assert activated["is_active"] is True

    response = test_client.post(f"{CHECKIN}/sessions", json={"owner_id": "coach-1", "recipient_name": "Ana"})
    assert response.status_code == 201
    data = response.json()["data"]
    assert [m["text"] for m in data["messages"]] == ["Olá, Ana! 😊", "Nome?"]

    deactivated = test_client.post(f"{FLOWS}/{created['id']}/deactivate").json()["data"]["flow"]
    assert deactivated["is_active"] is False
    response = test_client.post(f"{CHECKIN}/sessions", json={"owner_id": "coach-1", "recipient_name": "Ana"})
    assert response.status_code == 404


def test_activating_one_flow_deactivates_the_other(test_client, created):
    other = test_client.post(FLOWS, json={"owner_id": "coach-1", "name": "Outro"}).json()["data"]["flow"]
    test_client.post(f"{FLOWS}/{created['id']}/activate")
    test_client.post(f"{FLOWS}/{other['id']}/activate")

    flows = test_client.get(FLOWS, params={"owner_id": "coach-1"}).json()["data"]["flows"]
    assert {f["id"]: f["is_active"] for f in flows} == {created["id"]: False, other["id"]: True}


def test_delete_flow(test_client, created):
    assert test_client.delete(f"{FLOWS}/{created['id']}").status_code == 200
    assert test_client.get(f"{FLOWS}/{created['id']}").status_code == 404
    assert test_client.delete(f"{FLOWS}/{created['id']}").status_code == 404


def test_validate_draft_reports_every_problem(test_client):
    steps = [
        {"id": "a", "type": "choice"},
        {"id": "b", "type": "text", "field": "cintura"},
        {"id": "c", "type": "multi-input", "inputs": [{"field": "cintura", "label": "Cintura"}]},
    ]
    errors = test_client.post(f"{FLOWS}/validate", json={"steps": steps}).json()["data"]["errors"]
    assert [e["error_code"] for e in errors] == ["CHOICE_WITHOUT_OPTIONS", "MULTI_INPUT_FIELD_COLLISION"]


def test_validate_clean_draft(test_client):
    errors = test_client.post(f"{FLOWS}/validate", json={"steps": STEPS}).json()["data"]["errors"]
    assert errors == []


def test_validate_malformed_draft(test_client):
    response = test_client.post(f"{FLOWS}/validate", json={"steps": [{"type": "text"}]})
    assert response.status_code == 422
    assert response.json()["detail"]["error_code"] == "INVALID_STEP"
