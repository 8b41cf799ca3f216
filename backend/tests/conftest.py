import os

import pytest
from fastapi.testclient import TestClient
from dotenv import load_dotenv

# Load environment variables FIRST, before any app imports, so Settings()
# picks up the test configuration.
load_dotenv(dotenv_path=os.path.join(os.path.dirname(os.path.dirname(__file__)), ".env.test"))

# Now it's safe to import the application and its components
from checkin.config.settings import Settings  # noqa: E402
from checkin.main import app  # noqa: E402
from checkin.models.flow import FlowDefinition, FlowStep  # noqa: E402
from checkin.services.flow_store import InMemoryFlowStore, get_flow_store  # noqa: E402
from checkin.services.session_service import SessionService, get_session_service  # noqa: E402
from checkin.workflows.engine import CheckinSession  # noqa: E402
from checkin.workflows.listener import SessionListener  # noqa: E402


class RecordingListener(SessionListener):
    """Keeps every session event, in order, as simple tuples."""

    def __init__(self):
        self.events = []

    async def on_typing_start(self):
        self.events.append(("typing_start",))

    async def on_typing_end(self):
        self.events.append(("typing_end",))

    async def on_bot_message(self, message):
        self.events.append(("bot", message.text))

    async def on_user_message(self, message):
        self.events.append(("user", message.text))

    async def on_awaiting_input(self, request):
        self.events.append(("awaiting", request.step_id))

    async def on_completed(self, answers, attachments):
        self.events.append(("completed", answers, attachments))

    @property
    def bot_texts(self):
        return [e[1] for e in self.events if e[0] == "bot"]

    @property
    def completions(self):
        return [e for e in self.events if e[0] == "completed"]


class FakeDelay:
    """Stands in for asyncio.sleep; records requested pauses in seconds."""

    def __init__(self):
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def listener():
    return RecordingListener()


@pytest.fixture
def fake_delay():
    return FakeDelay()


@pytest.fixture
def make_session(listener, fake_delay):
    """
    Factory for sessions over a list of step dicts, wired to the recording
    listener and the fake delay.
    """
    def _make(steps, recipient_name="Ana", **kwargs):
        definition = FlowDefinition(
            name="Teste",
            steps=[FlowStep.model_validate(s) for s in steps],
        )
        kwargs.setdefault("listener", listener)
        kwargs.setdefault("delay", fake_delay)
        return CheckinSession(definition, recipient_name, **kwargs)
    return _make


@pytest.fixture
def flow_store():
    return InMemoryFlowStore()


@pytest.fixture
def session_service(flow_store):
    return SessionService(flow_store, Settings(environment="test", server_side_pacing=False))


@pytest.fixture(scope="function")
def test_client(session_service, flow_store):
    """
    Provides a TestClient for API integration tests, backed by a fresh store
    and session service.
    """
    app.dependency_overrides[get_session_service] = lambda: session_service
    app.dependency_overrides[get_flow_store] = lambda: flow_store
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def make_listener():
    """Fresh recording listeners for tests that run more than one session."""
    return RecordingListener
