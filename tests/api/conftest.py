"""Fixtures for API tests."""
import pytest
from fastapi.testclient import TestClient
from welltrack.api.deps import get_db
from welltrack.config import Settings
from welltrack.main import create_app
from welltrack.worker.components import build_components
from tests.factories.analysis_factory import FakeInferenceClient, RecordingPersistence


def build_settings(**overrides) -> Settings:
    values = {
        "DATABASE_URL": "sqlite://",
        "ANALYSIS_POLL_INTERVAL": 0.01,
        "SHUTDOWN_DRAIN_TIMEOUT": 2.0,
        "RESULT_BACKEND": "memory",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def make_client(db_session, session_factory):
    """
    Build FastAPI test clients around injected pipeline components.

    Returns a factory accepting ``inference_client``, ``persistence`` and
    settings overrides. Each client runs the app lifespan, so the worker
    is started unless ``ANALYSIS_WORKER_ENABLED=False`` is passed.
    """
    clients = []

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    def factory(inference_client=None, persistence=None, **setting_overrides):
        settings = build_settings(**setting_overrides)
        components = build_components(
            settings,
            session_factory,
            inference_client=inference_client or FakeInferenceClient(),
            persistence=persistence or RecordingPersistence(),
        )
        app = create_app(settings=settings, components=components)
        app.dependency_overrides[get_db] = override_get_db

        test_client = TestClient(app)
        test_client.__enter__()
        clients.append(test_client)
        test_client.components = components
        return test_client

    yield factory

    for test_client in clients:
        test_client.__exit__(None, None, None)


@pytest.fixture
def client(make_client):
    """Test client with a running worker and default fakes."""
    return make_client()


@pytest.fixture
def idle_client(make_client):
    """Test client whose worker never starts, so queued tasks stay queued."""
    return make_client(ANALYSIS_WORKER_ENABLED=False)
