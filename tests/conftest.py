import fakeredis
import httpx
import pytest
from fastapi.testclient import TestClient

from app.dependencies import get_codec, get_scheduler, get_store
from app.main import app
from app.services.dispatch import DispatchClient
from app.services.signature import SignatureCodec
from app.services.workflow import WorkflowClient
from app.storage.repo import TaskStore

from .fakes import SECRET, WEBHOOK_URL


@pytest.fixture
def redis_server():
    return fakeredis.FakeServer()


@pytest.fixture
def redis_client(redis_server):
    return fakeredis.FakeRedis(server=redis_server, decode_responses=True)


@pytest.fixture
def store(redis_client):
    return TaskStore(redis_client, reference_min_length=10, outcome_min_length=5)


@pytest.fixture
def codec():
    return SignatureCodec(SECRET)


@pytest.fixture
def pending_task(store):
    return store.create("Buy our amazing product now!", "Make it more professional")


@pytest.fixture
def processing_task(store, pending_task):
    return store.mark_processing(pending_task.id)


@pytest.fixture
def scheduled():
    return []


@pytest.fixture
def client(store, codec, scheduled):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_codec] = lambda: codec
    app.dependency_overrides[get_scheduler] = lambda: scheduled.append
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def make_dispatcher(store, codec, sleeps):
    """Build a DispatchClient talking to a fake engine; backoff sleeps are recorded."""

    def build(engine, tries=3, backoff_seconds=30):
        workflow = WorkflowClient(
            codec,
            webhook_url=WEBHOOK_URL,
            app_url="http://api.test",
            timeout=5,
            transport=httpx.MockTransport(engine),
        )
        return DispatchClient(store, workflow, tries=tries, backoff_seconds=backoff_seconds, sleep=sleeps.append)

    return build
