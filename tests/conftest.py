"""
Pytest configuration and shared fixtures.

Every test runs against a fresh in-memory document store. Route tests get a
FastAPI TestClient whose ``get_store`` dependency is overridden with it.
"""
import pytest
from fastapi.testclient import TestClient

from database import MemoryStore, get_store
from main import app
from routes.auth import create_access_token

LEARNER_ID = "learner-1"
ADMIN_ID = "admin-1"


def pytest_collection_modifyitems(config, items):
    """Mark tests by directory."""
    for item in items:
        path = str(item.fspath)
        if "unit" in path:
            item.add_marker(pytest.mark.unit)
        elif "api" in path:
            item.add_marker(pytest.mark.api)


def _put(store, collection, doc_id, **fields):
    """Write a document straight into a MemoryStore."""
    doc = dict(fields, id=doc_id)
    store.collections.setdefault(collection, {})[doc_id] = doc
    return doc


@pytest.fixture
def put():
    return _put


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def learner_headers():
    return {"Authorization": f"Bearer {create_access_token(LEARNER_ID, 'learner@example.com')}"}


@pytest.fixture
def admin_headers(store):
    _put(store, "users", ADMIN_ID, email="admin@example.com", displayName="Admin", role="admin")
    return {"Authorization": f"Bearer {create_access_token(ADMIN_ID, 'admin@example.com')}"}


@pytest.fixture
def catalog(store):
    """Two modules, three lessons and a question of each type."""
    _put(store, "modules", "mod-adv", title="Advanced Chains", description="Chaining prompts",
        level="advanced", tags=["chains"], createdAt="2025-01-01T00:00:00+00:00")
    _put(store, "modules", "mod-beg", title="Intro to Prompting", description="Basics of prompting",
        level="beginner", tags=["fundamentals"], createdAt="2025-01-02T00:00:00+00:00")

    _put(store, "lessons", "les-1", moduleId="mod-beg", title="Prompt Foundations", content="<p>body</p>",
        description="What a prompt is", level="beginner", tags=["fundamentals"], published=True,
        order=1, createdAt="2025-01-03T00:00:00+00:00")
    _put(store, "lessons", "les-2", moduleId="mod-beg", title="Zero-shot Prompting", content="<p>body</p>",
        description="Asking without examples", level="beginner", tags=["zero-shot"], published=True,
        order=2, createdAt="2025-01-04T00:00:00+00:00")
    _put(store, "lessons", "les-3", moduleId="mod-adv", title="Prompt Chaining", content="<p>body</p>",
        description="Multi-step prompts", level="advanced", tags=["chains"], published=False,
        order=1, createdAt="2025-01-05T00:00:00+00:00")

    _put(store, "questions", "q-mcq", lessonId="les-1", type="mcq", prompt="Which prompt is clearer?",
        choices=[{"id": "A", "text": "Write a blog"}, {"id": "B", "text": "Write a 300-word post"}],
        answerKey=["b"], explanation="Specific instructions lead to better output", points=1,
        createdAt="2025-01-03T00:00:01+00:00")
    _put(store, "questions", "q-short", lessonId="les-1", type="short", prompt="Name the technique",
        choices=[], answerKey=["few-shot prompting"], explanation="Examples guide the model", points=1,
        createdAt="2025-01-03T00:00:02+00:00")
    _put(store, "questions", "q-nokey", lessonId="les-1", type="code", prompt="Write a prompt",
        choices=[], answerKey=[], explanation="Anything goes", points=1,
        createdAt="2025-01-03T00:00:03+00:00")
    return store
