# In: tests/conftest.py

"""
Pytest configuration and fixtures

Every test gets its own in-memory database and fake AI clients, wired into
the app through dependency_overrides. Nothing leaks between tests.
"""
import copy
import json
import os
import sys
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

# Add the project root to the path so the flat modules import
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import main
from database import Base, make_engine, make_session_factory
from tests.fakes import (
    SAMPLE_DIET_PLAN,
    SAMPLE_PROFILE,
    SAMPLE_WORKOUT_PLAN,
    make_completion,
    make_image_response,
)


@pytest.fixture
def sample_profile():
    return dict(SAMPLE_PROFILE)


@pytest.fixture
def sample_workout_plan():
    return copy.deepcopy(SAMPLE_WORKOUT_PLAN)


@pytest.fixture
def sample_diet_plan():
    return copy.deepcopy(SAMPLE_DIET_PLAN)


@pytest.fixture(scope="function")
def session_factory():
    """Session factory on a fresh in-memory database, configured like the app's."""
    engine = make_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield make_session_factory(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def text_client():
    """Stand-in for AsyncGroq; set chat.completions.create.return_value per test."""
    create = AsyncMock(return_value=make_completion(json.dumps(SAMPLE_WORKOUT_PLAN)))
    return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))


@pytest.fixture
def image_client():
    """Stand-in for AsyncOpenAI; images.generate returns one URL per call."""
    generate = AsyncMock(return_value=make_image_response("https://images.example.com/1.png"))
    return SimpleNamespace(images=SimpleNamespace(generate=generate))


@pytest.fixture
def client(session_factory, text_client, image_client):
    async def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    main.app.dependency_overrides[main.get_db] = override_get_db
    main.app.dependency_overrides[main.get_text_client] = lambda: text_client
    main.app.dependency_overrides[main.get_image_client] = lambda: image_client
    with TestClient(main.app) as test_client:
        yield test_client
    main.app.dependency_overrides.clear()
