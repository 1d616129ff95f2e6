"""Pytest configuration and shared fixtures.

Tests run against a file-backed SQLite database under tmp_path, so that
worker threads get real, separate connections. Set TEST_DATABASE_URL to
run against another database (e.g. PostgreSQL) instead.
"""

import os
import threading
from typing import Any, Dict, List

import pytest
from pydantic import BaseModel

from dualcontrol.core.config import Settings
from dualcontrol.core.workflow import ExecutionError, WorkflowEngine
from dualcontrol.db.base import Base
from dualcontrol.db.session import create_db_engine, create_session_factory, init_db
from dualcontrol.handlers import ActionHandler, ExecutionResult, HandlerMetadata, create_default_registry


class NotePayload(BaseModel):
    text: str
    fail: bool = False


class RecordingHandler(ActionHandler):
    """Test double that records every execute call."""

    action_type = "record_note"
    metadata = HandlerMetadata(
        name="Record Note",
        description="Test handler that records executions",
        category="Testing",
    )
    payload_model = NotePayload

    def __init__(self):
        self.calls: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def execute(self, db, payload):
        data = self.parse(payload)
        with self._lock:
            self.calls.append(payload)
        if data.fail:
            raise ExecutionError("Note rejected", cause="note_rejected", action_type=self.action_type)
        return ExecutionResult(resource_type="note", resource_id=None, data={"text": data.text})


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at an isolated test database."""
    return Settings(
        _env_file=None,
        database_url=os.environ.get("TEST_DATABASE_URL", f"sqlite:///{tmp_path / 'test.db'}"),
        log_dir=str(tmp_path / "logs"),
        file_logging=False,
        seed_default_users=False,
    )


@pytest.fixture
def db_engine(settings):
    engine = create_db_engine(settings)
    init_db(engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return create_session_factory(db_engine)


@pytest.fixture
def db_session(session_factory):
    """A plain session; commit explicitly when the engine must see the data."""
    session = session_factory()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def recording_handler():
    return RecordingHandler()


@pytest.fixture
def registry(recording_handler):
    registry = create_default_registry()
    registry.register(recording_handler)
    return registry


@pytest.fixture
def workflow_engine(session_factory, registry):
    return WorkflowEngine(session_factory, registry)
