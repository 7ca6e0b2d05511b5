"""Shared fixtures for the notification test-suite."""

from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

_DB_DIR = Path(tempfile.mkdtemp(prefix="waffl-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_DIR / 'app.db'}"
os.environ["SECRET_KEY"] = "test-secret"
for _name in (
    "PUSH_ENDPOINT_URL",
    "PUSH_ENDPOINT_API_KEY",
    "FCM_PROJECT_ID",
    "FCM_ACCESS_TOKEN",
):
    os.environ.pop(_name, None)

from waffl.config import reset_settings_cache  # noqa: E402
from waffl.domain.entities import PushSendResult, SessionContext  # noqa: E402
from waffl.infrastructure.database import (  # noqa: E402
    build_engine,
    build_session_factory,
    initialize_database,
)
from waffl.infrastructure.notifications import NotificationChangeFeed  # noqa: E402


class InlineScheduler:
    """Background task hook that runs scheduled work immediately."""

    def __init__(self) -> None:
        self.calls = []

    def __call__(self, fn, *args, **kwargs) -> None:
        self.calls.append((fn, args, kwargs))
        fn(*args, **kwargs)


class RecordingEndpoint:
    """Push endpoint double remembering every request it receives."""

    def __init__(self, error: Exception | None = None) -> None:
        self.requests = []
        self.error = error

    def send(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return PushSendResult(success=True, message_id=f"msg-{len(self.requests)}")


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def fresh_settings():
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'notifications.db'}")
    initialize_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def feed() -> NotificationChangeFeed:
    return NotificationChangeFeed()


@pytest.fixture
def scheduler() -> InlineScheduler:
    return InlineScheduler()


@pytest.fixture
def endpoint() -> RecordingEndpoint:
    return RecordingEndpoint()


@pytest.fixture
def make_endpoint():
    return RecordingEndpoint


@pytest.fixture
def alice() -> SessionContext:
    return SessionContext(
        user_id="alice", display_name="Alice", profile_image_url="https://img/alice.png"
    )


@pytest.fixture
def bob() -> SessionContext:
    return SessionContext(user_id="bob", display_name="Bob")
