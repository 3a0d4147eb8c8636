"""Shared test fixtures for the wishlist client test suite."""

import pytest
import responses

from clients.memory_storage import MemoryStorage
from core.app import build_app
from core.config import ClientConfig
from fake_backend import FakeBackend


# =============================================================================
# TEST CONSTANTS
# =============================================================================

BASE_URL = "http://wishlist.test"
PASSWORD = "secret-password"


# =============================================================================
# TEST DOUBLES
# =============================================================================


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ManualTasks:
    """TaskRunner stand-in that queues work until run_all() is called."""

    def __init__(self):
        self.queued = []

    def submit(self, fn, *args, **kwargs):
        self.queued.append((fn, args, kwargs))

    def run_all(self) -> None:
        queued, self.queued = self.queued, []
        for fn, args, kwargs in queued:
            fn(*args, **kwargs)

    def shutdown(self, wait: bool = True) -> None:
        self.queued.clear()


# =============================================================================
# CONFIG AND BACKEND
# =============================================================================


@pytest.fixture
def config() -> ClientConfig:
    """Fast-failing config pointed at the fake backend."""
    return ClientConfig(
        api_base_url=BASE_URL,
        request_timeout_seconds=2,
        auth_ready_timeout_seconds=0.2,
        background_workers=2,
    )


@pytest.fixture
def backend():
    """Stateful fake API, active for the duration of the test."""
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        fake = FakeBackend(BASE_URL)
        fake.register(rsps)
        yield fake


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def manual_tasks() -> ManualTasks:
    return ManualTasks()


# =============================================================================
# USERS
# =============================================================================


@pytest.fixture
def alice(backend) -> dict:
    return backend.seed_user("Alice", username="alice", password=PASSWORD)


@pytest.fixture
def bob(backend) -> dict:
    return backend.seed_user("Bob", username="bob", password=PASSWORD)


@pytest.fixture
def carol(backend) -> dict:
    return backend.seed_user("Carol", username="carol", password=PASSWORD)


# =============================================================================
# APPS
# =============================================================================


@pytest.fixture
def make_app(config, backend):
    """Factory for WishlistApp instances sharing one fake backend.

    Each app has its own storage, session and cache, like separate browsers.
    """
    apps = []

    def _make(storage=None):
        app = build_app(config, storage or MemoryStorage())
        apps.append(app)
        return app

    yield _make

    for app in apps:
        app.close()


@pytest.fixture
def sign_in():
    """Log an app in as a seeded user."""
    def _sign_in(app, user: dict):
        return app.auth.login(user["email"], PASSWORD)
    return _sign_in


@pytest.fixture
def app(make_app):
    """An app with no session (restore resolved to unauthenticated)."""
    instance = make_app()
    instance.start()
    return instance


@pytest.fixture
def alice_app(make_app, sign_in, alice):
    instance = make_app()
    sign_in(instance, alice)
    return instance


@pytest.fixture
def bob_app(make_app, sign_in, bob):
    instance = make_app()
    sign_in(instance, bob)
    return instance


@pytest.fixture
def carol_app(make_app, sign_in, carol):
    instance = make_app()
    sign_in(instance, carol)
    return instance
