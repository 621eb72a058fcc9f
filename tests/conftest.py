"""
Shared fixtures.

Every test gets its own SQLite file under tmp_path, a cleared settings cache
and a reset rate limiter. Apps are built through ``make_client(**env)`` so a
test can change configuration before startup; the real notifier is swapped
for FakeNotifier once startup has run.
"""

from contextlib import ExitStack

import pytest
from fastapi.testclient import TestClient

from main import create_app
from marketing_site.core.config import get_settings
from marketing_site.core.security import limiter

_ISOLATED_ENV = (
    "ALLOWED_ORIGINS",
    "CONTACT_BCC",
    "CONTACT_CC",
    "GDPR_REQUEST_RETENTION_DAYS",
    "MAX_BODY_BYTES",
    "RATE_LIMIT_MAX",
    "RETENTION_DAYS",
    "SMTP_HOST",
    "SMTP_PASS",
    "SMTP_PORT",
    "SMTP_USER",
)


class FakeNotifier:
    """Records notifications; raises ``fail_with`` after recording when set."""

    def __init__(self, fail_with=None):
        self.fail_with = fail_with
        self.contact_calls = []
        self.gdpr_calls = []

    async def notify_contact(self, payload, record_id):
        self.contact_calls.append((payload, record_id))
        if self.fail_with is not None:
            raise self.fail_with

    async def notify_gdpr(self, payload, record_id):
        self.gdpr_calls.append((payload, record_id))
        if self.fail_with is not None:
            raise self.fail_with


@pytest.fixture
def app_env(monkeypatch, tmp_path):
    for name in _ISOLATED_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'site.db'}")
    monkeypatch.setenv("PURGE_INTERVAL_HOURS", "0")
    monkeypatch.setenv("SMTP_VERIFY_ON_STARTUP", "false")
    get_settings.cache_clear()
    limiter.reset()
    yield monkeypatch
    get_settings.cache_clear()


@pytest.fixture
def make_client(app_env):
    with ExitStack() as stack:

        def _make(**env):
            for name, value in env.items():
                app_env.setenv(name, str(value))
            get_settings.cache_clear()
            client = stack.enter_context(TestClient(create_app()))
            client.app.state.notifier = FakeNotifier()
            return client

        yield _make


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def notifier(client):
    return client.app.state.notifier


@pytest.fixture
def rows():
    """rows(client, model) -> every stored row of model, oldest id first."""

    def _rows(client, model):
        db = client.app.state.session_factory()
        try:
            return db.query(model).order_by(model.id).all()
        finally:
            db.close()

    return _rows
