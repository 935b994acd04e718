import os
import tempfile
from datetime import datetime, timezone

import pytest

# Configuration must be in place before any app module is imported
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("REALTIME_DB_URL", "https://example-db.test")
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite:///" + os.path.join(tempfile.mkdtemp(), "alert_log_test.db"),
)

from app.data.gateway import FinanceGateway  # noqa: E402
from tests.fakes import FakeStoreClient  # noqa: E402


@pytest.fixture
def store():
    return FakeStoreClient()


@pytest.fixture
def gateway(store):
    return FinanceGateway(store)


@pytest.fixture
def now():
    return datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)
