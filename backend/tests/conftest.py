"""Root conftest: shared test configuration.

Invariants:
    - Tests never need a running database: STORAGE_BACKEND defaults to memory
    - Every test starts with a fresh engine registry
"""

import os

import pytest

os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from quote_discovery.config import get_settings  # noqa: E402
from quote_discovery.services.session_registry import reset_registry  # noqa: E402

get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _fresh_registry():
    reset_registry()
    yield
    reset_registry()
