"""API test fixtures: FastAPI app over httpx ASGITransport with memory storage.

Invariants:
    - The lifespan is not run: routes get the lazily created memory-backed registry
    - Each test starts with an empty registry (root conftest resets it)
"""

import pytest
from httpx import ASGITransport, AsyncClient

from quote_discovery.main import app

CORPUS = {
    "quotes": [
        {"id": "1", "text": "Be bold", "author": "A", "category": "courage"},
        {"id": "2", "text": "Stay humble", "author": "B", "category": "wisdom"},
        {"id": "3", "text": "Bold and kind", "author": "A", "isLiked": True},
    ],
    "collections": [{"id": "c1", "name": "Faves", "quoteIds": ["1"]}],
}


@pytest.fixture
async def client():
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c


@pytest.fixture
async def session(client):
    """Session id with the sample corpus loaded."""
    res = await client.put("/api/v1/sessions/s1/corpus", json=CORPUS)
    assert res.status_code == 200
    return "/api/v1/sessions/s1"
