"""Session corpus tests: server-side collaborator re-ingests after each mutation."""

import pytest

from quote_discovery.config import Settings
from quote_discovery.core.domain_types import BulkOperationType
from quote_discovery.core.errors import BulkOperationError
from quote_discovery.infrastructure.kv_store import InMemoryKeyValueStore
from quote_discovery.services.discovery_engine import DiscoveryEngine
from quote_discovery.services.session_corpus import SessionCorpus


def _make_pair() -> tuple[DiscoveryEngine, SessionCorpus]:
    corpus = SessionCorpus()
    engine = DiscoveryEngine(
        InMemoryKeyValueStore(),
        collaborator=corpus,
        settings=Settings(storage_backend="memory"),
    )
    corpus.attach(engine)
    corpus.replace(
        [
            {"id": "1", "text": "Be bold", "author": "A"},
            {"id": "2", "text": "Stay humble", "author": "B"},
        ],
        [{"id": "c1", "name": "Faves", "quoteIds": ["1"]}],
    )
    return engine, corpus


async def test_bulk_add_to_collection_by_name():
    engine, corpus = _make_pair()
    engine.select("2")
    outcome = await engine.run_bulk_operation(
        BulkOperationType.ADD_TO_COLLECTION, "Faves",
    )
    assert outcome.succeeded == ["2"]
    assert engine.corpus.find_collection("c1").quote_ids == ("1", "2")


async def test_bulk_delete_strips_collection_membership():
    engine, corpus = _make_pair()
    engine.select("1")
    await engine.run_bulk_operation(BulkOperationType.DELETE)
    assert engine.corpus.get("1") is None
    assert engine.corpus.find_collection("c1").quote_ids == ()


async def test_unknown_collection_is_item_failure():
    engine, _ = _make_pair()
    engine.select("1")
    outcome = await engine.run_bulk_operation(
        BulkOperationType.REMOVE_FROM_COLLECTION, "Nope",
    )
    assert outcome.succeeded == []
    assert outcome.failed[0].quote_id == "1"


async def test_speak_is_refused_server_side():
    engine, _ = _make_pair()
    with pytest.raises(BulkOperationError):
        await engine.speak_quote("1")
