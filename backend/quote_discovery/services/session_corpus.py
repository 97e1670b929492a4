"""Session Corpus: server-side owner of one session's quotes and collections.

Invariants:
    - Holds the authoritative corpus for HTTP sessions; the engine only sees snapshots
    - Every mutation re-ingests the whole corpus into the attached engine
    - remove_quote also drops the id from every collection
    - Unknown collections raise LookupError (reported per item by bulk operations)

Design Decisions:
    - Implements QuoteMutationCollaborator: over HTTP the server plays the caller's role
    - speak/save_as_image are client-side capabilities; the server refuses them
"""

import logging

from quote_discovery.core.errors import BulkOperationError
from quote_discovery.schemas.quote import Collection, Quote
from quote_discovery.schemas.search import IngestionReport

logger = logging.getLogger(__name__)


class SessionCorpus:
    """Mutable corpus behind one engine."""

    def __init__(self):
        self.quotes: list[Quote] = []
        self.collections: list[Collection] = []
        self._engine = None

    def attach(self, engine) -> None:
        self._engine = engine

    def replace(self, quotes: list, collections: list) -> IngestionReport:
        """Ingest a caller snapshot; keeps only the entries the engine accepted."""
        report = self._engine.update_data(quotes, collections)
        self.quotes = list(self._engine.corpus.quotes)
        self.collections = list(self._engine.corpus.collections)
        return report

    def _reingest(self) -> None:
        self._engine.update_data(self.quotes, self.collections)

    def _collection_index(self, key: str) -> int:
        for i, c in enumerate(self.collections):
            if c.id == key or c.name == key:
                return i
        raise LookupError(f"Collection '{key}' not found")

    async def remove_quote(self, quote_id: str) -> None:
        if not any(q.id == quote_id for q in self.quotes):
            raise LookupError(f"Quote '{quote_id}' not found")
        self.quotes = [q for q in self.quotes if q.id != quote_id]
        self.collections = [
            c.model_copy(update={
                "quote_ids": tuple(i for i in c.quote_ids if i != quote_id),
            })
            for c in self.collections
        ]
        self._reingest()

    async def add_to_collection(self, quote: Quote, collection: str) -> None:
        idx = self._collection_index(collection)
        target = self.collections[idx]
        if quote.id in target.quote_ids:
            return
        self.collections[idx] = target.model_copy(
            update={"quote_ids": (*target.quote_ids, quote.id)},
        )
        self._reingest()

    async def remove_from_collection(self, quote_id: str, collection: str) -> None:
        idx = self._collection_index(collection)
        target = self.collections[idx]
        self.collections[idx] = target.model_copy(
            update={"quote_ids": tuple(i for i in target.quote_ids if i != quote_id)},
        )
        self._reingest()

    async def speak(self, quote: Quote) -> None:
        raise BulkOperationError("Speech is only available in the client", "speak")

    async def save_as_image(self, quote: Quote) -> None:
        raise BulkOperationError(
            "Image export is only available in the client", "save_as_image",
        )
