"""Discovery Engine: per-session owner of search state around the pure core.

Invariants:
    - One engine per user session; not safe for concurrent callers (see session_registry)
    - Corpus view replaced wholesale on update_data, never diffed
    - Every search with intent records exactly one history entry and one analytics sample
    - History, saved searches and analytics are persisted after every mutation
    - Persistence never blocks or fails a search: writes are scheduled, failures logged
    - Selection is cleared and the bulk panel closed after every bulk operation,
      whether it succeeded or not
    - Subscribers are notified synchronously; a failing subscriber never breaks the engine

Design Decisions:
    - Impureim sandwich: state + IO here, every computation delegated to core/
    - Observer callbacks instead of a global event bus: explicit subscribe/unsubscribe
    - Scheduled writes coalesce per key: a task writes the latest snapshot it finds,
      flush() awaits outstanding writes (shutdown, tests)
    - Writes to one key are serialized by a per-key lock and read the snapshot only
      once they hold it: a slow earlier write can never land after a newer one
    - Injected clock: trend/day logic is testable without freezing time globally
"""

import asyncio
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from pydantic import ValidationError

from quote_discovery.config import Settings, get_settings
from quote_discovery.core.analytics import record_search, top_searches
from quote_discovery.core.corpus_view import CorpusView
from quote_discovery.core.domain_types import (
    BulkOperationType, EngineEventKind, SearchField,
)
from quote_discovery.core.errors import BulkOperationError, ResourceNotFoundError
from quote_discovery.core.filter_pipeline import run_search
from quote_discovery.core.insights import generate_insights
from quote_discovery.core.query_matcher import has_search_intent, matches_query
from quote_discovery.core.recommendations import generate_recommendations
from quote_discovery.core.related_content import resolve_related
from quote_discovery.core.repository_protocols import (
    DownloadSink, KeyValueStore, QuoteMutationCollaborator,
)
from quote_discovery.core.saved_searches import (
    create_saved_search, find_saved_search, mark_used, remove_saved_search,
)
from quote_discovery.core.search_history import SearchHistory
from quote_discovery.core.selection import SelectionSet
from quote_discovery.core.suggestions import build_suggestion_index, suggest
from quote_discovery.schemas.quote import Collection, Quote
from quote_discovery.schemas.search import (
    AdvancedFilters, BulkOperationOutcome, IngestionReport, QueryCount,
    RelatedContent, SavedSearch, SearchAnalytics, SearchFilters,
    SearchHistoryItem, SearchInsights, SmartRecommendation,
)
from quote_discovery.services.bulk_operations import BulkOperationExecutor
from quote_discovery.services.search_persistence import (
    StorageKeys, encode_analytics, encode_history, encode_saved_searches,
    load_search_data, write_blob,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineEvent:
    """Notification delivered to engine subscribers."""
    kind: EngineEventKind
    payload: dict = field(default_factory=dict)


Listener = Callable[[EngineEvent], None]


@dataclass
class SearchOutcome:
    query: str
    results: list[Quote]
    recorded: bool

    @property
    def total(self) -> int:
        return len(self.results)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DiscoveryEngine:
    """Search, history, analytics and bulk operations over one caller's corpus."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        collaborator: QuoteMutationCollaborator | None = None,
        download_sink: DownloadSink | None = None,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = _utcnow,
        session_id: str | None = None,
    ):
        settings = settings or get_settings()
        self.session_id = session_id
        self._store = store
        self._clock = clock
        self._collaborator = collaborator
        self._executor = BulkOperationExecutor(collaborator, download_sink)
        self._keys = StorageKeys(
            history=settings.history_key,
            saved_searches=settings.saved_searches_key,
            analytics=settings.analytics_key,
        )
        self._fields: tuple[SearchField, ...] = tuple(settings.search_fields)
        self._suggestion_limit = settings.suggestion_limit
        self._popular_limit = settings.popular_limit
        self._filtered_label = settings.filtered_search_label

        self._view = CorpusView()
        self._suggestion_index: tuple[str, ...] = ()
        self._history = SearchHistory(capacity=settings.history_capacity)
        self._saved: list[SavedSearch] = []
        self._analytics = SearchAnalytics()
        self._selection = SelectionSet()

        self._query = ""
        self._filters = SearchFilters()
        self._advanced = AdvancedFilters()
        self._results: list[Quote] = []
        self.bulk_panel_open = False

        self._listeners: list[Listener] = []
        self._dirty: dict[str, str] = {}
        self._pending: set[asyncio.Task] = set()
        self._write_locks: dict[str, asyncio.Lock] = {}

    # --- Observers -------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener. Returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, kind: EngineEventKind, **payload) -> None:
        event = EngineEvent(kind, payload)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.error(
                    f"Engine listener failed on {kind.value}: {e}",
                    exc_info=True,
                    extra={"session_id": self.session_id},
                )

    # --- Persistence -----------------------------------------------------------

    async def load(self) -> None:
        """Load history, saved searches and analytics. Corrupt data → defaults."""
        data = await load_search_data(self._store, self._keys)
        self._history = SearchHistory(data.history, capacity=self._history.capacity)
        self._saved = data.saved_searches
        self._analytics = data.analytics
        logger.info(
            f"Loaded search data: {len(self._history)} history, "
            f"{len(self._saved)} saved, {self._analytics.total_searches} searches",
            extra={"session_id": self.session_id},
        )

    def _persist(self, *keys: str) -> None:
        encoders = {
            self._keys.history: lambda: encode_history(self._history.items),
            self._keys.saved_searches: lambda: encode_saved_searches(self._saved),
            self._keys.analytics: lambda: encode_analytics(self._analytics),
        }
        for key in keys:
            self._dirty[key] = encoders[key]()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return  # written on the next flush()
        for key in keys:
            task = loop.create_task(self._write(key))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

    async def _write(self, key: str) -> None:
        lock = self._write_locks.setdefault(key, asyncio.Lock())
        async with lock:
            value = self._dirty.pop(key, None)
            if value is None:
                return
            await write_blob(self._store, key, value)

    async def flush(self) -> None:
        """Wait for scheduled writes, then write anything still dirty."""
        if self._pending:
            await asyncio.gather(*list(self._pending))
        for key in list(self._dirty):
            await self._write(key)

    # --- Corpus ----------------------------------------------------------------

    @property
    def corpus(self) -> CorpusView:
        return self._view

    def update_data(
        self,
        quotes: Iterable[Quote | dict],
        collections: Iterable[Collection | dict] = (),
    ) -> IngestionReport:
        """Replace the corpus snapshot. Malformed entries are dropped and counted."""
        report = IngestionReport()
        valid_quotes: list[Quote] = []
        for raw in quotes:
            try:
                valid_quotes.append(
                    raw if isinstance(raw, Quote) else Quote.model_validate(raw),
                )
                report.accepted_quotes += 1
            except ValidationError as e:
                report.rejected_quotes += 1
                logger.warning(
                    f"Rejected malformed quote: {e.error_count()} error(s)",
                    extra={"session_id": self.session_id},
                )
        valid_collections: list[Collection] = []
        for raw in collections:
            try:
                valid_collections.append(
                    raw if isinstance(raw, Collection)
                    else Collection.model_validate(raw),
                )
                report.accepted_collections += 1
            except ValidationError as e:
                report.rejected_collections += 1
                logger.warning(
                    f"Rejected malformed collection: {e.error_count()} error(s)",
                    extra={"session_id": self.session_id},
                )

        self._view = CorpusView.build(valid_quotes, valid_collections)
        self._suggestion_index = build_suggestion_index(self._view)
        # Keep the visible result list in step with the new snapshot
        self._results = self._compute_results()
        self._emit(
            EngineEventKind.CORPUS_UPDATED,
            quotes=len(self._view), collections=len(self._view.collections),
        )
        return report

    def get_quote(self, quote_id: str) -> Quote:
        quote = self._view.get(quote_id)
        if quote is None:
            raise ResourceNotFoundError("Quote", quote_id)
        return quote

    # --- Search ----------------------------------------------------------------

    @property
    def query(self) -> str:
        return self._query

    @property
    def filters(self) -> SearchFilters:
        return self._filters

    @property
    def advanced_filters(self) -> AdvancedFilters:
        return self._advanced

    @property
    def results(self) -> list[Quote]:
        return list(self._results)

    def _compute_results(self) -> list[Quote]:
        return run_search(
            self._view, self._query, self._filters, self._advanced,
            self._fields, self._clock(),
        )

    def search(
        self,
        query: str | None = None,
        filters: SearchFilters | None = None,
        advanced_filters: AdvancedFilters | None = None,
    ) -> SearchOutcome:
        """Run a search; arguments left as None keep the current state."""
        if query is not None:
            self._query = query
        if filters is not None:
            self._filters = filters
        if advanced_filters is not None:
            self._advanced = advanced_filters

        self._results = self._compute_results()
        recorded = has_search_intent(self._query, self._filters, self._advanced)
        label = self._query.strip() or self._filtered_label
        if recorded:
            self._record(label, self._results)

        logger.info(
            f"Search '{label}' returned {len(self._results)} results",
            extra={"session_id": self.session_id, "result_count": len(self._results)},
        )
        self._emit(
            EngineEventKind.SEARCH_EXECUTED,
            query=label, result_count=len(self._results), recorded=recorded,
        )
        return SearchOutcome(self._query, list(self._results), recorded)

    def _record(self, label: str, results: list[Quote]) -> None:
        item = SearchHistoryItem(
            query=label, timestamp=self._clock(), result_count=len(results),
        )
        evicted = self._history.record(item)
        if evicted:
            logger.debug(f"History evicted {len(evicted)} entr(ies)")
        self._analytics = record_search(
            self._analytics, label, len(results), results, self._popular_limit,
        )
        self._persist(self._keys.history, self._keys.analytics)
        self._emit(EngineEventKind.HISTORY_CHANGED, size=len(self._history))
        self._emit(
            EngineEventKind.ANALYTICS_CHANGED,
            total_searches=self._analytics.total_searches,
        )

    def search_by_field(self, query: str, search_field: SearchField) -> list[Quote]:
        """Single-field match over the whole corpus. Not recorded."""
        return [
            q for q in self._view.quotes
            if matches_query(q, query, self._view, (search_field,))
        ]

    def suggestions(self, partial: str) -> list[str]:
        return suggest(self._suggestion_index, partial, self._suggestion_limit)

    # --- History ---------------------------------------------------------------

    @property
    def history(self) -> list[SearchHistoryItem]:
        return self._history.items

    def remove_history_entry(self, query: str) -> None:
        if not self._history.remove(query):
            raise ResourceNotFoundError("SearchHistoryItem", query)
        self._persist(self._keys.history)
        self._emit(EngineEventKind.HISTORY_CHANGED, size=len(self._history))

    def clear_history(self) -> None:
        self._history.clear()
        self._persist(self._keys.history)
        self._emit(EngineEventKind.HISTORY_CHANGED, size=0)

    # --- Saved searches --------------------------------------------------------

    @property
    def saved_searches(self) -> list[SavedSearch]:
        return list(self._saved)

    def save_search(self, name: str) -> SavedSearch:
        """Snapshot the current query and filters under a name."""
        self._saved, entry = create_saved_search(
            self._saved, name, self._query, self._filters, self._advanced,
            self._clock(),
        )
        self._persist(self._keys.saved_searches)
        self._emit(EngineEventKind.SAVED_SEARCHES_CHANGED, count=len(self._saved))
        return entry

    def load_saved_search(self, search_id: str) -> SavedSearch:
        """Restore a saved query + filters and count the use. Does not run the search."""
        self._saved, entry = mark_used(self._saved, search_id)
        self._query = entry.query
        self._filters = entry.filters.model_copy(deep=True)
        self._advanced = entry.advanced_filters.model_copy(deep=True)
        self._persist(self._keys.saved_searches)
        self._emit(EngineEventKind.SAVED_SEARCHES_CHANGED, count=len(self._saved))
        return entry

    def get_saved_search(self, search_id: str) -> SavedSearch:
        return find_saved_search(self._saved, search_id)

    def delete_saved_search(self, search_id: str) -> None:
        """Remove unconditionally; confirming is the caller's job."""
        self._saved = remove_saved_search(self._saved, search_id)
        self._persist(self._keys.saved_searches)
        self._emit(EngineEventKind.SAVED_SEARCHES_CHANGED, count=len(self._saved))

    def clear_saved_searches(self) -> None:
        self._saved = []
        self._persist(self._keys.saved_searches)
        self._emit(EngineEventKind.SAVED_SEARCHES_CHANGED, count=0)

    # --- Analytics, insights, recommendations ---------------------------------

    @property
    def analytics(self) -> SearchAnalytics:
        return self._analytics.model_copy(deep=True)

    def popular_searches(self, limit: int | None = None) -> list[QueryCount]:
        if limit is None:
            limit = self._popular_limit
        return top_searches(self._analytics, limit)

    def insights(self) -> SearchInsights:
        return generate_insights(
            self._analytics, self._view, self._history.items,
            self._clock().astimezone(timezone.utc).date(),
        )

    def recommendations(self) -> list[SmartRecommendation]:
        return generate_recommendations(
            self._view, self._query, self.insights().favorite_author,
        )

    def related_content(self, quote_id: str) -> RelatedContent:
        return resolve_related(self._view, self.get_quote(quote_id))

    # --- Selection -------------------------------------------------------------

    @property
    def selection(self) -> list[str]:
        return self._selection.ids

    def _selection_changed(self) -> None:
        self._emit(EngineEventKind.SELECTION_CHANGED, count=len(self._selection))

    def select(self, quote_id: str) -> None:
        self._selection.select(quote_id)
        self._selection_changed()

    def deselect(self, quote_id: str) -> None:
        self._selection.deselect(quote_id)
        self._selection_changed()

    def toggle_selection(self, quote_id: str) -> bool:
        selected = self._selection.toggle(quote_id)
        self._selection_changed()
        return selected

    def select_all(self) -> list[str]:
        """Select exactly the ids of the most recent result list."""
        self._selection.select_all(q.id for q in self._results)
        self._selection_changed()
        return self._selection.ids

    def clear_selection(self) -> None:
        self._selection.clear()
        self._selection_changed()

    # --- Bulk operations & quote actions ---------------------------------------

    def open_bulk_panel(self) -> None:
        self.bulk_panel_open = True

    async def run_bulk_operation(
        self,
        operation: BulkOperationType,
        target_collection: str | None = None,
    ) -> BulkOperationOutcome:
        selected = self._selection.ids
        try:
            outcome = await self._executor.execute(
                operation,
                selected,
                self._view,
                target_collection=target_collection,
                results=self._results,
                search_query=self._query,
                filters=self._advanced,
                now=self._clock(),
            )
        finally:
            self._selection.clear()
            self.bulk_panel_open = False
            self._selection_changed()

        self._emit(
            EngineEventKind.BULK_OPERATION_COMPLETED,
            operation=operation.value,
            succeeded=len(outcome.succeeded),
            failed=len(outcome.failed),
        )
        return outcome

    def _require_collaborator(self, action: str) -> QuoteMutationCollaborator:
        if self._collaborator is None:
            raise BulkOperationError(
                f"No quote collaborator configured for {action}", action,
            )
        return self._collaborator

    async def speak_quote(self, quote_id: str) -> None:
        quote = self.get_quote(quote_id)
        await self._require_collaborator("speak").speak(quote)

    async def save_quote_as_image(self, quote_id: str) -> None:
        quote = self.get_quote(quote_id)
        await self._require_collaborator("save_as_image").save_as_image(quote)
