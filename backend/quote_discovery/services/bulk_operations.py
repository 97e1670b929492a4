"""Bulk Operations: dispatch one action over every id in a selection set.

Invariants:
    - Mutating operations call the collaborator once per id, in selection order
    - Each item is isolated: a failing id is recorded and the loop continues
    - add/remove-from-collection require a target collection
    - Mutating operations require a collaborator; export works without a sink
    - export writes selection (or, if empty, the current results) into one document

Design Decisions:
    - Aggregate outcome instead of first-failure propagation: a partial run is
      reported, never hidden
    - No retry, no cancellation: once started the run reaches the end of the selection
    - Selection clearing is the engine's job (it owns the set), not the executor's
"""

import logging
from datetime import datetime

from quote_discovery.core.corpus_view import CorpusView
from quote_discovery.core.domain_types import BulkOperationType
from quote_discovery.core.errors import BulkOperationError
from quote_discovery.core.export_document import (
    build_export_document, export_filename, quotes_to_export,
)
from quote_discovery.core.repository_protocols import (
    DownloadSink, QuoteMutationCollaborator,
)
from quote_discovery.schemas.quote import Quote
from quote_discovery.schemas.search import (
    AdvancedFilters, BulkFailure, BulkOperationOutcome,
)

logger = logging.getLogger(__name__)


class BulkOperationExecutor:
    """Runs bulk operations against caller-supplied collaborators."""

    def __init__(
        self,
        collaborator: QuoteMutationCollaborator | None = None,
        download_sink: DownloadSink | None = None,
    ):
        self.collaborator = collaborator
        self.download_sink = download_sink

    async def execute(
        self,
        operation: BulkOperationType,
        selected_ids: list[str],
        view: CorpusView,
        *,
        target_collection: str | None = None,
        results: list[Quote] | None = None,
        search_query: str = "",
        filters: AdvancedFilters | None = None,
        now: datetime,
    ) -> BulkOperationOutcome:
        if operation is BulkOperationType.EXPORT:
            return await self._export(
                selected_ids, view, results or [], search_query,
                filters or AdvancedFilters(), now,
            )

        self._check_can_mutate(operation, target_collection)
        outcome = BulkOperationOutcome(operation=operation)
        for quote_id in selected_ids:
            try:
                await self._apply_one(operation, quote_id, view, target_collection)
                outcome.succeeded.append(quote_id)
            except Exception as e:
                logger.error(
                    f"Bulk {operation.value} failed for quote {quote_id}: {e}",
                    extra={"operation": operation.value},
                )
                outcome.failed.append(BulkFailure(quote_id=quote_id, error=str(e)))

        logger.info(
            f"Bulk {operation.value}: {len(outcome.succeeded)} succeeded, "
            f"{len(outcome.failed)} failed",
            extra={"operation": operation.value},
        )
        return outcome

    def _check_can_mutate(
        self, operation: BulkOperationType, target_collection: str | None,
    ) -> None:
        if self.collaborator is None:
            raise BulkOperationError(
                f"No quote collaborator configured for {operation.value}",
                operation.value,
            )
        needs_target = operation in (
            BulkOperationType.ADD_TO_COLLECTION,
            BulkOperationType.REMOVE_FROM_COLLECTION,
        )
        if needs_target and not target_collection:
            raise BulkOperationError(
                f"{operation.value} requires a target collection",
                operation.value,
            )

    async def _apply_one(
        self,
        operation: BulkOperationType,
        quote_id: str,
        view: CorpusView,
        target_collection: str | None,
    ) -> None:
        if operation is BulkOperationType.ADD_TO_COLLECTION:
            quote = view.get(quote_id)
            if quote is None:
                raise LookupError(f"Quote '{quote_id}' not in corpus")
            await self.collaborator.add_to_collection(quote, target_collection)
        elif operation is BulkOperationType.REMOVE_FROM_COLLECTION:
            await self.collaborator.remove_from_collection(quote_id, target_collection)
        elif operation is BulkOperationType.DELETE:
            await self.collaborator.remove_quote(quote_id)

    async def _export(
        self,
        selected_ids: list[str],
        view: CorpusView,
        results: list[Quote],
        search_query: str,
        filters: AdvancedFilters,
        now: datetime,
    ) -> BulkOperationOutcome:
        quotes = quotes_to_export(view, selected_ids, results)
        document = build_export_document(quotes, search_query, filters, now)
        exported = [q.id for q in quotes]
        outcome = BulkOperationOutcome(
            operation=BulkOperationType.EXPORT, document=document,
        )

        if self.download_sink is not None:
            try:
                await self.download_sink.deliver(
                    document.model_dump(mode="json", by_alias=True),
                    export_filename(now),
                )
            except Exception as e:
                logger.error(
                    f"Export delivery failed: {e}",
                    extra={"operation": BulkOperationType.EXPORT.value},
                )
                outcome.failed = [
                    BulkFailure(quote_id=qid, error=str(e)) for qid in exported
                ]
                return outcome

        outcome.succeeded = exported
        logger.info(
            f"Exported {len(exported)} quotes",
            extra={"operation": BulkOperationType.EXPORT.value},
        )
        return outcome
