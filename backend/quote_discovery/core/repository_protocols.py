"""Boundary Protocols: contracts between core and shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell (or the caller) via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async in Protocol: boundary methods are async because implementations do IO,
      but core pure functions never are; the engine schedules the async calls
      around the pure logic
"""

from typing import Protocol

from quote_discovery.schemas.quote import Quote


class KeyValueStore(Protocol):
    """Blob storage for history, saved searches and analytics."""
    async def get(self, key: str) -> str | None: ...
    async def set(self, key: str, value: str) -> None: ...


class QuoteMutationCollaborator(Protocol):
    """Caller-side quote actions the engine invokes but never implements."""
    async def remove_quote(self, quote_id: str) -> None: ...
    async def add_to_collection(self, quote: Quote, collection: str) -> None: ...
    async def remove_from_collection(self, quote_id: str, collection: str) -> None: ...
    async def speak(self, quote: Quote) -> None: ...
    async def save_as_image(self, quote: Quote) -> None: ...


class DownloadSink(Protocol):
    """Receives export documents (file download, HTTP body, ...)."""
    async def deliver(self, document: dict, filename: str) -> None: ...
