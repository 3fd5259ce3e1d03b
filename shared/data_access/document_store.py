"""
Document store abstraction.

This module defines the DocumentStore protocol used by the call quality
monitor and the offline sync queue, the SERVER_TIMESTAMP sentinel, and an
in-memory implementation used for local development and tests.
"""

import copy
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Protocol, runtime_checkable

from .document_path import validate_path
from .exceptions import DocumentNotFoundError

logger = logging.getLogger(__name__)


class ServerTimestamp:
    """
    Sentinel resolved by the store to the time the write is applied.

    Use the module-level SERVER_TIMESTAMP instance rather than creating
    new ones.
    """

    def __repr__(self) -> str:
        return 'SERVER_TIMESTAMP'

    def __deepcopy__(self, memo):
        return self


SERVER_TIMESTAMP = ServerTimestamp()


@runtime_checkable
class DocumentStore(Protocol):
    """
    Remote document store addressed by 'collection/docId' paths.

    All operations are coroutines. Implementations raise
    DocumentStoreError subclasses on failure.
    """

    async def get(self, path: str) -> Optional[Dict[str, Any]]:
        """Return the document fields, or None when the document is absent."""
        ...

    async def set(self, path: str, fields: Dict[str, Any]) -> None:
        """Create or fully overwrite the document."""
        ...

    async def update(self, path: str, fields: Dict[str, Any]) -> None:
        """Update fields of an existing document (DocumentNotFoundError if absent)."""
        ...

    async def set_fields(self, path: str, fields: Dict[str, Any]) -> None:
        """Upsert the given fields, creating the document if needed."""
        ...

    async def delete(self, path: str) -> None:
        """Delete the document if it exists."""
        ...


def resolve_server_timestamps(fields: Dict[str, Any], now: datetime) -> Dict[str, Any]:
    """
    Return a copy of fields with every SERVER_TIMESTAMP replaced by now.

    Nested maps and lists are resolved recursively.
    """
    def _resolve(value: Any) -> Any:
        if isinstance(value, ServerTimestamp):
            return now
        if isinstance(value, dict):
            return {key: _resolve(item) for key, item in value.items()}
        if isinstance(value, list):
            return [_resolve(item) for item in value]
        return copy.deepcopy(value)

    return _resolve(fields)


class InMemoryDocumentStore:
    """
    Dict-backed DocumentStore.

    Documents are deep-copied on the way in and out so callers never share
    mutable state with the store.
    """

    def __init__(self):
        self._documents: Dict[str, Dict[str, Any]] = {}

    async def get(self, path: str) -> Optional[Dict[str, Any]]:
        validate_path(path)
        document = self._documents.get(path)
        return copy.deepcopy(document) if document is not None else None

    async def set(self, path: str, fields: Dict[str, Any]) -> None:
        validate_path(path)
        self._documents[path] = resolve_server_timestamps(fields, self._now())

    async def update(self, path: str, fields: Dict[str, Any]) -> None:
        validate_path(path)
        if path not in self._documents:
            raise DocumentNotFoundError(f'Document not found: {path}')
        self._documents[path].update(resolve_server_timestamps(fields, self._now()))

    async def set_fields(self, path: str, fields: Dict[str, Any]) -> None:
        validate_path(path)
        document = self._documents.setdefault(path, {})
        document.update(resolve_server_timestamps(fields, self._now()))

    async def delete(self, path: str) -> None:
        validate_path(path)
        self._documents.pop(path, None)

    def __len__(self) -> int:
        return len(self._documents)

    def __contains__(self, path: str) -> bool:
        return path in self._documents

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)
