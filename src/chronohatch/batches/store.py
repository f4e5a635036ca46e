"""Batch persistence port and the bundled adapters.

The lifecycle layer talks to storage only through :class:`BatchStore`: whole-document ``replace``,
single-field ``patch_field``, ``create``/``delete`` and a change subscription. Documents are
JSON-compatible dicts (dates as ``YYYY-MM-DD`` strings). Two adapters ship with the package:

* :class:`InMemoryBatchStore` for tests and embedding.
* :class:`JsonFileBatchStore` which mirrors the in-memory state to a JSON file after every write.
"""

from __future__ import annotations

import copy
import json
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, Protocol
from uuid import uuid4

from chronohatch.core.errors import BatchNotFoundError, ChronoHatchValueError

BatchDocument = dict[str, Any]
Listener = Callable[[list[BatchDocument]], None]
Unsubscribe = Callable[[], None]

STORE_SCHEMA_VERSION = "1.0"


class BatchStore(Protocol):
    """Document-store operations the batch manager relies on."""

    def reserve_id(self) -> str:  # pragma: no cover - interface only
        ...

    def create(self, document: Mapping[str, Any]) -> str:  # pragma: no cover - interface only
        ...

    def replace(self, batch_id: str, document: Mapping[str, Any]) -> None:  # pragma: no cover
        ...

    def patch_field(self, batch_id: str, field: str, value: Any) -> None:  # pragma: no cover
        ...

    def delete(self, batch_id: str) -> None:  # pragma: no cover - interface only
        ...

    def get(self, batch_id: str) -> BatchDocument | None:  # pragma: no cover - interface only
        ...

    def documents(self) -> list[BatchDocument]:  # pragma: no cover - interface only
        ...

    def subscribe(self, listener: Listener) -> Unsubscribe:  # pragma: no cover - interface only
        ...


def _new_batch_id() -> str:
    return uuid4().hex[:20]


class InMemoryBatchStore:
    """Dict-backed :class:`BatchStore`.

    Every read returns deep copies so callers cannot mutate stored state behind the store's back.
    Listeners receive the full document list (ordered by start date) once on subscription and
    again after each write.
    """

    def __init__(
        self,
        documents: Mapping[str, Mapping[str, Any]] | None = None,
        *,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._documents: dict[str, BatchDocument] = {
            batch_id: {**copy.deepcopy(dict(doc)), "id": batch_id}
            for batch_id, doc in (documents or {}).items()
        }
        self._listeners: list[Listener] = []
        self._id_factory = id_factory or _new_batch_id

    def reserve_id(self) -> str:
        """Return a fresh id for a document the caller will ``create`` next."""
        batch_id = self._id_factory()
        if batch_id in self._documents:
            raise ChronoHatchValueError(f"Batch id collision: '{batch_id}'")
        return batch_id

    def create(self, document: Mapping[str, Any]) -> str:
        """Insert ``document`` under its ``id`` (reserved beforehand) or a newly generated one."""
        batch_id = str(document.get("id") or self.reserve_id())
        if batch_id in self._documents:
            raise ChronoHatchValueError(f"Batch id collision: '{batch_id}'")
        previous = dict(self._documents)
        self._documents[batch_id] = {**copy.deepcopy(dict(document)), "id": batch_id}
        self._changed(previous)
        return batch_id

    def replace(self, batch_id: str, document: Mapping[str, Any]) -> None:
        self._require(batch_id)
        previous = dict(self._documents)
        self._documents[batch_id] = {**copy.deepcopy(dict(document)), "id": batch_id}
        self._changed(previous)

    def patch_field(self, batch_id: str, field: str, value: Any) -> None:
        if field == "id":
            raise ChronoHatchValueError("The batch id cannot be patched")
        current = self._require(batch_id)
        previous = dict(self._documents)
        self._documents[batch_id] = {**current, field: copy.deepcopy(value)}
        self._changed(previous)

    def delete(self, batch_id: str) -> None:
        self._require(batch_id)
        previous = dict(self._documents)
        del self._documents[batch_id]
        self._changed(previous)

    def get(self, batch_id: str) -> BatchDocument | None:
        document = self._documents.get(batch_id)
        return copy.deepcopy(document) if document is not None else None

    def documents(self) -> list[BatchDocument]:
        ordered = sorted(
            self._documents.values(),
            key=lambda doc: (str(doc.get("start_date", "")), doc["id"]),
        )
        return copy.deepcopy(ordered)

    def subscribe(self, listener: Listener) -> Unsubscribe:
        self._listeners.append(listener)
        listener(self.documents())

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _require(self, batch_id: str) -> BatchDocument:
        document = self._documents.get(batch_id)
        if document is None:
            raise BatchNotFoundError(batch_id)
        return document

    def _changed(self, previous: dict[str, BatchDocument]) -> None:
        # documents are swapped, never mutated in place, so a shallow snapshot restores them
        try:
            self._flush()
        except Exception:
            self._documents = previous
            raise
        if not self._listeners:
            return
        snapshot = self.documents()
        for listener in list(self._listeners):
            listener(copy.deepcopy(snapshot))

    def _flush(self) -> None:
        return None


class JsonFileBatchStore(InMemoryBatchStore):
    """:class:`InMemoryBatchStore` persisted to a single JSON file.

    The file is rewritten atomically (temp file + rename) after every mutation, so a regenerated
    schedule and the timeline fields that produced it always land in the same write.
    """

    def __init__(self, path: str | Path, *, id_factory: Callable[[], str] | None = None) -> None:
        self.path = Path(path)
        super().__init__(self._load(self.path), id_factory=id_factory)

    @staticmethod
    def _load(path: Path) -> dict[str, BatchDocument]:
        if not path.exists():
            return {}
        payload = json.loads(path.read_text(encoding="utf-8") or "{}")
        if not isinstance(payload, dict):
            raise ChronoHatchValueError(f"Batch store {path} must contain a JSON object")
        version = payload.get("schema_version", STORE_SCHEMA_VERSION)
        if version != STORE_SCHEMA_VERSION:
            raise ChronoHatchValueError(
                f"Unsupported batch store schema_version={version} in {path}"
            )
        batches = payload.get("batches") or []
        documents: dict[str, BatchDocument] = {}
        for entry in batches:
            if not isinstance(entry, dict) or not entry.get("id"):
                raise ChronoHatchValueError(f"Batch store {path} contains an entry without an id")
            documents[str(entry["id"])] = entry
        return documents

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"schema_version": STORE_SCHEMA_VERSION, "batches": self.documents()}
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        tmp_path.replace(self.path)


__all__ = [
    "BatchDocument",
    "BatchStore",
    "InMemoryBatchStore",
    "JsonFileBatchStore",
    "Listener",
    "STORE_SCHEMA_VERSION",
    "Unsubscribe",
]
