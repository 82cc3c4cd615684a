"""
Product store abstraction for Cloud Firestore and an in-memory implementation.

The store is the only seam to the backend: it opens snapshot listeners and
submits writes. Everything else (ordering, persistence, conflict resolution)
is left to the backend.
"""

from __future__ import annotations

import logging
import random
import string
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Protocol

from firebase_admin import firestore
from google.api_core import exceptions

from backend.errors import to_sync_error
from shared.product_convert import product_from_document, products_from_documents
from shared.types import SnapshotEvent

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[[SnapshotEvent], None]

AUTO_ID_ALPHABET = string.ascii_letters + string.digits
AUTO_ID_LENGTH = 20


class ListenerHandle(Protocol):
    """A live subscription. Releasing it stops further deliveries."""

    def unsubscribe(self) -> None:
        ...


class ProductStore(Protocol):
    """Defines the operations the synchronizer needs from the document store."""

    def listen(self, collection: str, on_event: SnapshotCallback) -> ListenerHandle:
        ...

    def add(self, collection: str, data: dict) -> str:
        ...

    def overwrite(self, collection: str, product_id: str, data: dict) -> None:
        ...

    def remove(self, collection: str, product_id: str) -> None:
        ...


def generate_auto_id() -> str:
    """Returns an id shaped like a Firestore auto-id (20 alphanumerics)."""
    return "".join(random.choices(AUTO_ID_ALPHABET, k=AUTO_ID_LENGTH))


@dataclass(eq=False)
class InMemoryListenerHandle:
    store: "InMemoryProductStore"
    collection: str
    callback: SnapshotCallback
    active: bool = True

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self.active = False
        listeners = self.store.listeners.get(self.collection, [])
        if self in listeners:
            listeners.remove(self)


@dataclass
class InMemoryProductStore:
    """
    In-memory document store for development and tests.

    Documents keep insertion order. Every successful write pushes a full
    snapshot of the collection to its listeners, synchronously.
    """

    collections: Dict[str, Dict[str, dict]] = field(default_factory=dict)
    listeners: Dict[str, List[InMemoryListenerHandle]] = field(default_factory=dict)
    pending_failure: Optional[BaseException] = None

    def listen(self, collection: str, on_event: SnapshotCallback) -> InMemoryListenerHandle:
        handle = InMemoryListenerHandle(store=self, collection=collection, callback=on_event)
        self.listeners.setdefault(collection, []).append(handle)
        # Like Firestore, a new listener receives the current state right away.
        try:
            on_event(self.snapshot(collection))
        except Exception:
            handle.unsubscribe()
            raise
        return handle

    def add(self, collection: str, data: dict) -> str:
        self._raise_pending_failure()
        product_id = generate_auto_id()
        self.collections.setdefault(collection, {})[product_id] = dict(data)
        self.deliver(collection)
        return product_id

    def overwrite(self, collection: str, product_id: str, data: dict) -> None:
        self._raise_pending_failure()
        documents = self.collections.setdefault(collection, {})
        if product_id not in documents:
            raise exceptions.NotFound(f"No document to update: {collection}/{product_id}")
        documents[product_id] = dict(data)
        self.deliver(collection)

    def remove(self, collection: str, product_id: str) -> None:
        self._raise_pending_failure()
        self.collections.setdefault(collection, {}).pop(product_id, None)
        self.deliver(collection)

    def snapshot(self, collection: str) -> SnapshotEvent:
        documents = self.collections.get(collection, {})
        return SnapshotEvent(products=products_from_documents(documents.items()))

    def deliver(self, collection: str) -> None:
        """Pushes the current snapshot of `collection` to every listener."""
        event = self.snapshot(collection)
        for handle in list(self.listeners.get(collection, [])):
            handle.callback(event)

    def emit_error(self, collection: str, exc: BaseException) -> None:
        """Pushes a failure event to every listener of `collection`."""
        event = SnapshotEvent(error=to_sync_error(exc))
        for handle in list(self.listeners.get(collection, [])):
            handle.callback(event)

    def fail_next_write(self, exc: BaseException) -> None:
        self.pending_failure = exc

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.collections.clear()
        self.listeners.clear()
        self.pending_failure = None

    def _raise_pending_failure(self) -> None:
        if self.pending_failure is not None:
            exc, self.pending_failure = self.pending_failure, None
            raise exc


class FirestoreProductStore:
    """
    Cloud Firestore implementation backed by a `firebase_admin` client.

    Snapshot callbacks run on the Firestore watch thread.
    """

    def __init__(self, client: Any):
        self.client = client

    def listen(self, collection: str, on_event: SnapshotCallback) -> ListenerHandle:
        def _on_snapshot(col_snapshot, changes, read_time) -> None:
            try:
                products = tuple(
                    product_from_document(doc.id, doc.to_dict()) for doc in col_snapshot
                )
            except Exception as e:
                logger.exception("Failed to decode snapshot of %s", collection)
                on_event(SnapshotEvent(error=to_sync_error(e)))
                return
            on_event(SnapshotEvent(products=products))

        return self.client.collection(collection).on_snapshot(_on_snapshot)

    def add(self, collection: str, data: dict) -> str:
        _, doc_ref = self.client.collection(collection).add(data)
        return doc_ref.id

    def overwrite(self, collection: str, product_id: str, data: dict) -> None:
        """
        Replaces the fields of an existing document.

        Raises:
            google.api_core.exceptions.NotFound: If the document does not exist.
        """
        transaction = self.client.transaction()
        doc_ref = self.client.collection(collection).document(product_id)

        @firestore.transactional
        def _overwrite_transaction(transaction, doc_ref):
            doc = doc_ref.get(transaction=transaction)
            if not doc.exists:
                raise exceptions.NotFound(
                    f"No document to update: {collection}/{product_id}"
                )
            transaction.set(doc_ref, data)

        _overwrite_transaction(transaction, doc_ref)

    def remove(self, collection: str, product_id: str) -> None:
        self.client.collection(collection).document(product_id).delete()
