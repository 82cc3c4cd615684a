"""
Live list synchronization for the products collection.

The synchronizer keeps an in-memory list that mirrors the latest snapshot
pushed by the store. Writes go straight to the store and are reflected in the
list only when the backend pushes the next snapshot.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Callable, List, Optional, Tuple

from backend.errors import to_sync_error
from backend.store import ListenerHandle, ProductStore
from shared.firebase_constants import PRODUCTS_COLLECTION
from shared.product_convert import product_to_document
from shared.types import (
    ErrorKind,
    MutationResult,
    Product,
    SnapshotEvent,
    SyncError,
    SyncPhase,
    SyncState,
)

logger = logging.getLogger(__name__)

StateObserver = Callable[[SyncState], None]


def apply_event(state: SyncState, event: SnapshotEvent) -> SyncState:
    """
    Returns the state that results from applying one subscription event.

    A snapshot replaces the whole list and clears any previous error. A
    failure keeps the previous list and records the error. Torn-down states
    never change.
    """
    if state.phase == SyncPhase.TORN_DOWN:
        return state
    if event.error is not None:
        return replace(state, last_error=event.error)
    return replace(
        state,
        products=tuple(event.products),
        last_error=None,
        snapshot_count=state.snapshot_count + 1,
    )


class ListSynchronizer:
    """Mirrors a products collection and submits writes to it."""

    def __init__(self, store: ProductStore, collection: str = PRODUCTS_COLLECTION):
        self.store = store
        self.collection = collection
        self._state = SyncState()
        self._handle: Optional[ListenerHandle] = None
        self._observers: List[StateObserver] = []
        self._lock = threading.Lock()

    @property
    def state(self) -> SyncState:
        with self._lock:
            return self._state

    @property
    def products(self) -> Tuple[Product, ...]:
        return self.state.products

    def add_observer(self, observer: StateObserver) -> Callable[[], None]:
        """Registers a callback run with the new state after every event."""
        with self._lock:
            self._observers.append(observer)

        def _remove() -> None:
            with self._lock:
                if observer in self._observers:
                    self._observers.remove(observer)

        return _remove

    def subscribe(self) -> None:
        """
        Opens the live subscription.

        Raises:
            RuntimeError: If the synchronizer was already torn down.
        """
        with self._lock:
            if self._state.phase == SyncPhase.TORN_DOWN:
                raise RuntimeError("Cannot subscribe after teardown.")
            if self._state.phase == SyncPhase.SUBSCRIBED:
                return
            # Set before listening: some stores deliver the first snapshot
            # from inside listen().
            self._state = replace(self._state, phase=SyncPhase.SUBSCRIBED)

        try:
            handle = self.store.listen(self.collection, self._on_event)
        except Exception as e:
            logger.warning("Failed to subscribe to %s: %s", self.collection, e)
            with self._lock:
                if self._state.phase == SyncPhase.TORN_DOWN:
                    return
                self._state = replace(
                    self._state, phase=SyncPhase.IDLE, last_error=to_sync_error(e)
                )
                state, observers = self._state, list(self._observers)
            self._notify(state, observers)
            return

        with self._lock:
            if self._state.phase == SyncPhase.TORN_DOWN:
                release = True
            else:
                self._handle = handle
                release = False
        if release:
            handle.unsubscribe()
            return
        logger.info("Subscribed to collection %s", self.collection)

    def teardown(self) -> None:
        """Releases the subscription. Safe to call more than once."""
        with self._lock:
            if self._state.phase == SyncPhase.TORN_DOWN:
                return
            self._state = replace(self._state, phase=SyncPhase.TORN_DOWN)
            handle, self._handle = self._handle, None
            self._observers.clear()
        if handle is not None:
            handle.unsubscribe()
        logger.info("Released subscription to collection %s", self.collection)

    def create(self, name: str, description: str) -> MutationResult:
        try:
            product_id = self.store.add(
                self.collection, product_to_document(name, description)
            )
        except Exception as e:
            return self._write_failed("create", "", e)
        logger.info("Created product %s", product_id)
        return MutationResult.success(product_id)

    def update(self, product_id: str, name: str, description: str) -> MutationResult:
        if not product_id:
            return self._invalid_id("update")
        try:
            self.store.overwrite(
                self.collection, product_id, product_to_document(name, description)
            )
        except Exception as e:
            return self._write_failed("update", product_id, e)
        logger.info("Updated product %s", product_id)
        return MutationResult.success(product_id)

    def delete(self, product_id: str) -> MutationResult:
        if not product_id:
            return self._invalid_id("delete")
        try:
            self.store.remove(self.collection, product_id)
        except Exception as e:
            return self._write_failed("delete", product_id, e)
        logger.info("Deleted product %s", product_id)
        return MutationResult.success(product_id)

    def _on_event(self, event: SnapshotEvent) -> None:
        with self._lock:
            if self._state.phase == SyncPhase.TORN_DOWN:
                return
            self._state = apply_event(self._state, event)
            state, observers = self._state, list(self._observers)
        if event.error is not None:
            logger.warning(
                "Subscription to %s failed (%s): %s; keeping %d products",
                self.collection,
                event.error.kind,
                event.error.message,
                len(state.products),
            )
        self._notify(state, observers)

    def _notify(self, state: SyncState, observers: List[StateObserver]) -> None:
        # Observers run on the store's delivery path; their failures stay here.
        for observer in observers:
            try:
                observer(state)
            except Exception:
                logger.exception("Observer %r failed", observer)

    def _invalid_id(self, operation: str) -> MutationResult:
        error = SyncError(
            kind=ErrorKind.INVALID_WRITE,
            message=f"Cannot {operation} a product without an id.",
        )
        logger.error(error.message)
        return MutationResult.failure("", error)

    def _write_failed(
        self, operation: str, product_id: str, exc: Exception
    ) -> MutationResult:
        error = to_sync_error(exc)
        logger.error(
            "Failed to %s product %s (%s): %s",
            operation,
            product_id or "<new>",
            error.kind,
            exc,
        )
        return MutationResult.failure(product_id, error)
