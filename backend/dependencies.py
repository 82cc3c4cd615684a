"""
Dependency wiring for the product store and synchronizers.
"""

from __future__ import annotations

import logging
import os

import firebase_admin
from firebase_admin import credentials, firestore

from backend.config import Settings, get_settings
from backend.store import FirestoreProductStore, InMemoryProductStore, ProductStore
from backend.synchronizer import ListSynchronizer

logger = logging.getLogger(__name__)

_product_store: ProductStore | None = None


def _get_or_initialize_app(settings: Settings) -> firebase_admin.App:
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    if settings.firestore_emulator_host:
        # The Firestore client reads the emulator address from the environment.
        os.environ.setdefault("FIRESTORE_EMULATOR_HOST", settings.firestore_emulator_host)

    credential = None
    if settings.google_application_credentials:
        credential = credentials.Certificate(settings.google_application_credentials)
    return firebase_admin.initialize_app(
        credential, options={"projectId": settings.firebase_project_id}
    )


def get_product_store() -> ProductStore:
    """
    Return a singleton product store so every session shares one client.
    """
    global _product_store
    if _product_store:
        return _product_store

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.firebase_project_id:
        logger.info("Using in-memory product store")
        _product_store = InMemoryProductStore()
    else:
        app = _get_or_initialize_app(settings)
        logger.info("Using Firestore product store for %s", settings.firebase_project_id)
        _product_store = FirestoreProductStore(firestore.client(app))
    return _product_store


def reset_product_store() -> None:
    global _product_store
    _product_store = None


def create_synchronizer(store: ProductStore | None = None) -> ListSynchronizer:
    """Builds a synchronizer for the configured products collection."""
    settings = get_settings()
    return ListSynchronizer(
        store or get_product_store(), collection=settings.products_collection
    )
