"""
Configuration and settings for the products synchronizer.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared.firebase_constants import PRODUCTS_COLLECTION


class Settings(BaseSettings):
    """Environment-backed settings for the products synchronizer."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    products_collection: str = Field(
        default=PRODUCTS_COLLECTION, validation_alias="PRODUCTS_COLLECTION"
    )

    # Firebase / Firestore
    firebase_project_id: Optional[str] = Field(
        default=None, validation_alias="FIREBASE_PROJECT_ID"
    )
    google_application_credentials: Optional[str] = Field(
        default=None, validation_alias="GOOGLE_APPLICATION_CREDENTIALS"
    )
    firestore_emulator_host: Optional[str] = Field(
        default=None, validation_alias="FIRESTORE_EMULATOR_HOST"
    )

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False, validation_alias="PRODUCTS_USE_IN_MEMORY_BACKENDS"
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
