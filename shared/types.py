# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Optional, Tuple


@dataclass(frozen=True)
class Product:
    """A product record as displayed in the synchronized list.

    An empty `id` means the product is not (yet) backed by a stored document.
    """

    id: str = ""
    name: str = ""
    description: str = ""


class ErrorKind(StrEnum):
    CONNECTIVITY = "CONNECTIVITY"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    INVALID_WRITE = "INVALID_WRITE"
    NOT_FOUND = "NOT_FOUND"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class SyncError:
    """A backend failure, surfaced to the caller instead of being dropped."""

    kind: ErrorKind
    message: str = ""


@dataclass(frozen=True)
class SnapshotEvent:
    """One push from the subscription: a full snapshot or a failure."""

    products: Tuple[Product, ...] = ()
    error: Optional[SyncError] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None


class SyncPhase(StrEnum):
    IDLE = "IDLE"
    SUBSCRIBED = "SUBSCRIBED"
    TORN_DOWN = "TORN_DOWN"


@dataclass(frozen=True)
class SyncState:
    phase: SyncPhase = SyncPhase.IDLE
    products: Tuple[Product, ...] = field(default_factory=tuple)
    last_error: Optional[SyncError] = None
    snapshot_count: int = 0


@dataclass(frozen=True)
class MutationResult:
    """Outcome of a create, update or delete write."""

    ok: bool
    product_id: str = ""
    error: Optional[SyncError] = None

    @classmethod
    def success(cls, product_id: str) -> "MutationResult":
        return cls(ok=True, product_id=product_id)

    @classmethod
    def failure(cls, product_id: str, error: SyncError) -> "MutationResult":
        return cls(ok=False, product_id=product_id, error=error)
