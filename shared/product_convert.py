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

from typing import Any, Iterable, Mapping, Optional, Tuple

from dacite import Config, from_dict

from shared.firebase_constants import DESCRIPTION_FIELD, NAME_FIELD
from shared.types import Product


def _get_string(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else ""


def product_from_document(doc_id: str, data: Optional[Mapping[str, Any]]) -> Product:
    """
    Maps a stored document to a Product.

    Args:
        doc_id (str): The backend-assigned document id.
        data (Mapping | None): The document fields, as returned by `to_dict()`.

    Returns:
        Product: The product. Missing or non-string fields map to "".
    """
    data = data or {}
    return from_dict(
        data_class=Product,
        data={
            "id": doc_id,
            "name": _get_string(data, NAME_FIELD),
            "description": _get_string(data, DESCRIPTION_FIELD),
        },
        config=Config(check_types=False),
    )


def products_from_documents(
    documents: Iterable[Tuple[str, Optional[Mapping[str, Any]]]],
) -> Tuple[Product, ...]:
    return tuple(product_from_document(doc_id, data) for doc_id, data in documents)


def product_to_document(name: str, description: str) -> dict:
    """Builds the write payload. Always exactly the two product fields."""
    return {NAME_FIELD: name, DESCRIPTION_FIELD: description}
