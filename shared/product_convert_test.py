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

import unittest

from shared.firebase_constants import DESCRIPTION_FIELD, NAME_FIELD
from shared.product_convert import (
    product_from_document,
    product_to_document,
    products_from_documents,
)
from shared.types import Product


class ProductConvertTest(unittest.TestCase):

    def test_product_from_document(self):
        product = product_from_document("p1", {"nome": "Caneta", "descricao": "Azul"})
        self.assertEqual(product, Product(id="p1", name="Caneta", description="Azul"))

    def test_missing_fields_default_to_empty(self):
        self.assertEqual(product_from_document("p1", {}), Product(id="p1"))
        self.assertEqual(product_from_document("p1", None), Product(id="p1"))

    def test_non_string_fields_default_to_empty(self):
        product = product_from_document("p1", {"nome": 42, "descricao": None})
        self.assertEqual(product.name, "")
        self.assertEqual(product.description, "")

    def test_extra_fields_are_ignored(self):
        product = product_from_document(
            "p1", {"nome": "Caneta", "descricao": "", "preco": 10}
        )
        self.assertEqual(product, Product(id="p1", name="Caneta"))

    def test_products_from_documents_keeps_order(self):
        products = products_from_documents(
            [("b", {"nome": "B"}), ("a", {"nome": "A"})]
        )
        self.assertEqual([p.id for p in products], ["b", "a"])

    def test_product_to_document_has_exactly_two_fields(self):
        self.assertEqual(
            product_to_document("Widget", "A widget"),
            {NAME_FIELD: "Widget", DESCRIPTION_FIELD: "A widget"},
        )


if __name__ == "__main__":
    unittest.main()
