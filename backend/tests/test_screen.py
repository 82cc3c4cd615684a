import unittest
from unittest.mock import MagicMock

from google.api_core import exceptions

from backend.screen import SAVE_LABEL, SCREEN_TITLE, UPDATE_LABEL, ProductScreen
from backend.store import InMemoryProductStore
from backend.synchronizer import ListSynchronizer
from shared.types import ErrorKind, Product, SyncPhase


class ProductScreenTests(unittest.TestCase):
    def setUp(self):
        self.store = InMemoryProductStore()
        self.sync = ListSynchronizer(self.store)
        self.on_back = MagicMock()
        self.screen = ProductScreen(self.sync, on_back=self.on_back)
        self.screen.open()

    def tearDown(self):
        self.screen.close()

    def test_initial_state(self):
        self.assertEqual(self.screen.title, SCREEN_TITLE)
        self.assertEqual(self.screen.name, "")
        self.assertEqual(self.screen.description, "")
        self.assertFalse(self.screen.is_editing)
        self.assertEqual(self.screen.submit_label, SAVE_LABEL)
        self.assertEqual(self.sync.state.phase, SyncPhase.SUBSCRIBED)

    def test_submit_creates_and_clears_form(self):
        self.screen.name = "Widget"
        self.screen.description = "A widget"

        result = self.screen.submit()

        self.assertTrue(result.ok)
        self.assertEqual(self.screen.last_result, result)
        self.assertEqual(self.screen.name, "")
        self.assertEqual(self.screen.description, "")
        self.assertEqual(
            self.screen.products, (Product(result.product_id, "Widget", "A widget"),)
        )

    def test_edit_flow_updates_existing_product(self):
        self.screen.name = "Old"
        created = self.screen.submit()
        product = self.screen.products[0]

        self.screen.start_edit(product)
        self.assertEqual(self.screen.submit_label, UPDATE_LABEL)
        self.assertEqual(self.screen.name, "Old")
        self.screen.name = "New"
        self.screen.description = "Desc"
        result = self.screen.submit()

        self.assertTrue(result.ok)
        self.assertFalse(self.screen.is_editing)
        self.assertEqual(self.screen.submit_label, SAVE_LABEL)
        self.assertEqual(
            self.screen.products, (Product(created.product_id, "New", "Desc"),)
        )

    def test_failed_submit_still_clears_form(self):
        self.store.fail_next_write(exceptions.ServiceUnavailable("offline"))
        self.screen.name = "Widget"

        result = self.screen.submit()

        self.assertFalse(result.ok)
        self.assertEqual(result.error.kind, ErrorKind.CONNECTIVITY)
        self.assertEqual(self.screen.last_result, result)
        self.assertEqual(self.screen.name, "")
        self.assertEqual(self.screen.products, ())

    def test_delete_removes_product(self):
        self.screen.name = "Widget"
        self.screen.submit()
        product = self.screen.products[0]

        result = self.screen.delete(product)

        self.assertTrue(result.ok)
        self.assertEqual(self.screen.products, ())

    def test_delete_product_under_edit_leaves_edit_mode(self):
        self.screen.name = "Widget"
        self.screen.submit()
        product = self.screen.products[0]
        self.screen.start_edit(product)

        self.screen.delete(product)

        self.assertFalse(self.screen.is_editing)
        self.assertEqual(self.screen.name, "")

    def test_back_invokes_callback(self):
        self.screen.back()
        self.on_back.assert_called_once_with()

    def test_close_tears_down_once(self):
        sync = MagicMock()
        screen = ProductScreen(sync, on_back=MagicMock())

        screen.close()
        screen.close()

        sync.teardown.assert_called_once()


if __name__ == "__main__":
    unittest.main()
