"""
Headless controller for the products CRUD screen.

Holds the form state (name, description, product under edit) and routes the
screen's actions to the list synchronizer. Rendering is left to the caller,
which can observe `synchronizer` for list changes.
"""

from __future__ import annotations

from typing import Callable, Optional, Tuple

from backend.synchronizer import ListSynchronizer
from shared.types import MutationResult, Product


SCREEN_TITLE = "CRUD de Produtos"
NAME_LABEL = "Nome"
DESCRIPTION_LABEL = "Descrição"
SAVE_LABEL = "Salvar"
UPDATE_LABEL = "Atualizar"
BACK_LABEL = "Voltar"


class ProductScreen:
    title = SCREEN_TITLE

    def __init__(self, synchronizer: ListSynchronizer, on_back: Callable[[], None]):
        self.synchronizer = synchronizer
        self.on_back = on_back
        self.name = ""
        self.description = ""
        self.editing_id: Optional[str] = None
        self.last_result: Optional[MutationResult] = None
        self._closed = False

    @property
    def products(self) -> Tuple[Product, ...]:
        return self.synchronizer.products

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None

    @property
    def submit_label(self) -> str:
        return UPDATE_LABEL if self.is_editing else SAVE_LABEL

    def open(self) -> None:
        self.synchronizer.subscribe()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.synchronizer.teardown()

    def start_edit(self, product: Product) -> None:
        self.name = product.name
        self.description = product.description
        self.editing_id = product.id

    def clear_form(self) -> None:
        self.name = ""
        self.description = ""
        self.editing_id = None

    def submit(self) -> MutationResult:
        """
        Creates a product from the form, or updates the one under edit.

        The form is cleared whatever the outcome; the outcome is kept in
        `last_result`.
        """
        if self.is_editing:
            result = self.synchronizer.update(self.editing_id, self.name, self.description)
        else:
            result = self.synchronizer.create(self.name, self.description)
        self.clear_form()
        self.last_result = result
        return result

    def delete(self, product: Product) -> MutationResult:
        result = self.synchronizer.delete(product.id)
        if result.ok and self.editing_id == product.id:
            self.clear_form()
        self.last_result = result
        return result

    def back(self) -> None:
        self.on_back()
