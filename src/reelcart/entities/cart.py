"""
Cart Entity

The shopper's cart. One line per product; totals are computed fields so
every mutation is reflected in the pushed signals without bookkeeping.
"""

import logging
from typing import List, Optional

from pydantic import Field, computed_field

from ..catalog import get_product
from ..config import get_config
from ..core import Entity, event
from ..errors import CartItemNotFoundError, EmptyCartError
from ..models import CartItem, Product, Snackbar

logger = logging.getLogger(__name__)


class Cart(Entity):
    items: List[CartItem] = Field(default_factory=list)

    @computed_field
    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @computed_field
    @property
    def subtotal(self) -> float:
        return round(sum(item.product.price * item.quantity for item in self.items), 2)

    @computed_field
    @property
    def tax(self) -> float:
        return round(self.subtotal * get_config().cart.tax_rate, 2)

    @computed_field
    @property
    def total(self) -> float:
        return round(self.subtotal + self.tax, 2)

    def line_for(self, product_id: str) -> Optional[CartItem]:
        return next((item for item in self.items if item.product.id == product_id), None)

    def _require_line(self, product_id: str) -> CartItem:
        line = self.line_for(product_id)
        if line is None:
            raise CartItemNotFoundError(product_id)
        return line

    def add_product(self, product: Product, quantity: int = 1) -> CartItem:
        """Add `product`, merging into its existing line if there is one."""
        line = self.line_for(product.id)
        if line is None:
            line = CartItem(product=product, quantity=quantity)
            self.items.append(line)
        else:
            line.quantity += quantity
        logger.debug("Cart %s: %s x%d", self.id, product.id, line.quantity)
        return line

    def _panel(self):
        from ..pages.cart import CartPanel
        return CartPanel(self)

    @event(method="POST")
    def add_item(self, product_id: str):
        product = get_product(product_id)
        self.add_product(product)
        return Snackbar(
            title="Purchased!",
            message=f"{product.name} added to cart instantly.",
            position="top",
            variant="accent",
        )

    @event(method="POST")
    def increment(self, product_id: str):
        self._require_line(product_id).quantity += 1
        return self._panel()

    @event(method="POST")
    def decrement(self, product_id: str):
        line = self._require_line(product_id)
        if line.quantity <= 1:
            self.items.remove(line)
        else:
            line.quantity -= 1
        return self._panel()

    @event(method="POST")
    def remove_item(self, product_id: str):
        self.items.remove(self._require_line(product_id))
        return self._panel()

    @event(method="POST")
    def clear(self):
        self.items = []
        return self._panel()

    @event(method="POST")
    def checkout(self):
        if not self.items:
            raise EmptyCartError()

        count, total = self.item_count, self.total
        self.items = []
        logger.info("Cart %s checked out %d items for %.2f", self.id, count, total)
        yield self._panel()
        yield Snackbar(
            title="Order placed",
            message=f"Charged {get_config().cart.currency}{total:.2f} for {count} item{'s' if count != 1 else ''}.",
            position="top",
            variant="success",
        )
