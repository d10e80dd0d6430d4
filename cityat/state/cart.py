import logging
import uuid
from decimal import Decimal
from typing import List, Optional

from pydantic import computed_field

from cityat.schemas.cart import CartItem
from cityat.schemas.catalog import Product
from cityat.schemas.common import CamelModel

logger = logging.getLogger(__name__)


class CartState(CamelModel):
    """
    Line items scoped to a single store.

    Totals are derived from the items on every read, so they can never
    drift from the item list. A non-empty cart always belongs to exactly
    one store.
    """

    items: List[CartItem] = []
    store_id: Optional[str] = None

    @computed_field
    @property
    def total_amount(self) -> Decimal:
        return sum((item.price * item.quantity for item in self.items), Decimal("0.00"))

    @computed_field
    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def find_item(self, item_id: str) -> Optional[CartItem]:
        return next((item for item in self.items if item.id == item_id), None)

    def add_item(self, product: Product, quantity: int) -> bool:
        """
        Add a product to the cart.

        Adding from another store drops the current contents first.
        Returns True when that happened.
        """
        store_switched = False
        if self.store_id and self.store_id != product.store_id:
            logger.warning(
                f"Cart switched from store {self.store_id} to {product.store_id}, "
                f"discarding {len(self.items)} items"
            )
            self.items = []
            store_switched = True

        self.store_id = product.store_id

        existing_item = next((item for item in self.items if item.product_id == product.id), None)
        if existing_item:
            existing_item.quantity += quantity
        else:
            self.items.append(CartItem(
                id=f"cart_{uuid.uuid4().hex}",
                product_id=product.id,
                name=product.name,
                price=product.discount_price or product.price,
                quantity=quantity,
                image_url=product.images[0] if product.images else None,
            ))

        return store_switched

    def update_quantity(self, item_id: str, quantity: int) -> None:
        item = self.find_item(item_id)
        if not item:
            return

        if quantity <= 0:
            self.items = [ci for ci in self.items if ci.id != item_id]
        else:
            item.quantity = quantity

        if not self.items:
            self.store_id = None

    def remove_item(self, item_id: str) -> None:
        self.items = [ci for ci in self.items if ci.id != item_id]
        if not self.items:
            self.store_id = None

    def clear(self) -> None:
        self.items = []
        self.store_id = None

    def add_special_instructions(self, item_id: str, instructions: str) -> None:
        item = self.find_item(item_id)
        if item:
            item.special_instructions = instructions
