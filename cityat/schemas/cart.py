from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from cityat.schemas.common import CamelModel


class CartItem(CamelModel):
    id: str
    product_id: str
    name: str
    price: Decimal
    quantity: int
    special_instructions: Optional[str] = None
    image_url: Optional[str] = None


class CartItemAdd(CamelModel):
    product_id: str
    quantity: int = Field(1, gt=0)


class CartItemUpdate(CamelModel):
    item_id: str
    quantity: int


class CartInstructionsUpdate(CamelModel):
    item_id: str
    instructions: str = Field(..., max_length=500)


class CartResponse(CamelModel):
    items: List[CartItem]
    store_id: Optional[str] = None
    total_amount: Decimal
    item_count: int
    store_switched: bool = False
