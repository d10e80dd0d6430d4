from decimal import Decimal
from typing import List, Optional

from cityat.schemas.common import CamelModel


class Product(CamelModel):
    id: str
    store_id: str
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    price: Decimal
    discount_price: Optional[Decimal] = None
    images: List[str] = []
    inventory: Optional[int] = None
    unit: Optional[str] = None
    is_available: bool = True
    tags: List[str] = []


class Store(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    categories: List[str] = []
    is_open: bool = True
    minimum_order: Decimal = Decimal("0.00")
    delivery_fee: Decimal = Decimal("0.00")


class ServiceCategory(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    base_price: Decimal
    price_unit: str = "fixed"


class ServiceProvider(CamelModel):
    id: str
    user_id: str
    categories: List[ServiceCategory] = []
    is_verified: bool = False
    is_online: bool = False


class ReviewCreate(CamelModel):
    target_id: str
    target_type: str
    rating: int
    comment: str
    images: List[str] = []


class SearchResult(CamelModel):
    id: str
    type: str
    title: str
    subtitle: Optional[str] = None
    image: Optional[str] = None
    rating: Optional[float] = None
    price: Optional[Decimal] = None
    distance: Optional[float] = None
    is_available: bool = True
