import enum
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from cityat.schemas.common import CamelModel
from cityat.schemas.location import Address


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class BookingStatus(str, enum.Enum):
    REQUESTED = "requested"
    QUOTED = "quoted"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentMethod(str, enum.Enum):
    CASH = "cash"
    CARD = "card"
    UPI = "upi"
    WALLET = "wallet"


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class OrderItem(CamelModel):
    id: str
    product_id: Optional[str] = None
    service_id: Optional[str] = None
    name: str
    price: Decimal
    quantity: int
    special_instructions: Optional[str] = None


class Order(CamelModel):
    id: str
    customer_id: Optional[str] = None
    store_id: Optional[str] = None
    service_provider_id: Optional[str] = None
    type: str = "product"
    items: List[OrderItem] = []
    status: OrderStatus = OrderStatus.PENDING
    delivery_address: Optional[Address] = None
    payment_method: PaymentMethod = PaymentMethod.CASH
    payment_status: PaymentStatus = PaymentStatus.PENDING
    total_amount: Decimal
    delivery_fee: Decimal = Decimal("0.00")
    discount_amount: Decimal = Decimal("0.00")
    estimated_delivery_time: Optional[datetime] = None
    created_at: Optional[datetime] = None


class OrderCreate(CamelModel):
    delivery_address: Address
    payment_method: PaymentMethod = PaymentMethod.CASH


class OrderStatusUpdate(CamelModel):
    status: OrderStatus


class ServiceBooking(CamelModel):
    id: str
    customer_id: Optional[str] = None
    provider_id: str
    service_category: str
    description: str = ""
    scheduled_date: datetime
    estimated_duration: int = 60
    status: BookingStatus = BookingStatus.REQUESTED
    address: Optional[Address] = None
    images: List[str] = []


class BookingCreate(CamelModel):
    provider_id: str
    service_category: str
    description: str = Field("", max_length=1000)
    scheduled_date: datetime
    estimated_duration: int = Field(60, gt=0)
    address: Address
    images: List[str] = []


class PaymentInitiate(CamelModel):
    method: PaymentMethod


class PaymentVerify(CamelModel):
    payment_id: str
    signature: str
