import logging
from typing import List, Optional, Tuple

from cityat.core.backend_client import BackendClient
from cityat.schemas.order import (
    BookingCreate,
    Order,
    OrderCreate,
    OrderStatus,
    ServiceBooking,
)
from cityat.schemas.notification import NotificationType
from cityat.services.notification import create_local_notification
from cityat.state.store import AppStore

logger = logging.getLogger(__name__)

CANCELLABLE_STATUSES = {OrderStatus.PENDING, OrderStatus.CONFIRMED}


def _require_token(store: AppStore) -> str:
    if not store.auth.token:
        raise ValueError("Not authenticated")
    return store.auth.token


async def place_order(store: AppStore, client: BackendClient, data: OrderCreate) -> Order:
    """
    Create an order from cart contents.
    1. Validate cart
    2. Send order to backend
    3. Clear cart
    """
    token = _require_token(store)
    cart = store.cart

    if not cart.items:
        raise ValueError("Cart is empty")

    payload = {
        "storeId": cart.store_id,
        "type": "product",
        "items": [
            {
                "productId": item.product_id,
                "name": item.name,
                "price": str(item.price),
                "quantity": item.quantity,
                "specialInstructions": item.special_instructions,
            }
            for item in cart.items
        ],
        "deliveryAddress": data.delivery_address.model_dump(mode="json", by_alias=True),
        "paymentMethod": data.payment_method.value,
        "totalAmount": str(cart.total_amount),
    }

    logger.info(f"Placing order for store {cart.store_id}, {cart.item_count} items, total {cart.total_amount}")
    order = Order.model_validate(await client.create_order(token, payload))

    cart.clear()
    create_local_notification(
        store,
        NotificationType.ORDER_UPDATE,
        "Order placed",
        f"Your order {order.id} has been placed.",
        {"orderId": order.id},
    )
    logger.info(f"Order {order.id} created, cart cleared")
    return order


async def list_orders(
    store: AppStore,
    client: BackendClient,
    page: int = 1,
    limit: int = 20,
    status: Optional[str] = None,
) -> Tuple[List[Order], int]:
    result = await client.get_orders(_require_token(store), page, limit, status)
    orders = [Order.model_validate(o) for o in result.get("items", [])]
    return orders, result.get("totalCount", len(orders))


async def get_order(store: AppStore, client: BackendClient, order_id: str) -> Order:
    return Order.model_validate(await client.get_order(_require_token(store), order_id))


async def cancel_order(store: AppStore, client: BackendClient, order_id: str) -> Order:
    token = _require_token(store)
    order = await get_order(store, client, order_id)
    if order.status not in CANCELLABLE_STATUSES:
        raise ValueError(f"Order cannot be cancelled once {order.status.value}")

    updated = await client.update_order_status(token, order_id, OrderStatus.CANCELLED.value)
    logger.info(f"Order {order_id} cancelled")
    return Order.model_validate(updated)


async def book_service(store: AppStore, client: BackendClient, data: BookingCreate) -> ServiceBooking:
    token = _require_token(store)
    booking = ServiceBooking.model_validate(
        await client.create_service_booking(token, data.model_dump(mode="json", by_alias=True))
    )
    create_local_notification(
        store,
        NotificationType.SERVICE_UPDATE,
        "Booking requested",
        f"Your {booking.service_category} booking has been requested.",
        {"bookingId": booking.id},
    )
    logger.info(f"Booking {booking.id} requested with provider {booking.provider_id}")
    return booking


async def list_bookings(
    store: AppStore,
    client: BackendClient,
    page: int = 1,
    limit: int = 20,
    status: Optional[str] = None,
) -> Tuple[List[ServiceBooking], int]:
    result = await client.get_service_bookings(_require_token(store), page, limit, status)
    bookings = [ServiceBooking.model_validate(b) for b in result.get("items", [])]
    return bookings, result.get("totalCount", len(bookings))


async def start_payment(store: AppStore, client: BackendClient, order_id: str, method: str) -> dict:
    order = await get_order(store, client, order_id)
    total = order.total_amount + order.delivery_fee - order.discount_amount
    return await client.initiate_payment(_require_token(store), order_id, total, method)


async def confirm_payment(store: AppStore, client: BackendClient, payment_id: str, signature: str) -> dict:
    result = await client.verify_payment(_require_token(store), payment_id, signature)
    if result and result.get("status") == "completed":
        create_local_notification(
            store,
            NotificationType.PAYMENT,
            "Payment received",
            f"Transaction {result.get('transactionId')} was successful.",
            {"paymentId": payment_id},
        )
    return result
