import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from cityat.api.dependencies import get_backend_client, get_store_from_session, require_token, save_store_to_session
from cityat.core.backend_client import BackendClient
from cityat.schemas.order import (
    BookingCreate,
    Order,
    OrderCreate,
    PaymentInitiate,
    PaymentVerify,
    ServiceBooking,
)
from cityat.services import order as order_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.post("", response_model=Order, status_code=201)
async def create_order(
    request: Request,
    order_data: OrderCreate,
    client: BackendClient = Depends(get_backend_client)
):
    """Create a new order from cart contents."""
    store = get_store_from_session(request)
    require_token(store)
    try:
        order = await order_service.place_order(store, client, order_data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    save_store_to_session(request, store)
    return order


@router.get("", response_model=dict)
async def list_orders(
    request: Request,
    page: int = 1,
    limit: int = 10,
    status: Optional[str] = None,
    client: BackendClient = Depends(get_backend_client)
):
    if page < 1:
        page = 1
    if limit < 1 or limit > 100:
        limit = 10

    store = get_store_from_session(request)
    require_token(store)
    orders, total_count = await order_service.list_orders(store, client, page, limit, status)
    total_pages = (total_count + limit - 1) // limit

    return {
        "items": [o.model_dump(mode="json", by_alias=True) for o in orders],
        "total": total_count,
        "page": page,
        "limit": limit,
        "total_pages": total_pages
    }


@router.post("/bookings", response_model=ServiceBooking, status_code=201)
async def create_booking(
    request: Request,
    booking: BookingCreate,
    client: BackendClient = Depends(get_backend_client)
):
    store = get_store_from_session(request)
    require_token(store)
    result = await order_service.book_service(store, client, booking)
    save_store_to_session(request, store)
    return result


@router.get("/bookings", response_model=dict)
async def list_bookings(
    request: Request,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[str] = None,
    client: BackendClient = Depends(get_backend_client)
):
    store = get_store_from_session(request)
    require_token(store)
    bookings, total_count = await order_service.list_bookings(store, client, page, limit, status)

    return {
        "items": [b.model_dump(mode="json", by_alias=True) for b in bookings],
        "total": total_count,
        "page": page,
        "limit": limit,
        "total_pages": (total_count + limit - 1) // limit
    }


@router.post("/payments/verify", response_model=dict)
async def verify_payment(
    request: Request,
    data: PaymentVerify,
    client: BackendClient = Depends(get_backend_client)
):
    store = get_store_from_session(request)
    require_token(store)
    result = await order_service.confirm_payment(store, client, data.payment_id, data.signature)
    save_store_to_session(request, store)
    return result


@router.get("/{order_id}", response_model=Order)
async def get_order(
    request: Request,
    order_id: str,
    client: BackendClient = Depends(get_backend_client)
):
    store = get_store_from_session(request)
    require_token(store)
    return await order_service.get_order(store, client, order_id)


@router.post("/{order_id}/cancel", response_model=Order)
async def cancel_order(
    request: Request,
    order_id: str,
    client: BackendClient = Depends(get_backend_client)
):
    store = get_store_from_session(request)
    require_token(store)
    try:
        return await order_service.cancel_order(store, client, order_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/{order_id}/payments", response_model=dict)
async def initiate_payment(
    request: Request,
    order_id: str,
    data: PaymentInitiate,
    client: BackendClient = Depends(get_backend_client)
):
    store = get_store_from_session(request)
    require_token(store)
    return await order_service.start_payment(store, client, order_id, data.method.value)
