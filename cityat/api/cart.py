import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from cityat.api.dependencies import get_backend_client, get_store_from_session, save_store_to_session
from cityat.core.backend_client import BackendClient
from cityat.schemas.cart import CartInstructionsUpdate, CartItemAdd, CartItemUpdate, CartResponse
from cityat.services.cart import add_to_cart
from cityat.state.store import AppStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/cart", tags=["cart"])


def cart_response(store: AppStore, store_switched: bool = False) -> CartResponse:
    cart = store.cart
    return CartResponse(
        items=cart.items,
        store_id=cart.store_id,
        total_amount=cart.total_amount,
        item_count=cart.item_count,
        store_switched=store_switched,
    )


@router.get("", response_model=CartResponse)
async def get_cart(request: Request):
    """Get current shopping cart."""
    return cart_response(get_store_from_session(request))


@router.post("/add", response_model=CartResponse)
async def add_item(
    request: Request,
    item: CartItemAdd,
    client: BackendClient = Depends(get_backend_client)
):
    """Add item to cart. Items from another store replace the current cart."""
    store = get_store_from_session(request)
    try:
        store_switched = await add_to_cart(store, client, item.product_id, item.quantity)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    save_store_to_session(request, store)
    return cart_response(store, store_switched)


@router.put("/update", response_model=CartResponse)
async def update_item(request: Request, item: CartItemUpdate):
    """Update cart item quantity. Zero or less removes the item."""
    store = get_store_from_session(request)

    if not store.cart.find_item(item.item_id):
        raise HTTPException(status_code=404, detail="Item not in cart")

    store.cart.update_quantity(item.item_id, item.quantity)
    save_store_to_session(request, store)
    logger.info(f"Updated cart item: item_id={item.item_id}, quantity={item.quantity}")
    return cart_response(store)


@router.put("/instructions", response_model=CartResponse)
async def set_instructions(request: Request, data: CartInstructionsUpdate):
    store = get_store_from_session(request)

    if not store.cart.find_item(data.item_id):
        raise HTTPException(status_code=404, detail="Item not in cart")

    store.cart.add_special_instructions(data.item_id, data.instructions)
    save_store_to_session(request, store)
    return cart_response(store)


@router.delete("/remove/{item_id}", response_model=CartResponse)
async def remove_item(request: Request, item_id: str):
    """Remove item from cart."""
    store = get_store_from_session(request)
    store.cart.remove_item(item_id)
    save_store_to_session(request, store)
    logger.info(f"Removed from cart: item_id={item_id}")
    return cart_response(store)


@router.post("/clear", response_model=CartResponse)
async def clear_cart(request: Request):
    """Clear entire cart."""
    store = get_store_from_session(request)
    store.cart.clear()
    save_store_to_session(request, store)
    logger.info("Cart cleared")
    return cart_response(store)
