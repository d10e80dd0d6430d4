import logging

from cityat.core.backend_client import BackendClient
from cityat.schemas.catalog import Product
from cityat.state.store import AppStore

logger = logging.getLogger(__name__)


async def fetch_product(client: BackendClient, product_id: str) -> Product:
    """Load a product from the catalog and make sure it can be ordered."""
    product = Product.model_validate(await client.get_product(product_id))
    if not product.is_available:
        raise ValueError(f"{product.name} is not available")
    return product


async def add_to_cart(store: AppStore, client: BackendClient, product_id: str, quantity: int) -> bool:
    product = await fetch_product(client, product_id)
    store_switched = store.cart.add_item(product, quantity)
    logger.info(f"Added to cart: product_id={product_id}, quantity={quantity}")
    return store_switched
