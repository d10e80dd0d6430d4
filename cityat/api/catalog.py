from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from cityat.api.dependencies import get_backend_client, get_store_from_session, require_token
from cityat.core.backend_client import BackendClient
from cityat.schemas.catalog import Product, ReviewCreate, SearchResult, ServiceProvider, Store
from cityat.schemas.common import PaginatedResponse

router = APIRouter(prefix="/api/catalog", tags=["catalog"])


def _coordinates(request: Request):
    """Coordinates of the session's selected city, falling back to the last device fix."""
    location = get_store_from_session(request).location
    if location.selected_city:
        point = location.selected_city.coordinates
    elif location.current_location:
        point = location.current_location
    else:
        return None, None
    return point.latitude, point.longitude


@router.get("/stores", response_model=PaginatedResponse[Store])
async def list_stores(
    request: Request,
    category: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    client: BackendClient = Depends(get_backend_client)
):
    latitude, longitude = _coordinates(request)
    return await client.get_stores(category, latitude, longitude, page, limit)


@router.get("/stores/{store_id}", response_model=Store)
async def get_store(store_id: str, client: BackendClient = Depends(get_backend_client)):
    return await client.get_store(store_id)


@router.get("/stores/{store_id}/products", response_model=PaginatedResponse[Product])
async def list_store_products(
    store_id: str,
    category: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    client: BackendClient = Depends(get_backend_client)
):
    return await client.get_store_products(store_id, category, page, limit)


@router.get("/products/{product_id}", response_model=Product)
async def get_product(product_id: str, client: BackendClient = Depends(get_backend_client)):
    return await client.get_product(product_id)


@router.get("/services/providers", response_model=PaginatedResponse[ServiceProvider])
async def list_service_providers(
    request: Request,
    category: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    client: BackendClient = Depends(get_backend_client)
):
    latitude, longitude = _coordinates(request)
    return await client.get_service_providers(category, latitude, longitude, page, limit)


@router.get("/services/providers/{provider_id}", response_model=ServiceProvider)
async def get_service_provider(provider_id: str, client: BackendClient = Depends(get_backend_client)):
    return await client.get_service_provider(provider_id)


@router.get("/search", response_model=PaginatedResponse[SearchResult])
async def search(
    q: str = Query(..., min_length=1),
    category: Optional[str] = None,
    sort_by: Optional[str] = Query(None, pattern="^(price|rating|distance|popularity)$"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    client: BackendClient = Depends(get_backend_client)
):
    filters = {"category": category, "sortBy": sort_by}
    return await client.search(q, filters, page, limit)


@router.get("/reviews", response_model=dict)
async def list_reviews(
    target_id: str,
    target_type: str = Query(..., pattern="^(store|service_provider|order)$"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    client: BackendClient = Depends(get_backend_client)
):
    return await client.get_reviews(target_id, target_type, page, limit)


@router.post("/reviews", response_model=dict, status_code=201)
async def create_review(
    request: Request,
    review: ReviewCreate,
    client: BackendClient = Depends(get_backend_client)
):
    token = require_token(get_store_from_session(request))
    return await client.create_review(token, review.model_dump(mode="json", by_alias=True))
