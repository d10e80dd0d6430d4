import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Request

from cityat.api.dependencies import get_backend_client, get_store_from_session, save_store_to_session
from cityat.core.backend_client import BackendClient
from cityat.schemas.location import City, DetectLocationRequest, Location, SelectCityRequest
from cityat.services.location import ReportedGeolocationProvider, detect_city
from cityat.state.location import LocationState

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/location", tags=["location"])


async def load_cities(client: BackendClient, search: Optional[str] = None) -> List[City]:
    return [City.model_validate(c) for c in await client.get_cities(search) or []]


@router.get("", response_model=LocationState)
async def get_location(request: Request):
    return get_store_from_session(request).location


@router.get("/cities", response_model=List[City])
async def list_cities(
    search: Optional[str] = None,
    client: BackendClient = Depends(get_backend_client)
):
    return await load_cities(client, search)


@router.post("/city", response_model=LocationState)
async def select_city(request: Request, data: SelectCityRequest):
    store = get_store_from_session(request)
    store.location.set_selected_city(data.city)
    save_store_to_session(request, store)
    logger.info(f"City selected: {data.city.name}")
    return store.location


@router.post("/detect", response_model=LocationState)
async def detect_location(
    request: Request,
    position: Optional[DetectLocationRequest] = None,
    client: BackendClient = Depends(get_backend_client)
):
    """
    Pick the nearest serviceable city for the reported device position.

    An empty body means the device could not get a fix.
    """
    store = get_store_from_session(request)
    location = Location.model_validate(position.model_dump()) if position else None
    cities = await load_cities(client)

    await detect_city(store, ReportedGeolocationProvider(location), cities)

    save_store_to_session(request, store)
    return store.location


@router.put("/enabled", response_model=LocationState)
async def set_enabled(request: Request, enabled: bool):
    store = get_store_from_session(request)
    store.location.set_location_enabled(enabled)
    save_store_to_session(request, store)
    return store.location


@router.delete("/error", response_model=LocationState)
async def clear_error(request: Request):
    store = get_store_from_session(request)
    store.location.clear_error()
    save_store_to_session(request, store)
    return store.location
