import asyncio
import logging
import math
from typing import Iterable, Optional, Protocol, Tuple

from cityat.core.config import settings
from cityat.schemas.location import City, Location
from cityat.state.store import AppStore

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371


class GeolocationProvider(Protocol):
    async def get_current_position(self) -> Optional[Location]:
        """Return the device fix, or None when permission is denied or no fix is available."""
        ...


class ReportedGeolocationProvider:
    """Position reported by the device along with the request."""

    def __init__(self, location: Optional[Location]):
        self.location = location

    async def get_current_position(self) -> Optional[Location]:
        return self.location


def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometers (haversine)."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def find_nearest_city(location: Location, cities: Iterable[City]) -> Optional[Tuple[City, float]]:
    nearest = None
    for city in cities:
        distance = calculate_distance(
            location.latitude,
            location.longitude,
            city.coordinates.latitude,
            city.coordinates.longitude,
        )
        if nearest is None or distance < nearest[1]:
            nearest = (city, distance)
    return nearest


async def get_position(provider: GeolocationProvider, timeout: Optional[float] = None) -> Optional[Location]:
    """Ask the provider for a fix. A lookup that runs past the timeout is cancelled and yields None."""
    if timeout is None:
        timeout = settings.GEOLOCATION_TIMEOUT_SECONDS
    try:
        return await asyncio.wait_for(provider.get_current_position(), timeout)
    except asyncio.TimeoutError:
        logger.warning(f"Geolocation lookup timed out after {timeout}s")
        return None


async def detect_city(
    store: AppStore,
    provider: GeolocationProvider,
    cities: Iterable[City],
    max_distance_km: Optional[float] = None,
) -> Optional[City]:
    """
    Resolve the device position to the nearest serviceable city and select it.

    Returns the selected city, or None when there was no fix or the nearest
    city is too far away. The reason is left in the location error.
    """
    if max_distance_km is None:
        max_distance_km = settings.NEAREST_CITY_MAX_KM
    location_state = store.location
    location_state.set_loading(True)

    try:
        location = await get_position(provider)
        if location is None:
            location_state.set_error("Could not detect your location. Please select a city manually.")
            return None

        location_state.set_current_location(location)

        nearest = find_nearest_city(location, [c for c in cities if c.is_serviceable])
        if nearest is None or nearest[1] >= max_distance_km:
            logger.info(f"No serviceable city within {max_distance_km} km of {location.latitude}, {location.longitude}")
            location_state.set_error(
                "We currently don't provide services in your area. Please select a nearby city."
            )
            return None

        city, distance = nearest
        logger.info(f"Detected city {city.name} at {distance:.1f} km")
        location_state.set_selected_city(city)
        return city
    finally:
        location_state.set_loading(False)
