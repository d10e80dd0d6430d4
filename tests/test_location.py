import asyncio

import pytest

from cityat.schemas.location import Location
from cityat.services.location import (
    ReportedGeolocationProvider,
    calculate_distance,
    detect_city,
    find_nearest_city,
    get_position,
)
from cityat.state.location import LocationState
from conftest import CITY_COORDINATES, make_city


def test_select_same_city_twice_does_not_duplicate():
    state = LocationState()
    delhi = make_city("delhi")

    state.set_selected_city(delhi)
    state.set_selected_city(delhi)

    assert state.selected_city.id == "delhi"
    assert [c.id for c in state.recent_cities] == ["delhi"]


def test_recent_cities_capped_at_five_most_recent_first():
    state = LocationState()

    for key in CITY_COORDINATES:
        state.set_selected_city(make_city(key))

    assert len(state.recent_cities) == 5
    assert [c.id for c in state.recent_cities] == ["pune", "hyderabad", "kolkata", "chennai", "bangalore"]


def test_reselecting_moves_city_to_front():
    state = LocationState()
    for key in ["delhi", "mumbai", "pune"]:
        state.set_selected_city(make_city(key))

    state.set_selected_city(make_city("delhi"))

    assert [c.id for c in state.recent_cities] == ["delhi", "pune", "mumbai"]


def test_explicit_zero_limit_is_not_replaced_by_default():
    state = LocationState()

    state.set_selected_city(make_city("delhi"), limit=0)

    assert state.selected_city.id == "delhi"
    assert state.recent_cities == []


def test_location_setters():
    state = LocationState()

    state.set_loading(True)
    state.set_error("Failed to detect location")
    assert state.is_loading is False
    assert state.error == "Failed to detect location"

    state.set_current_location(Location(latitude=28.6, longitude=77.2))
    assert state.is_location_enabled is True
    assert state.error is None

    state.set_error("again")
    state.clear_error()
    assert state.error is None


def test_calculate_distance_delhi_mumbai():
    distance = calculate_distance(28.6139, 77.2090, 19.0760, 72.8777)

    assert distance == pytest.approx(1150, rel=0.01)


def test_find_nearest_city():
    cities = [make_city(key) for key in CITY_COORDINATES]

    city, distance = find_nearest_city(Location(latitude=18.53, longitude=73.85), cities)

    assert city.id == "pune"
    assert distance < 5


async def test_detect_city_selects_nearest(store):
    cities = [make_city(key) for key in CITY_COORDINATES]
    provider = ReportedGeolocationProvider(Location(latitude=12.95, longitude=77.60))

    city = await detect_city(store, provider, cities)

    assert city.id == "bangalore"
    assert store.location.selected_city.id == "bangalore"
    assert store.location.current_location.latitude == 12.95
    assert store.location.is_loading is False
    assert store.location.error is None


async def test_detect_city_too_far(store):
    cities = [make_city("delhi")]
    provider = ReportedGeolocationProvider(Location(latitude=19.07, longitude=72.87))

    city = await detect_city(store, provider, cities)

    assert city is None
    assert store.location.selected_city is None
    assert store.location.current_location is not None
    assert "don't provide services" in store.location.error
    assert store.location.is_loading is False


async def test_detect_city_without_fix(store):
    city = await detect_city(store, ReportedGeolocationProvider(None), [make_city("delhi")])

    assert city is None
    assert store.location.current_location is None
    assert store.location.error.startswith("Could not detect your location")


async def test_detect_city_with_zero_radius_selects_nothing(store):
    provider = ReportedGeolocationProvider(Location(latitude=28.6139, longitude=77.2090))

    city = await detect_city(store, provider, [make_city("delhi")], max_distance_km=0)

    assert city is None
    assert store.location.selected_city is None


async def test_slow_provider_is_cancelled():
    cancelled = asyncio.Event()

    class SlowProvider:
        async def get_current_position(self):
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.set()
                raise

    result = await get_position(SlowProvider(), timeout=0.01)

    assert result is None
    assert cancelled.is_set()
