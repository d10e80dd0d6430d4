from typing import List, Optional

from cityat.core.config import settings
from cityat.schemas.common import CamelModel
from cityat.schemas.location import City, Location


class LocationState(CamelModel):
    current_location: Optional[Location] = None
    selected_city: Optional[City] = None
    recent_cities: List[City] = []
    is_location_enabled: bool = False
    is_loading: bool = False
    error: Optional[str] = None

    def set_current_location(self, location: Location) -> None:
        self.current_location = location
        self.is_location_enabled = True
        self.error = None

    def set_selected_city(self, city: City, limit: Optional[int] = None) -> None:
        """Select a city and move it to the front of the recency list."""
        if limit is None:
            limit = settings.RECENT_CITIES_LIMIT
        self.selected_city = city

        recent = [c for c in self.recent_cities if c.id != city.id]
        recent.insert(0, city)
        self.recent_cities = recent[:limit]

    def set_loading(self, is_loading: bool) -> None:
        self.is_loading = is_loading

    def set_error(self, message: str) -> None:
        self.error = message
        self.is_loading = False

    def set_location_enabled(self, enabled: bool) -> None:
        self.is_location_enabled = enabled

    def clear_error(self) -> None:
        self.error = None
