from datetime import datetime
from typing import Optional

from pydantic import Field

from cityat.schemas.common import CamelModel


class Location(CamelModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    accuracy: Optional[float] = None
    timestamp: Optional[datetime] = None


class City(CamelModel):
    id: str
    name: str
    state: str
    country: str = "India"
    coordinates: Location
    is_serviceable: bool = True


class Address(CamelModel):
    id: Optional[str] = None
    type: str = "home"
    title: str
    address_line1: str
    address_line2: Optional[str] = None
    city: str
    state: str
    zip_code: str
    coordinates: Optional[Location] = None
    is_default: bool = False


class DetectLocationRequest(Location):
    """Device fix reported by the front-end."""


class SelectCityRequest(CamelModel):
    city: City
