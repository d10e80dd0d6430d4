from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Backend API
    API_BASE_URL: str = "http://localhost:8080/api/v1"
    API_TIMEOUT_SECONDS: float = 30.0
    API_CACHE_TTL_SECONDS: int = 60

    # Session
    SESSION_SECRET_KEY: str = "change-me"
    SESSION_MAX_AGE_SECONDS: int = 3600 * 24 * 7

    # App
    APP_NAME: str = "City At"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    # Location
    RECENT_CITIES_LIMIT: int = 5
    NEAREST_CITY_MAX_KM: float = 50.0
    GEOLOCATION_TIMEOUT_SECONDS: float = 15.0

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
