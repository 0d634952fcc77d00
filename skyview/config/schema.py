"""Pydantic v2 configuration schema with strict validation."""

from pydantic import BaseModel, Field

from skyview.config.defaults import DEFAULT_HISTORY_CITIES, FALLBACK_CITY

WEATHERAPI_BASE_URL = "https://api.weatherapi.com/v1"


class ApiConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = WEATHERAPI_BASE_URL
    api_key: str = ""
    timeout: float = Field(default=10.0, gt=0.0)
    max_retries: int = Field(default=1, ge=0, le=3)
    retry_base_delay: float = Field(default=1.0, ge=0.0)


class SearchConfig(BaseModel):
    model_config = {"extra": "forbid"}

    debounce_ms: int = Field(default=1200, ge=0)
    min_query_length: int = Field(default=3, ge=1)


class ForecastConfig(BaseModel):
    model_config = {"extra": "forbid"}

    days: int = Field(default=7, ge=1, le=14)
    fallback_city: str = Field(default=FALLBACK_CITY, min_length=1)


class StorageConfig(BaseModel):
    model_config = {"extra": "forbid"}

    db_path: str = "data/skyview.db"


class HistoryConfig(BaseModel):
    model_config = {"extra": "forbid"}

    cities: list[str] = list(DEFAULT_HISTORY_CITIES)


class AppConfig(BaseModel):
    model_config = {"extra": "forbid"}

    api: ApiConfig = ApiConfig()
    search: SearchConfig = SearchConfig()
    forecast: ForecastConfig = ForecastConfig()
    storage: StorageConfig = StorageConfig()
    history: HistoryConfig = HistoryConfig()
