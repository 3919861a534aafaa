"""Pydantic v2 configuration schema with strict validation."""

from pydantic import BaseModel, Field


class SpotConfig(BaseModel):
    model_config = {"extra": "forbid"}

    name: str
    slug: str
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


class ProviderConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = "https://www.worldtides.info/api/v3"
    datum: str = "CD"
    api_key_env: str = "WORLDTIDES_API_KEY"
    bundled_api_key: str = ""
    secret_name: str = "worldtides_api_key"


class FetchConfig(BaseModel):
    model_config = {"extra": "forbid"}

    connect_timeout_s: float = Field(default=8.0, gt=0.0)
    total_timeout_s: float = Field(default=15.0, gt=0.0)
    max_attempts: int = Field(default=3, ge=1)
    backoff_base_s: float = Field(default=0.75, ge=0.0)
    extremes_days: int = Field(default=7, ge=1, le=14)
    heights_days: int = Field(default=3, ge=1, le=7)
    max_days_per_call: int = Field(default=3, ge=1, le=7)
    chunk_pause_ms: int = Field(default=180, ge=0)


class CacheConfig(BaseModel):
    model_config = {"extra": "forbid"}

    ttl_minutes: float = Field(default=10.0, gt=0.0)
    coordinate_decimals: int = Field(default=3, ge=0, le=6)


class ForecastConfig(BaseModel):
    model_config = {"extra": "forbid"}

    weather_base_url: str = "https://api.open-meteo.com/v1"
    marine_base_url: str = "https://marine-api.open-meteo.com/v1"
    forecast_days: int = Field(default=7, ge=1, le=16)


class AppConfig(BaseModel):
    model_config = {"extra": "forbid"}

    provider: ProviderConfig = ProviderConfig()
    fetch: FetchConfig = FetchConfig()
    cache: CacheConfig = CacheConfig()
    forecast: ForecastConfig = ForecastConfig()
    spots: list[SpotConfig] = []
