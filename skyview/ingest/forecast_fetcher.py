"""Forecast fetcher: retrieves current conditions and an N-day forecast for a city."""

import logging

from skyview.ingest.weather_client import WeatherApiClient
from skyview.models.weather import WeatherSnapshot, parse_snapshot

logger = logging.getLogger(__name__)


class ForecastFetcher:
    def __init__(self, client: WeatherApiClient):
        self.client = client

    async def fetch(self, city_name: str, days: int = 7) -> WeatherSnapshot | None:
        """Fetch a fresh snapshot. Returns None if the request or parsing fails."""
        try:
            raw = await self.client.get_forecast(city_name, days)
            snapshot = parse_snapshot(raw, city_name)
        except Exception:
            logger.exception("Failed to fetch forecast for %s", city_name)
            return None

        logger.info(
            "Fetched %d-day forecast for %s (%d days returned)",
            days, snapshot.location.name, len(snapshot.forecastday),
        )
        return snapshot
