"""City search: turns a typed fragment into an ordered candidate list."""

import logging
from dataclasses import dataclass, field
from enum import StrEnum

from skyview.ingest.weather_client import WeatherApiClient
from skyview.models.location import Location, parse_locations

logger = logging.getLogger(__name__)


class SearchStatus(StrEnum):
    OK = "ok"
    NO_RESULTS = "no_results"
    FAILED = "failed"


@dataclass(frozen=True)
class SearchResult:
    status: SearchStatus
    locations: list[Location] = field(default_factory=list)


class LocationSearch:
    def __init__(self, client: WeatherApiClient):
        self.client = client

    async def search(self, text: str) -> SearchResult:
        """Query the search endpoint. Failures come back as FAILED with no candidates."""
        query = text.strip()
        try:
            raw = await self.client.search_locations(query)
        except Exception:
            logger.exception("Location search failed for %r", query)
            return SearchResult(SearchStatus.FAILED)

        locations = parse_locations(raw)
        logger.debug("Search %r returned %d candidates", query, len(locations))
        if not locations:
            return SearchResult(SearchStatus.NO_RESULTS)
        return SearchResult(SearchStatus.OK, locations)
