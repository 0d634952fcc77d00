"""States of the search-and-forecast workflow.

Exactly one of these is current at any time; the workflow swaps them
wholesale instead of toggling independent flags.
"""

from dataclasses import dataclass, field
from typing import TypeAlias

from skyview.ingest.location_search import SearchStatus
from skyview.models.location import Location
from skyview.models.weather import WeatherSnapshot


@dataclass(frozen=True)
class Idle:
    snapshot: WeatherSnapshot | None = None


@dataclass(frozen=True)
class SearchOpen:
    snapshot: WeatherSnapshot | None = None
    candidates: list[Location] = field(default_factory=list)
    search_status: SearchStatus | None = None  # None until a search has run


@dataclass(frozen=True)
class Loading:
    city_name: str
    token: int
    previous: WeatherSnapshot | None = None


WorkflowState: TypeAlias = Idle | SearchOpen | Loading
