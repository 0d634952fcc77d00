"""Search-and-forecast workflow for the main weather view.

Keystrokes are debounced into city searches, a chosen city is fetched and
remembered, and the view state moves between Idle, SearchOpen and Loading.
Every forecast request carries a token from a monotonic counter; a response
is applied only if its token is still the latest one issued, so a slow
earlier request can never overwrite a newer result.
"""

import logging
from collections.abc import Callable

from skyview.config.defaults import FALLBACK_CITY
from skyview.config.schema import AppConfig
from skyview.ingest.forecast_fetcher import ForecastFetcher
from skyview.ingest.location_search import LocationSearch, SearchResult
from skyview.ingest.weather_client import WeatherApiClient
from skyview.models.location import Location
from skyview.models.weather import WeatherSnapshot
from skyview.storage.last_city_store import LastCityStore
from skyview.workflow.debouncer import Debouncer
from skyview.workflow.history import RouteParams
from skyview.workflow.state import Idle, Loading, SearchOpen, WorkflowState

logger = logging.getLogger(__name__)

Listener = Callable[[WorkflowState], None]


class SearchWorkflow:
    def __init__(
        self,
        search: LocationSearch,
        fetcher: ForecastFetcher,
        store: LastCityStore,
        fallback_city: str = FALLBACK_CITY,
        days: int = 7,
        debounce_ms: int = 1200,
        min_query_length: int = 3,
    ):
        self.search = search
        self.fetcher = fetcher
        self.store = store
        self.fallback_city = fallback_city
        self.days = days
        self.min_query_length = min_query_length
        self.debouncer = Debouncer(self._run_search, debounce_ms)
        self.state: WorkflowState = Loading(city_name="", token=0)
        self._fetch_token = 0
        self._search_token = 0
        self._listeners: list[Listener] = []

    @classmethod
    def from_config(cls, config: AppConfig) -> "SearchWorkflow":
        client = WeatherApiClient(
            api_key=config.api.api_key,
            base_url=config.api.base_url,
            timeout=config.api.timeout,
            max_retries=config.api.max_retries,
            retry_base_delay=config.api.retry_base_delay,
        )
        return cls(
            search=LocationSearch(client),
            fetcher=ForecastFetcher(client),
            store=LastCityStore(config.storage.db_path),
            fallback_city=config.forecast.fallback_city,
            days=config.forecast.days,
            debounce_ms=config.search.debounce_ms,
            min_query_length=config.search.min_query_length,
        )

    # --- Read-only views ---

    @property
    def loading(self) -> bool:
        return isinstance(self.state, Loading)

    @property
    def search_open(self) -> bool:
        return isinstance(self.state, SearchOpen)

    @property
    def snapshot(self) -> WeatherSnapshot | None:
        if isinstance(self.state, Loading):
            return self.state.previous
        return self.state.snapshot

    @property
    def candidates(self) -> list[Location]:
        if isinstance(self.state, SearchOpen):
            return list(self.state.candidates)
        return []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with every new state. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # --- Transitions ---

    async def start(self) -> WeatherSnapshot | None:
        """Load the remembered city, or the fallback city on first launch."""
        city_name = await self.store.get() or self.fallback_city
        logger.info("Starting with city %s", city_name)
        return await self._load(city_name, persist=False)

    def open_search(self) -> None:
        if isinstance(self.state, Idle):
            self._set_state(SearchOpen(snapshot=self.state.snapshot))

    def close_search(self) -> None:
        """Close the panel without choosing; candidates and pending keystrokes are dropped."""
        if isinstance(self.state, SearchOpen):
            self.debouncer.cancel()
            self._search_token += 1
            self._set_state(Idle(snapshot=self.state.snapshot))

    def toggle_search(self) -> None:
        if isinstance(self.state, SearchOpen):
            self.close_search()
        else:
            self.open_search()

    def type_text(self, text: str) -> None:
        """Feed one keystroke's worth of input. Ignored unless the search panel is open."""
        if not isinstance(self.state, SearchOpen):
            return
        self.debouncer.feed(text)

    async def select(self, location: Location) -> WeatherSnapshot | None:
        """Choose a city, fetch its forecast and remember it."""
        return await self._load(location.name, persist=True)

    async def handle_route(self, params: RouteParams | None) -> WeatherSnapshot | None:
        """Apply a city handed over from another view, same as a manual selection."""
        if params is None or not params.city_name:
            return None
        return await self.select(Location(name=params.city_name))

    async def aclose(self) -> None:
        self.debouncer.cancel()
        await self.debouncer.drain()

    # --- Internals ---

    async def _run_search(self, text: str) -> SearchResult | None:
        if not isinstance(self.state, SearchOpen):
            return None
        self._search_token += 1
        if len(text.strip()) < self.min_query_length:
            # Too short to search; results still in flight are now stale
            return None

        token = self._search_token
        result = await self.search.search(text)

        state = self.state
        if token != self._search_token or not isinstance(state, SearchOpen):
            logger.debug("Discarding stale search results for %r", text)
            return None
        self._set_state(
            SearchOpen(
                snapshot=state.snapshot,
                candidates=list(result.locations),
                search_status=result.status,
            )
        )
        return result

    async def _load(self, city_name: str, persist: bool) -> WeatherSnapshot | None:
        self.debouncer.cancel()
        self._search_token += 1
        self._fetch_token += 1
        token = self._fetch_token
        previous = self.snapshot
        self._set_state(Loading(city_name=city_name, token=token, previous=previous))

        try:
            snapshot = await self.fetcher.fetch(city_name, self.days)
        except Exception:
            logger.exception("Forecast fetch for %s raised", city_name)
            snapshot = None

        if token != self._fetch_token:
            logger.info(
                "Discarding forecast for %s (request %d superseded by %d)",
                city_name, token, self._fetch_token,
            )
            return None

        if snapshot is None:
            logger.warning("Forecast for %s unavailable, keeping previous view", city_name)
            self._set_state(Idle(snapshot=previous))
            return None

        self._set_state(Idle(snapshot=snapshot))
        if persist:
            await self.store.set(city_name)
        return snapshot

    def _set_state(self, state: WorkflowState) -> None:
        self.state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("State listener failed")
