"""The history tab: a fixed list of cities that hands a pick back to the main view."""

from dataclasses import dataclass

from skyview.config.defaults import DEFAULT_HISTORY_CITIES


@dataclass(frozen=True)
class RouteParams:
    """One-shot navigation parameters passed to the main view."""

    city_name: str | None = None


class HistoryList:
    def __init__(self, cities: list[str] | tuple[str, ...] = DEFAULT_HISTORY_CITIES):
        self._cities = tuple(cities)

    def cities(self) -> list[str]:
        return list(self._cities)

    def pick(self, city_name: str) -> RouteParams:
        """Navigate back to the main view with ``city_name`` selected.

        Matching is case-insensitive; the listed spelling is used.
        """
        for name in self._cities:
            if name.casefold() == city_name.strip().casefold():
                return RouteParams(city_name=name)
        raise KeyError(f"City not in history: {city_name}")
