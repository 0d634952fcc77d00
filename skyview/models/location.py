"""Location candidates returned by the city search endpoint."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Location:
    name: str
    country: str = ""
    region: str = ""
    id: int | None = None
    lat: float | None = None
    lon: float | None = None

    @property
    def label(self) -> str:
        if self.country:
            return f"{self.name}, {self.country}"
        return self.name


def parse_location(raw: dict) -> Location | None:
    """Build a Location from one search result. Entries without a name are dropped."""
    name = str(raw.get("name") or "").strip()
    if not name:
        return None
    return Location(
        name=name,
        country=raw.get("country") or "",
        region=raw.get("region") or "",
        id=_opt_int(raw.get("id")),
        lat=_opt_float(raw.get("lat")),
        lon=_opt_float(raw.get("lon")),
    )


def parse_locations(raw: object) -> list[Location]:
    if not isinstance(raw, list):
        return []
    locations = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        loc = parse_location(item)
        if loc is not None:
            locations.append(loc)
    return locations


def _opt_int(value: object) -> int | None:
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


def _opt_float(value: object) -> float | None:
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
