"""Weather snapshot models.

Every field the forecast endpoint may omit is defaulted while parsing:
absent text becomes ``""`` and absent numbers become ``None``. Renderers
can read the model directly without guarding nested lookups.
"""

from dataclasses import dataclass, field
from datetime import date

from skyview.models.location import Location, parse_location


@dataclass(frozen=True)
class Condition:
    text: str = ""


@dataclass(frozen=True)
class CurrentConditions:
    temp_c: float | None = None
    condition: Condition = Condition()
    wind_kph: float | None = None
    humidity: float | None = None


@dataclass(frozen=True)
class Astro:
    sunrise: str = ""
    sunset: str = ""


@dataclass(frozen=True)
class DaySummary:
    avgtemp_c: float | None = None
    maxtemp_c: float | None = None
    mintemp_c: float | None = None
    condition: Condition = Condition()


@dataclass(frozen=True)
class DayForecast:
    date: str = ""  # YYYY-MM-DD
    astro: Astro = Astro()
    day: DaySummary = DaySummary()

    @property
    def weekday(self) -> str:
        try:
            return date.fromisoformat(self.date).strftime("%A")
        except ValueError:
            return ""


@dataclass(frozen=True)
class WeatherSnapshot:
    location: Location
    current: CurrentConditions = CurrentConditions()
    forecastday: list[DayForecast] = field(default_factory=list)

    @property
    def today(self) -> DayForecast | None:
        return self.forecastday[0] if self.forecastday else None


def parse_snapshot(raw: dict, city_name: str = "") -> WeatherSnapshot:
    """Build a WeatherSnapshot from a forecast response.

    ``city_name`` names the location when the response carries none.
    """
    loc_raw = _dict(raw.get("location"))
    location = parse_location(loc_raw) or Location(name=city_name)

    cur = _dict(raw.get("current"))
    current = CurrentConditions(
        temp_c=_num(cur.get("temp_c")),
        condition=_condition(cur.get("condition")),
        wind_kph=_num(cur.get("wind_kph")),
        humidity=_num(cur.get("humidity")),
    )

    days_raw = _dict(raw.get("forecast")).get("forecastday")
    days: list[DayForecast] = []
    for d in days_raw if isinstance(days_raw, list) else []:
        d = _dict(d)
        astro = _dict(d.get("astro"))
        day = _dict(d.get("day"))
        days.append(
            DayForecast(
                date=str(d.get("date") or ""),
                astro=Astro(
                    sunrise=astro.get("sunrise") or "",
                    sunset=astro.get("sunset") or "",
                ),
                day=DaySummary(
                    avgtemp_c=_num(day.get("avgtemp_c")),
                    maxtemp_c=_num(day.get("maxtemp_c")),
                    mintemp_c=_num(day.get("mintemp_c")),
                    condition=_condition(day.get("condition")),
                ),
            )
        )

    return WeatherSnapshot(location=location, current=current, forecastday=days)


def _dict(value: object) -> dict:
    return value if isinstance(value, dict) else {}


def _condition(value: object) -> Condition:
    return Condition(text=str(_dict(value).get("text") or "").strip())


def _num(value: object) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
