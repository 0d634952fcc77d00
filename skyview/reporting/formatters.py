"""Output formatters for weather snapshots, search candidates and history."""

import json
from dataclasses import asdict

from skyview.ingest.location_search import SearchStatus
from skyview.models.location import Location
from skyview.models.weather import WeatherSnapshot
from skyview.workflow.state import Idle, Loading, SearchOpen, WorkflowState

PLACEHOLDER = "-"


def _fmt(value: float | None, suffix: str = "") -> str:
    if value is None:
        return PLACEHOLDER
    return f"{value:g}{suffix}"


def _text(value: str) -> str:
    return value or PLACEHOLDER


def format_snapshot_text(s: WeatherSnapshot) -> str:
    """Plain text rendering of the main weather view."""
    today = s.today
    lines = [
        f"{_text(s.location.name)}, {_text(s.location.country)}",
        f"{_fmt(s.current.temp_c, '°')} {_text(s.current.condition.text)}",
        f"Wind: {_fmt(s.current.wind_kph, 'km')} | "
        f"Humidity: {_fmt(s.current.humidity, '%')} | "
        f"Sunrise: {_text(today.astro.sunrise if today else '')}",
    ]
    if s.forecastday:
        lines.append("Daily forecast")
        for day in s.forecastday:
            lines.append(
                f"  {_text(day.weekday):<10} {_fmt(day.day.avgtemp_c, '°'):>7}  "
                f"{_text(day.day.condition.text)}"
            )
    return "\n".join(lines)


def format_snapshot_json(s: WeatherSnapshot) -> str:
    """JSON rendering for programmatic consumption."""
    data = asdict(s)
    for day, raw in zip(s.forecastday, data["forecastday"], strict=True):
        raw["weekday"] = day.weekday
    return json.dumps(data, indent=2, ensure_ascii=False)


def format_candidates(
    locations: list[Location], status: SearchStatus | None = None
) -> str:
    if status == SearchStatus.FAILED:
        return "Search failed"
    if not locations:
        return "No matches"
    return "\n".join(f"{i}. {loc.label}" for i, loc in enumerate(locations, 1))


def format_history(cities: list[str]) -> str:
    lines = ["Search History"]
    lines.extend(f"  {name}" for name in cities)
    return "\n".join(lines)


def format_state(state: WorkflowState) -> str:
    """Render whatever the main view currently shows."""
    if isinstance(state, Loading):
        return "Loading..."
    if isinstance(state, SearchOpen):
        if state.search_status is None:
            return "Search city"
        return format_candidates(state.candidates, state.search_status)
    if isinstance(state, Idle) and state.snapshot is not None:
        return format_snapshot_text(state.snapshot)
    return "No forecast available"
