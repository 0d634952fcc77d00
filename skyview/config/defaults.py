"""Built-in defaults for the city shown on first launch and the history tab."""

FALLBACK_CITY = "Kokshetau"

# Key under which the last selected city is persisted
LAST_CITY_KEY = "city"

DEFAULT_HISTORY_CITIES: tuple[str, ...] = (
    "Kokshetau",
    "Astana",
    "Omsk",
    "Almaty",
)
