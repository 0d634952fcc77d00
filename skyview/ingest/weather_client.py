"""WeatherAPI.com client for city search and multi-day forecasts."""

import asyncio
import logging

import httpx

from skyview.config.schema import WEATHERAPI_BASE_URL

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "skyview/0.1.0"
RETRY_STATUSES = (429, 503)


class WeatherApiError(Exception):
    """Raised when the weather API cannot be reached or returns an error."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class WeatherApiClient:
    """Async wrapper around the two read-only endpoints the app needs.

    A shared ``httpx.AsyncClient`` may be injected; otherwise one is opened
    per request.
    """

    def __init__(
        self,
        api_key: str = "",
        base_url: str = WEATHERAPI_BASE_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 10.0,
        max_retries: int = 1,
        retry_base_delay: float = 1.0,
        http: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay
        self._http = http

    async def search_locations(self, query: str) -> list[dict]:
        """Search cities matching a free-text fragment."""
        data = await self._get("/search.json", {"q": query})
        if not isinstance(data, list):
            raise WeatherApiError("Unexpected search response shape")
        return data

    async def get_forecast(self, city_name: str, days: int = 7) -> dict:
        """Fetch current conditions plus a ``days``-day forecast."""
        data = await self._get(
            "/forecast.json",
            {"q": city_name, "days": str(days), "aqi": "no", "alerts": "no"},
        )
        if not isinstance(data, dict):
            raise WeatherApiError("Unexpected forecast response shape")
        return data

    async def _get(self, endpoint: str, params: dict[str, str]) -> object:
        """GET with retries on 429/503 and transport errors, exponential backoff."""
        url = f"{self.base_url}{endpoint}"
        params = {"key": self.api_key, **params}
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}

        for attempt in range(self.max_retries + 1):
            try:
                resp = await self._send(url, params, headers)
            except httpx.RequestError as e:
                if attempt < self.max_retries:
                    delay = self.retry_base_delay * (2**attempt)
                    logger.warning(
                        "Weather API request error, retrying in %.1fs: %s", delay, e
                    )
                    await asyncio.sleep(delay)
                    continue
                logger.error("Weather API request failed: GET %s -> %s", endpoint, e)
                raise WeatherApiError(f"Request failed: {e}") from e

            if resp.status_code in RETRY_STATUSES and attempt < self.max_retries:
                delay = self.retry_base_delay * (2**attempt)
                logger.warning(
                    "Weather API %s returned %d, retrying in %.1fs (attempt %d/%d)",
                    endpoint, resp.status_code, delay, attempt + 1, self.max_retries,
                )
                await asyncio.sleep(delay)
                continue
            if resp.status_code >= 400:
                logger.error(
                    "Weather API %d: GET %s -> %s", resp.status_code, endpoint, resp.text
                )
                raise WeatherApiError(
                    f"HTTP {resp.status_code}: {_error_message(resp)}", resp.status_code
                )
            try:
                return resp.json()
            except ValueError as e:
                raise WeatherApiError(f"Invalid JSON from {endpoint}") from e

        raise WeatherApiError(f"Retries exhausted for {endpoint}")

    async def _send(
        self, url: str, params: dict[str, str], headers: dict[str, str]
    ) -> httpx.Response:
        if self._http is not None:
            return await self._http.get(
                url, params=params, headers=headers, timeout=self.timeout
            )
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(url, params=params, headers=headers)


def _error_message(resp: httpx.Response) -> str:
    """Pull the provider's error text out of a failed response."""
    try:
        body = resp.json()
    except ValueError:
        return resp.text
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return resp.text
