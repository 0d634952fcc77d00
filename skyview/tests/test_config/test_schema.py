"""Tests for config schema validation."""

import pytest
from pydantic import ValidationError

from skyview.config.schema import (
    ApiConfig,
    AppConfig,
    ForecastConfig,
    HistoryConfig,
    SearchConfig,
)


class TestAppConfig:
    def test_defaults(self):
        config = AppConfig()
        assert config.search.debounce_ms == 1200
        assert config.search.min_query_length == 3
        assert config.forecast.days == 7
        assert config.forecast.fallback_city == "Kokshetau"
        assert config.api.base_url == "https://api.weatherapi.com/v1"

    def test_extra_fields_rejected(self):
        with pytest.raises(ValidationError, match="Extra inputs are not permitted"):
            AppConfig(unknown_field="bad")

    def test_nested_extra_fields_rejected(self):
        with pytest.raises(ValidationError, match="Extra inputs are not permitted"):
            SearchConfig(debounce_ms=100, bogus=True)


class TestBounds:
    def test_days_upper_bound(self):
        with pytest.raises(ValidationError):
            ForecastConfig(days=15)

    def test_days_lower_bound(self):
        with pytest.raises(ValidationError):
            ForecastConfig(days=0)

    def test_negative_debounce(self):
        with pytest.raises(ValidationError):
            SearchConfig(debounce_ms=-1)

    def test_retries_capped(self):
        with pytest.raises(ValidationError):
            ApiConfig(max_retries=10)

    def test_timeout_positive(self):
        with pytest.raises(ValidationError):
            ApiConfig(timeout=0)

    def test_empty_fallback_city(self):
        with pytest.raises(ValidationError):
            ForecastConfig(fallback_city="")


class TestHistoryConfig:
    def test_default_cities(self):
        assert HistoryConfig().cities == ["Kokshetau", "Astana", "Omsk", "Almaty"]

    def test_default_list_not_shared(self):
        a = HistoryConfig()
        a.cities.append("Pavlodar")
        assert "Pavlodar" not in HistoryConfig().cities
