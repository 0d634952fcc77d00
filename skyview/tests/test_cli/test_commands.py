"""Tests for CLI commands."""

import time
from pathlib import Path
from unittest.mock import patch

import httpx
import respx
import yaml

from skyview.cli import main

BASE = "https://test-weather.example.com/v1"


def _args(config_yaml_path: Path, *rest: str) -> list[str]:
    return ["--config", str(config_yaml_path), "--quiet", *rest]


class TestCLI:
    def test_no_command_returns_1(self, capsys):
        assert main([]) == 1

    def test_config_show_hides_api_key(self, config_yaml_path: Path, capsys):
        result = main(_args(config_yaml_path, "config", "show"))
        assert result == 0
        out = capsys.readouterr().out
        assert "debounce_ms" in out
        assert "api_key" not in out

    def test_config_set_persists(self, config_yaml_path: Path, capsys):
        result = main(_args(config_yaml_path, "config", "set", "forecast.days=3"))
        assert result == 0
        assert "3" in capsys.readouterr().out
        saved = yaml.safe_load(config_yaml_path.read_text())
        assert saved["forecast"]["days"] == 3

    def test_config_set_invalid(self, config_yaml_path: Path, capsys):
        result = main(_args(config_yaml_path, "config", "set", "forecast.days=99"))
        assert result == 1
        assert "Error" in capsys.readouterr().out

    def test_config_set_needs_equals(self, config_yaml_path: Path, capsys):
        assert main(_args(config_yaml_path, "config", "set", "forecast.days")) == 1

    def test_history_list(self, config_yaml_path: Path, capsys):
        assert main(_args(config_yaml_path, "history")) == 0
        out = capsys.readouterr().out
        for city in ("Kokshetau", "Astana", "Omsk", "Almaty"):
            assert city in out

    def test_history_unknown_city(self, config_yaml_path: Path, capsys):
        assert main(_args(config_yaml_path, "history", "--pick", "Paris")) == 1

    def test_last_none(self, config_yaml_path: Path, capsys):
        assert main(_args(config_yaml_path, "last")) == 0
        assert "fallback Kokshetau" in capsys.readouterr().out

    def test_search_too_short(self, config_yaml_path: Path, capsys):
        with respx.mock(assert_all_called=False) as mock:
            route = mock.get(f"{BASE}/search.json")
            assert main(_args(config_yaml_path, "search", "As")) == 1
            assert not route.called


class TestCLIWithApi:
    @respx.mock
    def test_forecast_fallback_city(self, config_yaml_path: Path, forecast_payload, capsys):
        route = respx.get(f"{BASE}/forecast.json").mock(
            return_value=httpx.Response(200, json=forecast_payload)
        )
        assert main(_args(config_yaml_path, "forecast")) == 0
        assert route.calls[0].request.url.params["q"] == "Kokshetau"
        assert "Astana, Kazakhstan" in capsys.readouterr().out

    @respx.mock
    def test_forecast_city_is_remembered(self, config_yaml_path: Path, forecast_payload, capsys):
        route = respx.get(f"{BASE}/forecast.json").mock(
            return_value=httpx.Response(200, json=forecast_payload)
        )
        assert main(_args(config_yaml_path, "forecast", "Almaty")) == 0
        assert main(_args(config_yaml_path, "forecast")) == 0
        assert route.calls[1].request.url.params["q"] == "Almaty"

        main(_args(config_yaml_path, "last"))
        assert "Last city: Almaty" in capsys.readouterr().out

    @respx.mock
    def test_forecast_json(self, config_yaml_path: Path, forecast_payload, capsys):
        respx.get(f"{BASE}/forecast.json").mock(
            return_value=httpx.Response(200, json=forecast_payload)
        )
        assert main(_args(config_yaml_path, "forecast", "--json")) == 0
        assert '"weekday": "Wednesday"' in capsys.readouterr().out

    @respx.mock
    def test_forecast_failure(self, config_yaml_path: Path, capsys):
        respx.get(f"{BASE}/forecast.json").mock(
            return_value=httpx.Response(400, json={"error": {"message": "bad"}})
        )
        assert main(_args(config_yaml_path, "forecast", "Nowhere")) == 1
        assert "unavailable" in capsys.readouterr().out

    @respx.mock
    def test_search_lists_candidates(self, config_yaml_path: Path, search_payload, capsys):
        respx.get(f"{BASE}/search.json").mock(
            return_value=httpx.Response(200, json=search_payload)
        )
        assert main(_args(config_yaml_path, "search", "Ast")) == 0
        out = capsys.readouterr().out
        assert "1. Astana, Kazakhstan" in out
        assert "3. Astoria" in out

    @respx.mock
    def test_search_pick(self, config_yaml_path: Path, search_payload, forecast_payload, capsys):
        respx.get(f"{BASE}/search.json").mock(
            return_value=httpx.Response(200, json=search_payload)
        )
        forecast = respx.get(f"{BASE}/forecast.json").mock(
            return_value=httpx.Response(200, json=forecast_payload)
        )
        assert main(_args(config_yaml_path, "search", "Ast", "--pick", "2")) == 0
        assert forecast.calls[0].request.url.params["q"] == "Astara"

    @respx.mock
    def test_search_failed(self, config_yaml_path: Path, capsys):
        respx.get(f"{BASE}/search.json").mock(return_value=httpx.Response(500))
        assert main(_args(config_yaml_path, "search", "Omsk")) == 1
        assert "Search failed" in capsys.readouterr().out

    @respx.mock
    def test_history_pick(self, config_yaml_path: Path, forecast_payload, capsys):
        route = respx.get(f"{BASE}/forecast.json").mock(
            return_value=httpx.Response(200, json=forecast_payload)
        )
        assert main(_args(config_yaml_path, "history", "--pick", "omsk")) == 0
        assert route.calls[0].request.url.params["q"] == "Omsk"
        main(_args(config_yaml_path, "last"))
        assert "Last city: Omsk" in capsys.readouterr().out


class TestConfigFile:
    def test_config_set_keeps_api_key(self, tmp_path: Path, capsys):
        path = tmp_path / "skyview.yaml"
        with open(path, "w") as f:
            yaml.dump({"api": {"api_key": "SECRET"}}, f)

        assert main(["--config", str(path), "--quiet", "config", "set", "forecast.days=3"]) == 0
        saved = yaml.safe_load(path.read_text())
        assert saved["api"]["api_key"] == "SECRET"
        assert saved["forecast"]["days"] == 3

    def test_config_set_api_key(self, tmp_path: Path, capsys):
        path = tmp_path / "skyview.yaml"
        assert main(["--config", str(path), "--quiet", "config", "set", "api.api_key=NEW"]) == 0
        assert yaml.safe_load(path.read_text())["api"]["api_key"] == "NEW"

    def test_env_api_key_not_saved(self, tmp_path: Path, monkeypatch, capsys):
        monkeypatch.setenv("WEATHERAPI_KEY", "from-env")
        path = tmp_path / "skyview.yaml"
        assert main(["--config", str(path), "--quiet", "config", "set", "forecast.days=3"]) == 0
        assert "from-env" not in path.read_text()

    def test_db_override_not_saved(self, config_yaml_path: Path, tmp_path: Path, capsys):
        other_db = str(tmp_path / "other.db")
        result = main([
            "--config", str(config_yaml_path), "--db", other_db, "--quiet",
            "config", "set", "forecast.days=3",
        ])
        assert result == 0
        saved = yaml.safe_load(config_yaml_path.read_text())
        assert saved["storage"]["db_path"] == str(tmp_path / "app.db")

    @respx.mock
    def test_db_override_used_at_runtime(self, config_yaml_path: Path, tmp_path: Path, forecast_payload, capsys):
        respx.get(f"{BASE}/forecast.json").mock(
            return_value=httpx.Response(200, json=forecast_payload)
        )
        other_db = tmp_path / "other.db"
        assert main(_args(config_yaml_path, "--db", str(other_db), "forecast", "Omsk")) == 0
        assert other_db.exists()
        assert not (tmp_path / "app.db").exists()


class TestLastCommand:
    @respx.mock
    def test_forget(self, config_yaml_path: Path, forecast_payload, capsys):
        respx.get(f"{BASE}/forecast.json").mock(
            return_value=httpx.Response(200, json=forecast_payload)
        )
        assert main(_args(config_yaml_path, "forecast", "Almaty")) == 0
        assert main(_args(config_yaml_path, "last", "--forget")) == 0
        capsys.readouterr()

        main(_args(config_yaml_path, "last"))
        assert "none (fallback Kokshetau)" in capsys.readouterr().out


def _scripted_input(lines: list[str], wait_before: set[str]):
    """Return an ``input`` replacement that replays ``lines``.

    Lines in ``wait_before`` are delayed so the debounced search can finish.
    """
    def fake_input(prompt: str = "") -> str:
        line = lines.pop(0) if lines else "q"
        if line in wait_before:
            time.sleep(0.3)
        return line

    return fake_input


class TestShell:
    @respx.mock
    def test_search_and_pick(self, config_yaml_path: Path, search_payload, forecast_payload, capsys):
        search = respx.get(f"{BASE}/search.json").mock(
            return_value=httpx.Response(200, json=search_payload)
        )
        forecast = respx.get(f"{BASE}/forecast.json").mock(
            return_value=httpx.Response(200, json=forecast_payload)
        )
        fake_input = _scripted_input(["/", "Ast", "1", "q"], wait_before={"1"})

        with patch("builtins.input", side_effect=fake_input):
            assert main(_args(config_yaml_path, "shell")) == 0

        assert search.call_count == 1
        assert search.calls[0].request.url.params["q"] == "Ast"
        assert [c.request.url.params["q"] for c in forecast.calls] == ["Kokshetau", "Astana"]

        out = capsys.readouterr().out
        assert "Search city" in out
        assert "1. Astana, Kazakhstan" in out
        # The session ends on the fetched forecast with the panel closed
        tail = out[out.rindex("Loading..."):]
        assert "Astana, Kazakhstan" in tail
        assert "Search city" not in tail

        main(_args(config_yaml_path, "last"))
        assert "Last city: Astana" in capsys.readouterr().out

    @respx.mock
    def test_close_panel_and_quit_on_eof(self, config_yaml_path: Path, forecast_payload, capsys):
        respx.get(f"{BASE}/forecast.json").mock(
            return_value=httpx.Response(200, json=forecast_payload)
        )
        lines = iter(["/", "/"])

        def fake_input(prompt: str = "") -> str:
            for line in lines:
                return line
            raise EOFError

        with patch("builtins.input", side_effect=fake_input):
            assert main(_args(config_yaml_path, "shell")) == 0

        out = capsys.readouterr().out
        # Closing without choosing re-renders the previous forecast
        assert out.count("Astana, Kazakhstan") == 2
