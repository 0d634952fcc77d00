"""CLI entry point for the weather lookup app."""

import argparse
import asyncio
import logging

from skyview.config.loader import get_config_value, load_config, save_config, set_config_value
from skyview.config.schema import AppConfig
from skyview.ingest.location_search import SearchStatus
from skyview.models.location import Location
from skyview.reporting.formatters import (
    format_candidates,
    format_history,
    format_snapshot_json,
    format_snapshot_text,
    format_state,
)
from skyview.workflow.history import HistoryList
from skyview.workflow.search_workflow import SearchWorkflow
from skyview.workflow.state import SearchOpen

DEFAULT_CONFIG = "skyview.yaml"

SHELL_HELP = """Commands:
  /        open or close the search panel
  <text>   type into the search panel
  <n>      choose candidate n
  h        show history, h <city> to open one
  q        quit"""


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="skyview",
        description="City weather lookup",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG, help="Config YAML path"
    )
    parser.add_argument("--db", help="SQLite DB path (overrides config)")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Warnings only")

    sub = parser.add_subparsers(dest="command")

    # forecast
    fc_p = sub.add_parser("forecast", help="Show current weather and forecast")
    fc_p.add_argument("city", nargs="?", help="City name (default: last viewed)")
    fc_p.add_argument("--json", action="store_true", help="JSON output")

    # search
    search_p = sub.add_parser("search", help="Search cities by name")
    search_p.add_argument("query", help="City name fragment")
    search_p.add_argument(
        "--pick", type=int, metavar="N", help="Open the N-th candidate"
    )

    # history
    hist_p = sub.add_parser("history", help="List previously searched cities")
    hist_p.add_argument("--pick", metavar="CITY", help="Open a city from the list")

    # last
    last_p = sub.add_parser("last", help="Show the remembered city")
    last_p.add_argument(
        "--forget", action="store_true", help="Clear the remembered city"
    )

    # shell
    sub.add_parser("shell", help="Interactive search session")

    # config show / config set
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    set_p = config_sub.add_parser("set", help="Set a config value")
    set_p.add_argument("keyvalue", help="key=value to set")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)
    if args.command == "config":
        return _cmd_config(config, args)

    # --db overrides the database for this run only
    if args.db:
        config = config.model_copy(
            update={"storage": config.storage.model_copy(update={"db_path": args.db})}
        )

    if args.command == "forecast":
        return asyncio.run(_cmd_forecast(config, args))
    elif args.command == "search":
        return asyncio.run(_cmd_search(config, args))
    elif args.command == "history":
        return asyncio.run(_cmd_history(config, args))
    elif args.command == "last":
        return asyncio.run(_cmd_last(config, args))
    elif args.command == "shell":
        return asyncio.run(_cmd_shell(config))
    else:
        parser.print_help()
        return 1


async def _cmd_forecast(config: AppConfig, args) -> int:
    workflow = SearchWorkflow.from_config(config)
    if args.city:
        snapshot = await workflow.select(Location(name=args.city))
    else:
        snapshot = await workflow.start()
    if snapshot is None:
        print("Error: forecast unavailable")
        return 1
    print(format_snapshot_json(snapshot) if args.json else format_snapshot_text(snapshot))
    return 0


async def _cmd_search(config: AppConfig, args) -> int:
    if len(args.query.strip()) < config.search.min_query_length:
        print(
            f"Error: query must be at least {config.search.min_query_length} characters"
        )
        return 1
    workflow = SearchWorkflow.from_config(config)
    result = await workflow.search.search(args.query)
    print(format_candidates(result.locations, result.status))
    if result.status == SearchStatus.FAILED:
        return 1

    if args.pick is None:
        return 0
    if not 1 <= args.pick <= len(result.locations):
        print(f"Error: no candidate {args.pick}")
        return 1
    snapshot = await workflow.select(result.locations[args.pick - 1])
    if snapshot is None:
        print("Error: forecast unavailable")
        return 1
    print(format_snapshot_text(snapshot))
    return 0


async def _cmd_history(config: AppConfig, args) -> int:
    history = HistoryList(config.history.cities)
    if args.pick is None:
        print(format_history(history.cities()))
        return 0
    try:
        params = history.pick(args.pick)
    except KeyError as e:
        print(f"Error: {e.args[0]}")
        return 1
    workflow = SearchWorkflow.from_config(config)
    snapshot = await workflow.handle_route(params)
    if snapshot is None:
        print("Error: forecast unavailable")
        return 1
    print(format_snapshot_text(snapshot))
    return 0


async def _cmd_last(config: AppConfig, args) -> int:
    workflow = SearchWorkflow.from_config(config)
    if args.forget:
        await workflow.store.clear()
        print(f"Last city cleared (fallback {config.forecast.fallback_city})")
        return 0
    city = await workflow.store.get()
    if city:
        print(f"Last city: {city}")
    else:
        print(f"Last city: none (fallback {config.forecast.fallback_city})")
    return 0


async def _cmd_shell(config: AppConfig) -> int:
    workflow = SearchWorkflow.from_config(config)
    history = HistoryList(config.history.cities)
    unsubscribe = workflow.subscribe(lambda state: print(format_state(state)))
    print(SHELL_HELP)
    await workflow.start()

    try:
        while True:
            try:
                line = await asyncio.to_thread(input, "> ")
            except EOFError:
                break
            cmd = line.strip()
            if cmd == "q":
                break
            elif cmd == "/":
                workflow.toggle_search()
            elif cmd == "h":
                print(format_history(history.cities()))
            elif cmd.startswith("h "):
                try:
                    await workflow.handle_route(history.pick(cmd[2:]))
                except KeyError as e:
                    print(f"Error: {e.args[0]}")
            elif cmd.isdigit() and isinstance(workflow.state, SearchOpen):
                candidates = workflow.candidates
                index = int(cmd)
                if 1 <= index <= len(candidates):
                    await workflow.select(candidates[index - 1])
                else:
                    print(f"Error: no candidate {index}")
            elif workflow.search_open:
                workflow.type_text(line)
            elif cmd:
                print(SHELL_HELP)
    finally:
        unsubscribe()
        await workflow.aclose()
    return 0


def _cmd_config(config: AppConfig, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2, exclude={"api": {"api_key"}}))
        return 0
    elif args.config_command == "set":
        kv = args.keyvalue
        if "=" not in kv:
            print("Error: use key=value format")
            return 1
        key, value = kv.split("=", 1)
        try:
            new_config = set_config_value(config, key.strip(), value.strip())
            save_config(new_config, args.config)
            print(f"Set {key} = {get_config_value(new_config, key.strip())}")
            return 0
        except Exception as e:
            print(f"Error: {e}")
            return 1
    else:
        print("Use: config show | config set key=value")
        return 1
