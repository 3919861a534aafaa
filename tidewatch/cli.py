"""CLI entry point for the tide and conditions client."""

import argparse
import asyncio
import logging
import sqlite3

from tidewatch.config.loader import (
    config_hash,
    dump_config,
    get_config_value,
    load_config,
    save_config,
    set_config_value,
)
from tidewatch.config.schema import AppConfig
from tidewatch.ingest.errors import NotAvailable
from tidewatch.ingest.http_fetcher import ResilientFetcher
from tidewatch.ingest.open_meteo_client import OpenMeteoClient
from tidewatch.ingest.secret_resolver import SecretResolver, sanitize_api_key
from tidewatch.ingest.tide_cache import TideCache
from tidewatch.ingest.tide_client import WorldTidesClient
from tidewatch.models.reporting import RefreshResult
from tidewatch.pipeline.refresh_pipeline import LocationRefresh
from tidewatch.reporting.formatters import format_refresh_json, format_refresh_text
from tidewatch.storage.database import open_database
from tidewatch.storage.secret_repo import SqliteSecretStore

DEFAULT_CONFIG = "ops/configs/default.yaml"
DEFAULT_DB = "data/tidewatch.db"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="tidewatch",
        description="Tide, weather and wave conditions for a coastal location",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG, help="Config YAML path"
    )
    parser.add_argument("--db", default=DEFAULT_DB, help="SQLite DB path")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command")

    # tides
    tides_p = sub.add_parser("tides", help="Refresh conditions for a location")
    tides_p.add_argument("--spot", help="Configured spot slug")
    tides_p.add_argument("--lat", type=float, help="Latitude")
    tides_p.add_argument("--lon", type=float, help="Longitude")
    tides_p.add_argument("--json", action="store_true", help="Print JSON")

    # spots
    sub.add_parser("spots", help="List configured spots")

    # secret set / secret show
    secret_p = sub.add_parser("secret", help="Provider API key")
    secret_sub = secret_p.add_subparsers(dest="secret_command")
    secret_set = secret_sub.add_parser("set", help="Store the API key")
    secret_set.add_argument("value")
    secret_sub.add_parser("show", help="Show the resolved key (masked)")

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

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)

    if args.command == "tides":
        return _cmd_tides(config, args)
    elif args.command == "spots":
        return _cmd_spots(config)
    elif args.command == "secret":
        return _cmd_secret(config, args)
    elif args.command == "config":
        return _cmd_config(config, args)

    return 1


def _cmd_tides(config: AppConfig, args: argparse.Namespace) -> int:
    if args.spot:
        spot = next((s for s in config.spots if s.slug == args.spot), None)
        if spot is None:
            print(f"Unknown spot: {args.spot}")
            return 1
        lat, lon = spot.latitude, spot.longitude
    elif args.lat is not None and args.lon is not None:
        lat, lon = args.lat, args.lon
    else:
        print("Give --spot or both --lat and --lon")
        return 1

    conn = open_database(args.db)
    try:
        result = asyncio.run(refresh_location(config, conn, lat, lon))
    finally:
        conn.close()

    print(format_refresh_json(result) if args.json else format_refresh_text(result))
    if result.tides is None and result.weather is None:
        return 2
    return 0


async def refresh_location(
    config: AppConfig, conn: sqlite3.Connection, lat: float, lon: float
) -> RefreshResult:
    """Wire up the clients for one refresh and run it."""
    async with ResilientFetcher(config.fetch) as fetcher:
        resolver = SecretResolver(SqliteSecretStore(conn), config.provider)
        tide_client = WorldTidesClient(fetcher, resolver, config.provider, config.fetch)
        cache = TideCache(tide_client, config.cache)
        weather = OpenMeteoClient(config.forecast, fetcher, fallback_spots=config.spots)
        pipeline = LocationRefresh(weather, cache, conn=conn)
        return await pipeline.refresh(lat, lon)


def _cmd_spots(config: AppConfig) -> int:
    for s in config.spots:
        print(f"  {s.slug:<12} {s.name:<14} {s.latitude:>9.4f} {s.longitude:>9.4f}")
    return 0


def _cmd_secret(config: AppConfig, args: argparse.Namespace) -> int:
    conn = open_database(args.db)
    try:
        store = SqliteSecretStore(conn)
        if args.secret_command == "set":
            key = sanitize_api_key(args.value)
            if not key:
                print("Empty key, nothing stored")
                return 1
            store.set(config.provider.secret_name, key)
            print(f"Stored API key {_mask(key)}")
            return 0
        elif args.secret_command == "show":
            try:
                key = SecretResolver(store, config.provider).resolve_api_key()
            except NotAvailable as e:
                print(f"No API key: {e.user_message}")
                return 2
            print(_mask(key))
            return 0
        print("Usage: secret [set VALUE|show]")
        return 1
    finally:
        conn.close()


def _mask(key: str) -> str:
    if len(key) <= 8:
        return "*" * len(key)
    return f"{key[:4]}{'*' * (len(key) - 8)}{key[-4:]}"


def _cmd_config(config: AppConfig, args: argparse.Namespace) -> int:
    if args.config_command == "show":
        print(f"# config hash {config_hash(config)}")
        print(dump_config(config))
        return 0
    elif args.config_command == "set":
        if "=" not in args.keyvalue:
            print("Usage: config set key=value")
            return 1
        key, value = args.keyvalue.split("=", 1)
        try:
            get_config_value(config, key)
            new_config = set_config_value(config, key, value)
        except (KeyError, ValueError) as e:
            print(f"Error: {e}")
            return 1
        save_config(new_config, args.config)
        print(f"Set {key} = {get_config_value(new_config, key)}")
        return 0
    print("Usage: config [show|set key=value]")
    return 1
