#!/usr/bin/env python3
"""
RajaOngkir - Shipping Rate Lookup from the Command Line
=======================================================

Usage:
    rajaongkir province                       # All provinces
    rajaongkir city --province 5              # Cities in one province
    rajaongkir cost 501 114 --courier jne     # Domestic cost, 1000 g
    rajaongkir waybill SOCAG00183235715 jne   # Track a shipment
    rajaongkir --help                         # Show help

Settings come from rajaongkir.yaml and RAJAONGKIR_* environment variables;
command-line options override both.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import httpx
from rich.console import Console
from rich.markup import escape

from rajaongkir.api.client import AccountTier, RateClient
from rajaongkir.api.endpoints import DEFAULT_WEIGHT, LOCATION_TYPES
from rajaongkir.core.errors import ConfigurationError, RajaOngkirError
from rajaongkir.infra.config import DEFAULT_CONFIG_PATH, ConfigManager, client_config_from
from rajaongkir.infra.logging import DEFAULT_BACKUP_COUNT, DEFAULT_MAX_BYTES, configure_logging

EXIT_OK = 0
EXIT_REQUEST_FAILED = 1
EXIT_CONFIG_ERROR = 2

console = Console()
err_console = Console(stderr=True)


def parse_header(value: str) -> tuple:
    """Parse NAME=VALUE into a (name, value) pair."""
    name, sep, header_value = value.partition("=")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {value!r}")
    return name.strip(), header_value.strip()


def _add_cost_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("origin", help="Origin ID")
    parser.add_argument("destination", help="Destination ID")
    parser.add_argument("--weight", type=int, default=DEFAULT_WEIGHT,
                        help=f"Weight in grams (default {DEFAULT_WEIGHT})")
    parser.add_argument("--courier", action="append",
                        help="Courier code; repeat for several couriers")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rajaongkir",
        description="Query the RajaOngkir shipping-rate API",
    )
    parser.add_argument("--config", help=f"YAML config file (default {DEFAULT_CONFIG_PATH})")
    parser.add_argument("--api-key", help="RajaOngkir API key")
    parser.add_argument("--tier", choices=[tier.value for tier in AccountTier],
                        help="Account tier (default starter)")
    parser.add_argument("--header", action="append", type=parse_header, default=[],
                        metavar="NAME=VALUE", help="Extra request header; repeatable")
    parser.add_argument("--timeout", type=float, help="Request timeout in seconds")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Console log level (default WARNING)")
    parser.add_argument("--log-dir", help="Also write JSON logs to this directory")
    parser.add_argument("--log-max-bytes", type=int, default=DEFAULT_MAX_BYTES,
                        help="Rotate the JSON log at this size (default 5 MiB)")
    parser.add_argument("--log-backups", type=int, default=DEFAULT_BACKUP_COUNT,
                        help=f"Rotated JSON logs to keep (default {DEFAULT_BACKUP_COUNT})")

    commands = parser.add_subparsers(dest="command", required=True)

    province = commands.add_parser("province", help="Look up provinces")
    province.add_argument("--id", dest="province_id", help="Province ID")

    city = commands.add_parser("city", help="Look up cities")
    city.add_argument("--province", dest="province_id", help="Province ID")
    city.add_argument("--id", dest="city_id", help="City ID")

    subdistrict = commands.add_parser("subdistrict", help="Look up subdistricts (pro)")
    subdistrict.add_argument("city_id", help="City ID")
    subdistrict.add_argument("--id", dest="subdistrict_id", help="Subdistrict ID")

    cost = commands.add_parser("cost", help="Calculate domestic shipping cost")
    _add_cost_arguments(cost)
    cost.add_argument("--origin-type", choices=LOCATION_TYPES)
    cost.add_argument("--destination-type", choices=LOCATION_TYPES)

    intl_origin = commands.add_parser("intl-origin", help="Look up international origins")
    intl_origin.add_argument("--id", dest="city_id", help="City ID")
    intl_origin.add_argument("--province", dest="province_id", help="Province ID")

    intl_destination = commands.add_parser("intl-destination",
                                           help="Look up international destinations")
    intl_destination.add_argument("--id", dest="country_id", help="Country ID")

    intl_cost = commands.add_parser("intl-cost", help="Calculate international shipping cost")
    _add_cost_arguments(intl_cost)

    waybill = commands.add_parser("waybill", help="Track a shipment")
    waybill.add_argument("waybill", help="Waybill number")
    waybill.add_argument("courier", help="Courier code")

    return parser


COMMANDS: Dict[str, Callable[[RateClient, argparse.Namespace], Any]] = {
    "province": lambda client, args: client.get_province(args.province_id),
    "city": lambda client, args: client.get_city(args.province_id, args.city_id),
    "subdistrict": lambda client, args: client.get_subdistrict(
        args.city_id, args.subdistrict_id
    ),
    "cost": lambda client, args: client.get_cost(
        args.origin, args.destination, args.weight, args.courier,
        args.origin_type, args.destination_type,
    ),
    "intl-origin": lambda client, args: client.get_international_origin(
        args.city_id, args.province_id
    ),
    "intl-destination": lambda client, args: client.get_international_destination(
        args.country_id
    ),
    "intl-cost": lambda client, args: client.get_international_cost(
        args.origin, args.destination, args.weight, args.courier,
    ),
    "waybill": lambda client, args: client.get_waybill(args.waybill, args.courier),
}


def build_client(args: argparse.Namespace, transport: Optional[httpx.BaseTransport] = None) -> RateClient:
    """Create a client from the config file, environment and command-line options."""
    if args.config and not Path(args.config).exists():
        raise ConfigurationError(f"Config file not found: {args.config}")

    manager = ConfigManager(args.config or DEFAULT_CONFIG_PATH)
    config = client_config_from(
        manager,
        api_key=args.api_key,
        account_tier=args.tier,
        extra_headers=dict(args.header),
        timeout_seconds=args.timeout,
    )
    return RateClient.from_config(config, transport=transport)


def main(argv: Optional[List[str]] = None, transport: Optional[httpx.BaseTransport] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    configure_logging(
        level=getattr(logging, args.log_level),
        log_dir=args.log_dir,
        file=bool(args.log_dir),
        max_bytes=args.log_max_bytes,
        backup_count=args.log_backups,
        force=True,
    )

    try:
        client = build_client(args, transport=transport)
    except ConfigurationError as e:
        err_console.print(f"[bold red]Configuration error:[/bold red] {escape(str(e))}")
        return EXIT_CONFIG_ERROR

    with client:
        try:
            result = COMMANDS[args.command](client, args)
        except RajaOngkirError as e:
            err_console.print(f"[bold red]{type(e).__name__}:[/bold red] {escape(str(e))}")
            return EXIT_REQUEST_FAILED

    console.print_json(data=result)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
