"""Command-line interface for the netinfo agent."""

import argparse
import json
import logging
import sys
from typing import List, Optional

from . import __version__
from .config import DEFAULT_CONFIG_PATH, AgentConfig, ConfigManager
from .errors import EnumerationFailed
from .transport import SnapshotPublisher, TransportError
from .collectors import (
    InterfaceRecord,
    NetworkScanner,
    build_payload,
    collect_host,
)

logger = logging.getLogger("netinfo-agent")


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def load_config(args: argparse.Namespace) -> AgentConfig:
    """Load the config file and apply command-line overrides."""
    config = ConfigManager(args.config).load_or_default()

    if getattr(args, "sysfs_root", None):
        config.sysfs_root = args.sysfs_root
    if getattr(args, "no_ipv6", False):
        config.include_ipv6 = False
    if getattr(args, "api_url", None):
        config.api_url = args.api_url

    return config


def take_snapshot(config: AgentConfig) -> List[InterfaceRecord]:
    """Run one scan and materialize the records."""
    scanner = NetworkScanner(include_ipv6=config.include_ipv6, sysfs_root=config.sysfs_root)
    records = list(scanner.scan())
    logger.debug(f"Collected {len(records)} interfaces")
    return records


def format_row(record: InterfaceRecord) -> str:
    return "\t".join("" if value is None else str(value) for value in record.as_row())


def cmd_snapshot(args: argparse.Namespace) -> int:
    """Collect a snapshot and print it."""
    try:
        config = load_config(args)
        records = take_snapshot(config)

        if args.rows:
            print("\t".join(InterfaceRecord.columns()))
            for record in records:
                print(format_row(record))
            return 0

        payload = build_payload(
            (record.as_dict() for record in records),
            collect_host(config.tags),
        )
        print(json.dumps(payload, indent=2))
        return 0

    except EnumerationFailed as e:
        logger.error(f"Snapshot failed: {e}")
        return 1
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        return 1


def cmd_send(args: argparse.Namespace) -> int:
    """Collect a snapshot and send it to the API."""
    try:
        config = load_config(args)
        if not config.api_url:
            logger.error(f"No API URL configured. Use --api-url or set api_url in {args.config}.")
            return 1

        logger.info("Collecting network snapshot...")
        records = take_snapshot(config)
        payload = build_payload(
            (record.as_dict() for record in records),
            collect_host(config.tags),
        )

        logger.info(f"Sending {len(records)} interfaces to {config.api_url}...")
        publisher = SnapshotPublisher(config.api_url, config)
        response = publisher.publish(payload)
        logger.info(f"Snapshot sent successfully: {response}")
        return 0

    except EnumerationFailed as e:
        logger.error(f"Snapshot failed: {e}")
        return 1
    except TransportError as e:
        logger.error(f"Failed to send snapshot: {e}")
        return 1
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        return 1


def _add_scan_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--sysfs-root",
        help="Root of the sysfs net class (default: /sys/class/net)",
    )
    parser.add_argument(
        "--no-ipv6",
        action="store_true",
        help="Leave the ipv6_address field empty",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="netinfo-agent",
        description="netinfo-agent - network interface address and counter snapshots",
    )

    parser.add_argument("--version", action="version", version=f"netinfo-agent {__version__}")
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to the JSON config file (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Snapshot command
    snapshot_parser = subparsers.add_parser("snapshot", help="Print a snapshot")
    _add_scan_arguments(snapshot_parser)
    snapshot_parser.add_argument(
        "--rows",
        action="store_true",
        help="Print tab-separated rows instead of JSON",
    )

    # Send command
    send_parser = subparsers.add_parser("send", help="Collect and send a snapshot")
    _add_scan_arguments(send_parser)
    send_parser.add_argument("--api-url", help="Ingest API base URL")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if args.command == "snapshot":
        return cmd_snapshot(args)
    elif args.command == "send":
        return cmd_send(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
