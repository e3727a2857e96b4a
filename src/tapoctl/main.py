#!/usr/bin/env python3
"""tapoctl CLI - Main entry point for the tapoctl application.

This script parses the command line, resolves device settings from
arguments, environment and configuration file, and dispatches the
on/off/info/energy commands to the plug client.
"""

import argparse
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from .config.settings import Settings, load_settings
from .exceptions import TapoCtlError
from .services.plug_client import PlugClient
from .utils.console import print_error, print_success, print_warning
from .utils.logging import get_logger, operation_context, setup_logging
from .utils.report import (
    build_energy_metrics,
    format_device_info,
    format_energy_usage,
    to_json,
)


def parse_label(value: str) -> Tuple[str, str]:
    """Parse a KEY=VALUE metric label argument."""
    key, separator, label_value = value.partition("=")
    key = key.strip()
    if not separator or not key:
        raise argparse.ArgumentTypeError(
            f"Invalid label {value!r}, expected KEY=VALUE"
        )
    return key, label_value


def _create_common_parser() -> argparse.ArgumentParser:
    """Options shared by every subcommand."""
    common = argparse.ArgumentParser(add_help=False)

    # Device arguments
    common.add_argument(
        "address",
        nargs="?",
        help="Device IP address (env: TAPO_ADDRESS)",
    )
    common.add_argument(
        "username",
        nargs="?",
        help="Device username (env: TAPO_USER)",
    )
    common.add_argument(
        "password",
        nargs="?",
        help="Device password (env: TAPO_PASSWORD)",
    )
    common.add_argument(
        "--timeout",
        type=int,
        help="Device request timeout in seconds (default: 30)",
    )

    # Logging options
    common.add_argument(
        "--log-level",
        choices=["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level (default: WARNING)",
    )
    common.add_argument(
        "--log-file",
        type=Path,
        help="Also write JSON logs to this file",
    )
    common.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose console output (equivalent to --log-level DEBUG)",
    )
    common.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress all log output except errors",
    )

    # Configuration file option
    common.add_argument(
        "--config",
        type=Path,
        help="Configuration file path",
    )

    return common


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="tapoctl",
        description="Controls TP-Link Tapo Smart Plugs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s on 192.168.1.20 me@example.com secret
  TAPO_ADDRESS=192.168.1.20 %(prog)s info --json
  %(prog)s energy --choria --label site=home --label room=office
        """,
    )
    common = _create_common_parser()

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    subparsers.add_parser("on", parents=[common], help="Turns the device on")
    subparsers.add_parser("off", parents=[common], help="Turns the device off")

    info = subparsers.add_parser(
        "info", parents=[common], help="Shows device information"
    )
    info.add_argument("--json", action="store_true", help="Produce JSON output")

    energy = subparsers.add_parser(
        "energy",
        parents=[common],
        help="Retrieves device energy usage statistics",
    )
    output_group = energy.add_mutually_exclusive_group()
    output_group.add_argument(
        "--json", action="store_true", help="Produce JSON output"
    )
    output_group.add_argument(
        "--choria", action="store_true", help="Produce Choria Metric output"
    )
    energy.add_argument(
        "--label",
        action="append",
        type=parse_label,
        metavar="KEY=VALUE",
        help="Labels to apply to Choria Metric output (repeatable)",
    )

    return parser


def validate_arguments(args: argparse.Namespace) -> None:
    """Validate command line arguments."""
    if args.quiet and args.verbose:
        raise ValueError("Cannot use both --quiet and --verbose flags")

    if args.timeout is not None and args.timeout <= 0:
        raise ValueError("Timeout must be a positive number of seconds")


def merge_settings_with_args(args: argparse.Namespace, settings: Settings) -> Settings:
    """Merge command line arguments with settings."""
    updates: Dict[str, object] = {}

    # Device settings
    if args.address:
        updates["address"] = args.address
    if args.username:
        updates["user"] = args.username
    if args.password:
        updates["password"] = args.password
    if args.timeout is not None:
        updates["timeout_seconds"] = args.timeout

    # Report settings
    if getattr(args, "json", False):
        updates["output_format"] = "json"
    elif getattr(args, "choria", False):
        updates["output_format"] = "choria"
    labels = getattr(args, "label", None)
    if labels:
        updates["labels"] = dict(labels)

    # Logging settings
    if args.log_level:
        updates["log_level"] = args.log_level
    if args.log_file:
        updates["log_dir"] = args.log_file.parent
        updates["log_file"] = args.log_file.name
    if args.verbose:
        updates["verbose"] = True
    if args.quiet:
        updates["quiet"] = True

    current_dict = settings.model_dump()
    current_dict.update(updates)

    return Settings(**current_dict)


def setup_application_logging(settings: Settings) -> None:
    """Set up application logging based on settings."""
    password = settings.password.get_secret_value() if settings.password else ""
    setup_logging(
        log_level=settings.get_effective_log_level(),
        log_path=settings.log_dir / settings.log_file if settings.log_file else None,
        max_file_size=settings.log_file_max_size,
        backup_count=settings.log_file_backup_count,
        console_output=True,
        secrets=[password],
    )


def report_settings_warnings(settings: Settings) -> None:
    """Show configuration warnings for the merged settings."""
    result = settings.validate_comprehensive()
    result.raise_if_invalid()

    if settings.quiet:
        return
    for warning in result.warnings:
        print_warning(warning, title="Warning")


def _print_lines(lines: List[str]) -> None:
    for line in lines:
        print(line)


def run_on(client: PlugClient, settings: Settings) -> int:
    """Turn the device on."""
    client.power_on()
    print_success("Powered on")
    return 0


def run_off(client: PlugClient, settings: Settings) -> int:
    """Turn the device off."""
    client.power_off()
    print_success("Powered off")
    return 0


def run_info(client: PlugClient, settings: Settings) -> int:
    """Show device information as a report or JSON."""
    info = client.get_device_info()

    if settings.output_format == "json":
        print(to_json(info.raw))
    else:
        _print_lines(format_device_info(info))
    return 0


def run_energy(client: PlugClient, settings: Settings) -> int:
    """Show energy usage as a report, JSON or Choria metrics."""
    usage = client.get_energy_usage()

    if settings.output_format == "json":
        print(to_json(usage.raw))
    elif settings.output_format == "choria":
        print(to_json(build_energy_metrics(usage, settings.labels)))
    else:
        _print_lines(format_energy_usage(usage))
    return 0


COMMAND_HANDLERS: Dict[str, Callable[[PlugClient, Settings], int]] = {
    "on": run_on,
    "off": run_off,
    "info": run_info,
    "energy": run_energy,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the tapoctl CLI."""
    try:
        parser = create_argument_parser()
        args = parser.parse_args(argv)

        validate_arguments(args)

        settings = load_settings(args.config)
        settings = merge_settings_with_args(args, settings)

        setup_application_logging(settings)
        logger = get_logger(__name__)
        logger.debug(f"Effective settings: {settings.to_dict()}")

        report_settings_warnings(settings)

        missing = settings.missing_device_fields()
        if missing:
            raise ValueError(
                "Missing required device settings: " + ", ".join(missing)
            )

        handler = COMMAND_HANDLERS[args.command]

        with operation_context(args.command, address=settings.address):
            logger.debug(f"Running {args.command} against {settings.address}")
            client = PlugClient(settings)
            return handler(client, settings)

    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130

    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except TapoCtlError as e:
        logger = get_logger(__name__)
        logger.debug(f"Operation failed: {e}", exc_info=True)
        print_error(str(e), title="Error")
        return 1

    except Exception as e:
        logger = get_logger(__name__)
        logger.exception(f"Unexpected error: {e}")
        print_error(str(e), title="Unexpected error")
        return 1


if __name__ == "__main__":
    sys.exit(main())
