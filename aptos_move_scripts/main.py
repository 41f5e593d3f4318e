#!/usr/bin/env python3
import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .core.abi_fetcher import AbiFetcher, DEFAULT_GRACE_PERIOD, DEFAULT_TIMEOUT
from .core.move_cli import MoveCli
from .core.packages import PACKAGES, MovePackage, get_package
from .utils.config import Settings, load_env
from .utils.exceptions import ConfigurationError, MoveCliError
from .utils.logging import setup_logging

LOG = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Aptos Move package scripts")
    parser.add_argument("--package", default="share-market",
                        choices=sorted(PACKAGES),
                        help="Move package to operate on")
    parser.add_argument("--package-dir", default=".",
                        help="Path to the Move package directory")
    parser.add_argument("--env-file", default=None,
                        help="Path to .env file (default: search from current directory)")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level")
    parser.add_argument("--log-file", default=None,
                        help="Path to log file")

    subparsers = parser.add_subparsers(dest="command", required=True)

    abi_parser = subparsers.add_parser("get-abi", help="Fetch module ABIs into TypeScript files")
    abi_parser.add_argument("--output-dir", default=None,
                            help="Directory for generated ABI files "
                                 "(default: the package's ABI directory)")
    abi_parser.add_argument("--grace-period", type=float, default=DEFAULT_GRACE_PERIOD,
                            help="Seconds to wait before fetching")
    abi_parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT,
                            help="HTTP timeout in seconds")

    subparsers.add_parser("compile", help="Compile the Move package")
    subparsers.add_parser("test", help="Run Move unit tests with coverage")
    return parser


async def get_abi(args, settings: Settings, package: MovePackage) -> int:
    """Fetch the package's module ABIs"""
    settings.require_for_abi()

    if args.output_dir:
        output_dir = Path(args.output_dir)
    else:
        output_dir = Path(args.package_dir) / package.abi_output_dir

    modules = package.module_refs(settings.module_address)
    LOG.info(f"Fetching {len(modules)} ABIs for {package.name} from {settings.base_url}")

    fetcher = AbiFetcher(
        settings.base_url,
        output_dir,
        grace_period=args.grace_period,
        timeout=args.timeout,
    )
    await fetcher.run(modules)
    # Per-module failures are already logged and do not change the exit code
    return 0


def compile_package(args, settings: Settings, package: MovePackage) -> int:
    """Compile the package with the publisher bound to its named addresses"""
    settings.require_for_compile()
    cli = MoveCli(settings.cli_command())
    cli.compile(
        args.package_dir,
        package.compile_named_addresses(settings.publisher_address),
    )
    return 0


def run_package_tests(args, settings: Settings, package: MovePackage) -> int:
    """Run the package's Move unit tests"""
    cli = MoveCli(settings.cli_command())
    cli.test(args.package_dir, package.test_named_addresses)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main execution flow"""
    args = build_parser().parse_args(argv)

    setup_logging(args.log_level, args.log_file)

    try:
        load_env(args.env_file)
        settings = Settings.from_env()
        package = get_package(args.package)

        if args.command == "get-abi":
            return asyncio.run(get_abi(args, settings, package))
        elif args.command == "compile":
            return compile_package(args, settings, package)
        else:
            return run_package_tests(args, settings, package)
    except ConfigurationError as e:
        LOG.error(f"Configuration error: {e}")
        return 1
    except MoveCliError as e:
        LOG.error(str(e))
        return 1


def _run_subcommand(command: str) -> int:
    # Subcommand options follow the subcommand; common options are not accepted here
    return main([command, *sys.argv[1:]])


def move_get_abi_main() -> int:
    return _run_subcommand("get-abi")


def move_compile_main() -> int:
    return _run_subcommand("compile")


def move_test_main() -> int:
    return _run_subcommand("test")


if __name__ == "__main__":
    sys.exit(main())
