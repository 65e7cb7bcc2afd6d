"""CLI entry point for ldp-config."""

from __future__ import annotations

import argparse
import sys

import requests

# Ensure all operations are registered by importing the operations package
import ldp_config.operations  # noqa: F401
from ldp_config.client import default_setup
from ldp_config.logging_utils import setup_logging
from ldp_config.models import DEFAULT_MAX_RETRIES, ConfigurationError, InputError
from ldp_config.operations import get_operation_registry


class UsageErrorParser(argparse.ArgumentParser):
    """ArgumentParser that reports usage errors with exit status 1."""

    def error(self, message: str):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = UsageErrorParser(
        prog="ldp-config",
        description="Read or write FOLIO reporting configuration.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
    OKAPI_URL    - FOLIO gateway URL (required unless --okapi-url is given)
    OKAPI_TENANT - Tenant id (required unless --tenant is given)
    OKAPI_USER   - Username to log in as (required)
    OKAPI_PW     - Password (required)

Examples:
    # Dump the current configuration
    ldp-config get > config.json

    # Upsert legacy config entries
    echo '[{"key": "dbinfo", "value": {"url": "..."}}]' | ldp-config set

    # Upsert the same entries into mod-settings
    ldp-config write-settings < config.json

    # See what would be written
    ldp-config --dry-run write-settings < config.json
""",
    )
    parser.add_argument("--okapi-url", default=None, help="FOLIO gateway URL (default: from OKAPI_URL env)")
    parser.add_argument("--tenant", default=None, help="Tenant id (default: from OKAPI_TENANT env)")
    parser.add_argument("--dry-run", action="store_true", help="Show what would be written without making changes")
    parser.add_argument(
        "--keep-going",
        action="store_true",
        help="Continue with the next record when one fails, and exit non-zero at the end",
    )
    parser.add_argument(
        "--json", action="store_true", dest="json_output", help="Output log lines as JSON (to stderr)"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--max-retries",
        type=int,
        default=DEFAULT_MAX_RETRIES,
        help=f"Maximum retry attempts for transient errors (default: {DEFAULT_MAX_RETRIES})",
    )

    subparsers = parser.add_subparsers(dest="operation", required=True, help="Operation to perform")

    registry = get_operation_registry()
    for name, op_cls in sorted(registry.items()):
        sub = subparsers.add_parser(name, help=op_cls.__doc__)
        op_cls.add_arguments(sub)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logger = setup_logging(json_mode=args.json_output, verbose=args.verbose)

    try:
        session = default_setup(okapi_url=args.okapi_url, tenant=args.tenant, max_retries=args.max_retries)
    except ConfigurationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    except requests.RequestException as e:
        logger.error(f"Login failed: {e}")
        return 1

    logger.debug(f"Connected to {session.base_url} as tenant {session.tenant}")
    if args.dry_run:
        logger.info("DRY-RUN MODE - no changes will be made")

    registry = get_operation_registry()
    op_cls = registry[args.operation]

    with session:
        operation = op_cls(session=session, args=args)
        try:
            return operation.run()
        except InputError as e:
            logger.error(f"Invalid input: {e}")
            return 1
        except requests.RequestException as e:
            logger.error(f"Fatal API error: {e}")
            return 1
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
            return 130


if __name__ == "__main__":
    sys.exit(main())
