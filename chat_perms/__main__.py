"""Command line entry point for chat-perms."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, NoReturn

from chat_perms.core.errors import ConfigurationError, PermissionFailure

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_PERMISSION_DENIED = 2


def _setup_logging(verbose: bool) -> None:
    from chat_perms.config import get_settings
    from chat_perms.core.logging import configure_logging

    settings = get_settings()
    configure_logging(
        level="DEBUG" if verbose else settings.log_level,
        json_format=settings.log_json,
    )


def _load_user_directory(path: str | None) -> Any:
    """Build a StaticUserDirectory from a JSON file keyed by uid."""
    from chat_perms.adapters.memory import StaticUserDirectory

    if not path:
        return StaticUserDirectory()
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Cannot read users file {Path(path).name}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError("Users file must contain a JSON object keyed by uid")
    return StaticUserDirectory.from_mapping(data)


def _build_container(args: argparse.Namespace) -> Any:
    from chat_perms.config import get_settings
    from chat_perms.factory import ServiceFactory

    directory = _load_user_directory(getattr(args, "users", None))
    return ServiceFactory(get_settings(), users=directory, groups=directory).create_all()


def run_version() -> None:
    """Print version information."""
    from chat_perms import __version__

    print(f"chat-perms {__version__}")


def run_check_version(args: argparse.Namespace) -> int:
    """Check a host version against the supported range."""
    from chat_perms.core.compat import SUPPORTED_MAJOR_VERSION, is_compatible

    compatible = is_compatible(args.host_version)
    status = "compatible" if compatible else "NOT compatible"
    print(f"Host version {args.host_version or '(detected)'}: {status} (supported: {SUPPORTED_MAJOR_VERSION}.x)")
    return EXIT_OK if compatible else EXIT_ERROR


def run_show_settings(args: argparse.Namespace) -> int:
    """Print the resolved settings as JSON."""
    container = _build_container(args)
    resolved = asyncio.run(container.settings.refresh())
    print(json.dumps(resolved.to_json_dict(), indent=2, ensure_ascii=False))
    return EXIT_OK


def run_scan(args: argparse.Namespace) -> int:
    """Scan text for keywords (given on the command line or configured)."""
    from chat_perms.core.keywords import scan_message

    keywords = args.keyword
    if not keywords:
        container = _build_container(args)
        keywords = list(asyncio.run(container.settings.refresh()).keyword_list)

    matches = scan_message(args.text, keywords)
    print(json.dumps({"matched": bool(matches), "keywords": matches}, ensure_ascii=False))
    return EXIT_OK


async def _run_hook(container: Any, event_name: str, payload: Any) -> Any:
    from chat_perms.hooks.dispatcher import dispatch_hook

    await container.plugin.initialize()
    try:
        return await dispatch_hook(container.plugin, event_name, payload)
    finally:
        await container.plugin.shutdown()


def run_hook(args: argparse.Namespace) -> int:
    """Run one hook on a JSON payload read from stdin."""
    raw = sys.stdin.read()
    try:
        payload = json.loads(raw) if raw.strip() else None
    except ValueError as e:
        print(f"Error: invalid JSON payload: {e}", file=sys.stderr)
        return EXIT_ERROR

    container = _build_container(args)
    try:
        result = asyncio.run(_run_hook(container, args.event, payload))
    except PermissionFailure as e:
        print(json.dumps({"error": e.message, "kind": e.kind}, ensure_ascii=False))
        return EXIT_PERMISSION_DENIED

    print(json.dumps(result, ensure_ascii=False, default=str))
    return EXIT_OK


def run_serve() -> int:
    """Run the admin HTTP app."""
    import uvicorn

    from chat_perms.admin.api import create_app
    from chat_perms.config import get_settings
    from chat_perms.factory import ServiceFactory

    settings = get_settings()
    container = ServiceFactory(settings).create_all()
    uvicorn.run(create_app(container), host=settings.admin_host, port=settings.admin_port)
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chat-perms",
        description="Chat permission hooks: settings, keyword scanning and admin API",
    )
    parser.add_argument("--version", "-V", action="store_true", help="Show version and exit")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        description="Available commands",
    )

    subparsers.add_parser("version", help="Show version information")

    check_parser = subparsers.add_parser(
        "check-version",
        help="Check whether a host version is supported",
    )
    check_parser.add_argument(
        "host_version",
        nargs="?",
        default=None,
        help="Version to check (default: CHAT_PERMS_HOST_VERSION)",
    )

    subparsers.add_parser("settings", help="Print the resolved plugin settings")

    scan_parser = subparsers.add_parser(
        "scan",
        help="Scan text for sensitive keywords",
    )
    scan_parser.add_argument("text", help="Message text to scan")
    scan_parser.add_argument(
        "--keyword",
        "-k",
        action="append",
        default=[],
        help="Keyword to look for (repeatable; default: configured keyword list)",
    )

    hook_parser = subparsers.add_parser(
        "hook",
        help="Run a hook on a JSON payload from stdin",
    )
    hook_parser.add_argument("event", help="Hook name, e.g. can-reply or filter:messaging.canReply")
    hook_parser.add_argument(
        "--users",
        default=None,
        help="JSON file of users keyed by uid ({\"1\": {\"reputation\": 50, \"groups\": [...]}})",
    )

    subparsers.add_parser("serve", help="Run the admin settings API")

    return parser


def main() -> NoReturn:
    """Main entry point with subcommand support."""
    parser = build_parser()
    args = parser.parse_args()

    if args.version:
        run_version()
        sys.exit(EXIT_OK)

    if args.command is None:
        parser.print_help()
        sys.exit(EXIT_ERROR)

    _setup_logging(args.verbose)

    try:
        if args.command == "version":
            run_version()
            sys.exit(EXIT_OK)
        elif args.command == "check-version":
            sys.exit(run_check_version(args))
        elif args.command == "settings":
            sys.exit(run_show_settings(args))
        elif args.command == "scan":
            sys.exit(run_scan(args))
        elif args.command == "hook":
            sys.exit(run_hook(args))
        elif args.command == "serve":
            sys.exit(run_serve())
    except ConfigurationError as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(EXIT_ERROR)

    parser.print_help()
    sys.exit(EXIT_ERROR)


if __name__ == "__main__":
    main()
