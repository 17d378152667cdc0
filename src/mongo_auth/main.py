"""CLI entry point: ties together settings, login, and one admin command."""

from __future__ import annotations

import argparse
import logging
import os
import pathlib
import sys

from mongo_auth.admin.levels import LoggingLevel, TracingLevel
from mongo_auth.settings import SETTINGS_ENV_VAR, SettingsError, load_settings

DEFAULT_CONFIG = pathlib.Path(__file__).resolve().parents[2] / "config" / "settings.yaml"


def resolve_config_path(config: str | None) -> str | None:
    """Pick the settings file: --config, then $MONGO_AUTH_SETTINGS, then the bundled one."""
    if config:
        return config
    if os.environ.get(SETTINGS_ENV_VAR):
        return os.environ[SETTINGS_ENV_VAR]
    if DEFAULT_CONFIG.exists():
        return str(DEFAULT_CONFIG)
    return None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mongo-auth",
        description="Nonce-authenticated admin commands for a database server",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to settings.yaml (default: $MONGO_AUTH_SETTINGS, then config/settings.yaml)",
    )
    parser.add_argument("--host", default=None, help="Server host")
    parser.add_argument("--port", type=int, default=None, help="Server port")
    parser.add_argument("--user", "-u", default=None, help="Username (prompted if omitted)")
    parser.add_argument(
        "--digest",
        action="store_true",
        help="Treat the prompted secret as a precomputed credential digest",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("hash", help="Print the credential digest for a user")
    sub.add_parser("databases", help="List databases and their sizes")
    sub.add_parser("shutdown", help="Shut the server down")
    log_level = sub.add_parser("log-level", help="Set the operation logging level")
    log_level.add_argument("level", choices=[lvl.name for lvl in LoggingLevel])
    for name, help_text in (
        ("trace-level", "Set the trace level"),
        ("query-trace-level", "Set the query trace level"),
    ):
        trace = sub.add_parser(name, help=help_text)
        trace.add_argument("level", choices=[lvl.name for lvl in TracingLevel])
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    from mongo_auth.prompt.cli import console, run_admin, run_hash

    if args.command == "hash":
        sys.exit(run_hash(args.user))

    try:
        settings = load_settings(resolve_config_path(args.config))
        code = run_admin(
            args.command,
            settings,
            host=args.host,
            port=args.port,
            username=args.user,
            digest=args.digest,
            level=getattr(args, "level", None),
        )
    except SettingsError as exc:
        console.print(f"[red]Invalid settings:[/red] {exc}")
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()
