"""opc-shell CLI entry point."""

from __future__ import annotations

import argparse
import locale
import logging
import os
import sys
from typing import List

from . import __version__
from .clients import ClientType, create_client
from .commands import build_registry
from .context import ShellContext
from .repl import ShellREPL
from .startup import interactive_setup

LOG = logging.getLogger("opc_shell.cli")

SUPPORT_TEXT = "To report this problem, open an issue on the opc-shell tracker with the error above."


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _configure_locale() -> None:
    # Numeric parsing falls back to the user's locale conventions.
    try:
        locale.setlocale(locale.LC_NUMERIC, "")
    except locale.Error as exc:
        LOG.debug("locale setup failed: %s", exc)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="opc-shell", description="Interactive OPC UA/DA tag shell")
    parser.add_argument("type", nargs="?", help=f"Server type ({ClientType.names()})")
    parser.add_argument(
        "url",
        nargs="?",
        help="Server URL, e.g. opc.tcp://host:4840 or opcda://localhost/Vendor.Server.1",
    )
    parser.add_argument("--json", action="store_true", help="Emit JSON output for command results")
    parser.add_argument(
        "--log-level",
        default=os.environ.get("OPC_SHELL_LOG", "WARNING"),
        help="Logging level (default WARNING)",
    )
    parser.add_argument(
        "--period",
        type=int,
        default=os.environ.get("OPC_SHELL_PERIOD_MS", "500"),
        help="Monitor sampling period in milliseconds (default 500)",
    )
    return parser


def main(argv: List[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    if args.type is not None and args.url is None:
        parser.error("TYPE and URL must be given together")
    _configure_logging(args.log_level)
    _configure_locale()
    print(f"opc-shell v{__version__}")
    try:
        return _initialize(args)
    except (EOFError, KeyboardInterrupt):
        print()
        return 0
    except Exception as exc:
        LOG.debug("startup failed", exc_info=True)
        print("The application ended unexpectedly.")
        print(f"{type(exc).__name__}: {exc}")
        print(SUPPORT_TEXT)
        return 1


def _initialize(args: argparse.Namespace) -> int:
    if args.type is not None:
        try:
            client_type = ClientType.parse(args.type)
        except ValueError:
            print(f"{args.type} is not a supported type")
            print(f"Supported types: {ClientType.names()}")
            return 0
        url = args.url
    else:
        print("Usage: opc-shell [TYPE] [URL]")
        print(f"Supported types: {ClientType.names()}")
        print()
        print("No args provided. Entering interactive mode.")
        selection = interactive_setup()
        if selection is None:
            return 1
        client_type, url = selection
    return connect_and_run(client_type, url, json_output=args.json, period_ms=args.period)


def connect_and_run(client_type: ClientType, url: str, *, json_output: bool = False, period_ms: int = 500) -> int:
    """Connect to the server and run the REPL until exit; the client is always closed."""
    try:
        client = create_client(client_type, url, period_ms=period_ms)
        client.connect()
    except Exception:
        print("An error occurred when trying connecting to the server")
        raise
    LOG.info("connected to %s (%s)", url, client_type.value)
    ctx = ShellContext(client, json_output=json_output)
    try:
        return ShellREPL(ctx, build_registry()).run()
    finally:
        ctx.close()


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
