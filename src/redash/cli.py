"""Interactive terminal client for Redis-protocol servers."""

from __future__ import annotations

import argparse
import curses
import logging
import sys
from functools import partial
from pathlib import Path
from typing import IO, Callable, Sequence

from .client_config import (
    VALID_LOG_LEVELS,
    ClientConfig,
    ClientConfigError,
    load_client_config,
)
from .connection import DEFAULT_HOST, DEFAULT_PORT, Connection
from .errors import RedashConnectionError, RedashError, TerminalTooSmallError
from .protocol import render_data
from .tui.app import App
from .tui.renderer import CursesSurface

LOGGER = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_ESCAPE_DELAY_MS = 25

ConnectionFactory = Callable[..., Connection]


def _parse_port(value: str) -> int:
    try:
        port = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("expected an integer port") from exc
    if not 0 < port < 65536:
        raise argparse.ArgumentTypeError("port must be between 1 and 65535")
    return port


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Return parsed arguments for the client CLI."""

    parser = argparse.ArgumentParser(prog="redash", description=__doc__)
    parser.add_argument(
        "name",
        nargs="?",
        default=None,
        help="Optional session label shown in the status bar",
    )
    parser.add_argument(
        "--host",
        default=None,
        help=f"Server host (default: {DEFAULT_HOST})",
    )
    parser.add_argument(
        "--port",
        type=_parse_port,
        default=None,
        help=f"Server port (default: {DEFAULT_PORT})",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a TOML file with a [client] table",
    )
    parser.add_argument(
        "--connect-timeout",
        type=float,
        default=None,
        help="Seconds to wait while opening the connection",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=VALID_LOG_LEVELS,
        default=None,
        help="Logging verbosity (default: WARNING)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Write logs to this file instead of discarding them in the TUI",
    )
    parser.add_argument(
        "--exec",
        dest="exec_command",
        metavar="COMMAND",
        default=None,
        help="Send one command, print the reply and exit without the TUI",
    )
    return parser.parse_args(argv)


def resolve_config(args: argparse.Namespace) -> ClientConfig:
    """Layer CLI flags over the optional config file over built-in defaults."""

    base = ClientConfig() if args.config is None else load_client_config(args.config)
    return base.merged(
        host=args.host,
        port=args.port,
        connect_timeout=args.connect_timeout,
        log_level=args.log_level,
        log_file=args.log_file,
    )


def configure_logging(level: str, log_file: Path | None, *, interactive: bool) -> None:
    """Route package logs to ``log_file``, stderr, or nowhere while curses owns the tty."""

    numeric_level = getattr(logging, level)
    if log_file is not None:
        logging.basicConfig(filename=str(log_file), level=numeric_level, format=_LOG_FORMAT)
        return
    if interactive:
        package_logger = logging.getLogger("redash")
        if not any(isinstance(h, logging.NullHandler) for h in package_logger.handlers):
            package_logger.addHandler(logging.NullHandler())
        package_logger.setLevel(numeric_level)
        return
    logging.basicConfig(level=numeric_level, format=_LOG_FORMAT)


def _open_connection(
    config: ClientConfig, factory: ConnectionFactory, stderr: IO[str]
) -> Connection | None:
    connection = factory(
        config.host,
        config.port,
        timeout=config.connect_timeout,
        max_depth=config.max_depth,
    )
    try:
        connection.connect()
    except RedashConnectionError as exc:
        print(f"redash: {exc}", file=stderr)
        return None
    return connection


def run_exec(
    config: ClientConfig,
    command: str,
    *,
    connection_factory: ConnectionFactory = Connection,
    stdout: IO[str] = sys.stdout,
    stderr: IO[str] = sys.stderr,
) -> int:
    """Send ``command`` once and print the rendered reply."""

    connection = _open_connection(config, connection_factory, stderr)
    if connection is None:
        return 1
    try:
        reply = connection.send(command)
    except RedashError as exc:
        print(f"(error) {exc}", file=stderr)
        return 1
    finally:
        connection.close()
    print(render_data(reply), file=stdout)
    return 0


def _interactive_session(
    stdscr: "curses._CursesWindow",
    *,
    connection: Connection,
    config: ClientConfig,
    name: str | None,
) -> None:
    try:
        curses.set_escdelay(_ESCAPE_DELAY_MS)
    except (AttributeError, curses.error):
        LOGGER.debug("Terminal does not support a custom escape delay")
    surface = CursesSurface(stdscr)
    app = App(
        surface,
        connection,
        session_name=name,
        sidebar_ratio=config.sidebar_ratio,
    )
    app.mount_default_layout()
    app.run()


def run_interactive(
    config: ClientConfig,
    *,
    name: str | None = None,
    connection_factory: ConnectionFactory = Connection,
    wrapper: Callable[..., object] = curses.wrapper,
    stderr: IO[str] = sys.stderr,
) -> int:
    """Connect, then drive the curses UI until the quit key is pressed."""

    connection = _open_connection(config, connection_factory, stderr)
    if connection is None:
        return 1
    try:
        wrapper(
            partial(
                _interactive_session,
                connection=connection,
                config=config,
                name=name,
            )
        )
    except curses.error as exc:
        LOGGER.error("Terminal setup failed: %s", exc)
        print(f"redash: unable to initialise the terminal: {exc}", file=stderr)
        return 1
    except TerminalTooSmallError as exc:
        print(f"redash: {exc}", file=stderr)
        return 1
    except KeyboardInterrupt:
        LOGGER.info("Interrupted by user")
    finally:
        connection.close()
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the ``redash`` command."""

    args = parse_args(argv)
    try:
        config = resolve_config(args)
    except ClientConfigError as exc:
        print(f"redash: {exc}", file=sys.stderr)
        return 2
    configure_logging(
        config.log_level, config.log_file, interactive=args.exec_command is None
    )
    if args.exec_command is not None:
        return run_exec(config, args.exec_command)
    return run_interactive(config, name=args.name)


if __name__ == "__main__":  # pragma: no cover - exercised via python -m
    raise SystemExit(main())


__all__ = [
    "configure_logging",
    "main",
    "parse_args",
    "resolve_config",
    "run_exec",
    "run_interactive",
]
