"""Command-line entry point for the swechain MCP server.

``serve`` (the default) runs the MCP server over stdio. ``call`` runs a single
tool and prints its text, which is handy for checking a node without an MCP
client attached.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Any, Sequence

from .config import ConfigurationError, ServerConfig, load_server_config, resolve_executable
from .server import available_tools, build_handlers, build_server, dispatch, serve

logger = logging.getLogger(__name__)


class CLIError(RuntimeError):
    """Raised when CLI arguments are invalid."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="swechain MCP server")
    parser.add_argument("--config", default=None, help="Path to a YAML config file")
    parser.add_argument("--binary", default=None, help="swechaind executable name or path")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level name (default: %(default)s)",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("serve", help="Serve MCP tool calls over stdio (default)")

    call_parser = subparsers.add_parser("call", help="Run a single tool and print its result")
    call_parser.add_argument("tool", help="Tool name, e.g. query-open-auctions")
    call_parser.add_argument(
        "--args-json",
        default="{}",
        help="Tool arguments as a JSON object (default: %(default)s)",
    )

    subparsers.add_parser("list-tools", help="Print the registered tool names")
    return parser


def configure_logging(args: argparse.Namespace) -> None:
    env_debug = os.environ.get("SWECHAIN_MCP_DEBUG", "").strip().lower()
    debug = args.debug or env_debug in {"1", "true", "yes", "on"}
    level = logging.DEBUG if debug else getattr(logging, str(args.log_level).upper(), None)
    if not isinstance(level, int):
        raise CLIError(f"unknown log level: {args.log_level}")
    # stdout carries the MCP stream; keep log records on stderr.
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _parse_tool_args(raw: str) -> dict[str, Any]:
    try:
        parsed = json.loads(raw)
    except ValueError as exc:
        raise CLIError(f"--args-json is not valid JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        raise CLIError("--args-json must be a JSON object")
    return parsed


def _load_config(args: argparse.Namespace) -> ServerConfig:
    overrides = {"binary": args.binary} if args.binary else None
    return load_server_config(config_path=args.config, overrides=overrides)


def cmd_serve(config: ServerConfig) -> None:
    executable = resolve_executable(config.binary)
    logger.info("Found %s at: %s", config.binary, executable)
    handlers = build_handlers(executable, config)
    asyncio.run(serve(build_server(handlers, config)))


def cmd_call(config: ServerConfig, tool: str, raw_args: str) -> None:
    arguments = _parse_tool_args(raw_args)
    executable = resolve_executable(config.binary)
    handlers = build_handlers(executable, config)
    text = asyncio.run(dispatch(handlers, available_tools(config), tool, arguments))
    print(text)


def cmd_list_tools(config: ServerConfig) -> None:
    for spec in available_tools(config):
        print(spec.name)


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        configure_logging(args)
        config = _load_config(args)
        if args.command in (None, "serve"):
            cmd_serve(config)
        elif args.command == "call":
            cmd_call(config, args.tool, args.args_json)
        elif args.command == "list-tools":
            cmd_list_tools(config)
        else:  # pragma: no cover - argparse restricts choices
            parser.error(f"unknown command {args.command}")
    except ConfigurationError as exc:
        logger.error("%s", exc)
        print(f"Configuration error: {exc}", file=sys.stderr)
        sys.exit(1)
    except CLIError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)
    except KeyboardInterrupt:
        logger.info("Interrupted")


if __name__ == "__main__":  # pragma: no cover
    main()
