"""
Sample Tools CLI.

Usage:
    python -m sample_tools [serve]
    python -m sample_tools list-tools
    python -m sample_tools call NAME [--arguments JSON]

Commands:
    serve         Run the MCP server on stdio (default).
    list-tools    Print the tool catalog as JSON.
    call          Invoke one tool locally and print the result as JSON.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional, Sequence

from sample_tools.core.config import ServerConfig
from sample_tools.mcp.handlers import call_tool, list_tools
from sample_tools.mcp.registry import build_default_registry
from sample_tools.mcp.server import run_stdio_server

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger("SampleTools")


def configure_logging(config: ServerConfig) -> None:
    """Send diagnostics to stderr or the configured file, never stdout."""
    kwargs = {"filename": config.log_file, "filemode": "a"} if config.log_file else {"stream": sys.stderr}
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format=LOG_FORMAT,
        force=True,
        **kwargs,
    )


def cmd_serve(args: argparse.Namespace, config: ServerConfig) -> int:
    return run_stdio_server(config)


def cmd_list_tools(args: argparse.Namespace, config: ServerConfig) -> int:
    print(json.dumps(list_tools(build_default_registry()), indent=2))
    return 0


def cmd_call(args: argparse.Namespace, config: ServerConfig) -> int:
    try:
        arguments = json.loads(args.arguments) if args.arguments else {}
    except json.JSONDecodeError as exc:
        print(f"Error: --arguments is not valid JSON: {exc}", file=sys.stderr)
        return 2
    if not isinstance(arguments, dict):
        print("Error: --arguments must be a JSON object", file=sys.stderr)
        return 2

    result = call_tool(
        build_default_registry(),
        args.name,
        arguments,
        max_chars=config.tool_response_max_chars,
    )
    print(json.dumps(result.to_dict(), indent=2))
    return 1 if result.is_error else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sample-tools-mcp",
        description="Sample Tools MCP server and local tool runner.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Examples:\n"
               "  sample-tools-mcp\n"
               "  sample-tools-mcp list-tools\n"
               "  sample-tools-mcp call calculate --arguments '{\"expression\": \"2 + 3\"}'\n",
    )
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("serve", help="Run the MCP server on stdio (default).")
    subparsers.add_parser("list-tools", help="Print the tool catalog as JSON.")

    call = subparsers.add_parser("call", help="Invoke one tool and print the result.")
    call.add_argument("name", help="Tool name, e.g. calculate.")
    call.add_argument(
        "--arguments",
        default=None,
        metavar="JSON",
        help="Tool arguments as a JSON object (default: {}).",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    config = ServerConfig.from_env()
    configure_logging(config)

    if args.command in (None, "serve"):
        return cmd_serve(args, config)
    if args.command == "list-tools":
        return cmd_list_tools(args, config)
    if args.command == "call":
        return cmd_call(args, config)

    parser.print_help()
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
