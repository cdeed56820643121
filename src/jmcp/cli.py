from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from functools import partial
from typing import Any, Never, Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich_argparse import RawTextRichHelpFormatter
from just_mcp import REGISTRY, ServerSettings
from just_mcp.logging_config import configure_logging
from just_mcp.server import build_dispatcher, serve_stdio
from just_mcp.settings import LOG_LEVELS

_CONSOLE = Console(no_color=False)
_ERR_CONSOLE = Console(stderr=True)

logger = logging.getLogger(__name__)


class _CLIHelpFormatter(RawTextRichHelpFormatter):
    """Rich formatter with explicit high-contrast CLI styles.

    Example:
        ```python
        parser = argparse.ArgumentParser(formatter_class=_CLIHelpFormatter)
        ```
    """

    styles = {
        "argparse.args": "bold cyan",
        "argparse.groups": "bold magenta",
        "argparse.help": "white",
        "argparse.metavar": "bold yellow",
        "argparse.prog": "bold bright_blue",
        "argparse.syntax": "bold bright_white",
        "argparse.text": "bright_white",
    }


_HELP_FORMATTER = partial(
    _CLIHelpFormatter,
    max_help_position=34,
    width=120,
)


class _RichArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that renders errors via Rich.

    Example:
        ```python
        parser = _RichArgumentParser(prog="just-mcp")
        ```
    """

    def error(self, message: str) -> Never:
        """Render parse errors with Rich and exit.

        Example:
            ```python
            # parser.error("invalid usage")
            ```
        """
        _ERR_CONSOLE.print(Panel.fit(f"[bold red]Error:[/bold red] {escape(message)}", border_style="red"))
        self.print_usage(file=_ERR_CONSOLE.file)
        raise SystemExit(2)


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser for the just-mcp server.

    Example:
        ```python
        parser = build_parser()
        ```
    """
    parser = _RichArgumentParser(
        prog="just-mcp",
        description=(
            "just-mcp\n"
            "Expose justfile recipes as MCP tools (list, show, run) over stdio."
        ),
        epilog=(
            "Quick Examples:\n"
            "  just-mcp serve\n"
            "  just-mcp tools\n"
            "  just-mcp call list --working-directory ~/src/app\n"
            "  just-mcp call show --recipe build\n"
            "  just-mcp call run --recipe test --timeout-ms 60000 -- -k smoke\n\n"
            "Client Configuration:\n"
            '  {"command": "just-mcp", "args": ["serve"]}'
        ),
        formatter_class=_HELP_FORMATTER,
    )
    parser.add_argument(
        "--config",
        help=(
            "Path to a TOML settings file.\n"
            "Keys: executable, default_timeout_ms, log_level (top level or [server])."
        ),
    )
    parser.add_argument(
        "--just-bin",
        help="Name or path of the just executable (default: just).",
    )
    parser.add_argument(
        "--default-timeout-ms",
        type=int,
        help="Timeout applied when a call does not set one (default: 300000).",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Log level for messages written to stderr (default: INFO).",
    )

    sub = parser.add_subparsers(
        dest="command",
        parser_class=_RichArgumentParser,
    )
    sub.add_parser(
        "serve",
        help="Run the MCP server on stdin/stdout (default).",
        description=(
            "Run the MCP server on stdin/stdout.\n"
            "Logs go to stderr; stdout carries protocol messages only."
        ),
        formatter_class=_HELP_FORMATTER,
    )
    sub.add_parser(
        "tools",
        help="Show the tools advertised to MCP clients.",
        description="Show each tool with its arguments and required markers.",
        formatter_class=_HELP_FORMATTER,
    )

    call_cmd = sub.add_parser(
        "call",
        help="Invoke one tool locally and print its response.",
        description=(
            "Invoke one tool exactly as an MCP client would.\n"
            "Arguments after -- are passed to the recipe.\n"
            "Exits 1 when the response carries the error flag."
        ),
        epilog=(
            "Examples:\n"
            "  just-mcp call list\n"
            "  just-mcp call run --recipe build -- --release"
        ),
        formatter_class=_HELP_FORMATTER,
    )
    call_cmd.add_argument("tool", help="Tool name: list, show or run.")
    call_cmd.add_argument("--recipe", help="Recipe name for show and run.")
    call_cmd.add_argument("--working-directory", help="Directory containing the justfile.")
    call_cmd.add_argument("--justfile", help="Path to the justfile.")
    call_cmd.add_argument(
        "--timeout-ms",
        type=int,
        help="Timeout in milliseconds for run.",
    )
    return parser


def build_settings(args: argparse.Namespace) -> ServerSettings:
    """Resolve settings from the config file and global CLI flags.

    Example:
        ```python
        settings = build_settings(args)
        ```
    """
    settings = ServerSettings.from_file(args.config) if args.config else ServerSettings()
    return settings.with_overrides(
        executable=args.just_bin,
        default_timeout_ms=args.default_timeout_ms,
        log_level=args.log_level,
    )


def _split_extra(argv: list[str]) -> tuple[list[str], list[str]]:
    """Split argv at the first `--` into CLI options and recipe arguments.

    Example:
        ```python
        head, extra = _split_extra(["call", "run", "--recipe", "build", "--", "--release"])
        ```
    """
    if "--" not in argv:
        return argv, []
    index = argv.index("--")
    return argv[:index], argv[index + 1 :]


def _call_arguments(args: argparse.Namespace, extra: list[str]) -> dict[str, Any]:
    """Collect the argument bag for `call` from parsed flags.

    Example:
        ```python
        bag = _call_arguments(args, ["--release"])
        ```
    """
    bag: dict[str, Any] = {}
    if args.recipe is not None:
        bag["recipe"] = args.recipe
    if extra:
        bag["args"] = list(extra)
    if args.working_directory is not None:
        bag["working_directory"] = args.working_directory
    if args.justfile is not None:
        bag["justfile"] = args.justfile
    if args.timeout_ms is not None:
        bag["timeout"] = args.timeout_ms
    return bag


def _print_tools() -> None:
    """Render the tool registry in a rich table.

    Example:
        ```python
        _print_tools()
        ```
    """
    table = Table(title="MCP Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Description", style="magenta")
    table.add_column("Arguments")
    for operation in REGISTRY.values():
        arguments = ", ".join(
            f"{arg.name}*" if arg.required else arg.name for arg in operation.arguments
        )
        table.add_row(operation.name, operation.description, arguments)
    _CONSOLE.print(table)
    _CONSOLE.print("* required")


def _serve(settings: ServerSettings) -> int:
    """Run the stdio server, returning a process exit status.

    Example:
        ```python
        code = _serve(ServerSettings())
        ```
    """
    try:
        asyncio.run(serve_stdio(settings))
    except KeyboardInterrupt:
        return 0
    except Exception:
        logger.exception("Fatal error")
        return 1
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run the `just-mcp` command handler.

    Example:
        ```python
        code = main(["call", "list"])
        ```
    """
    parser = build_parser()
    options, extra = _split_extra(list(argv) if argv is not None else sys.argv[1:])
    args = parser.parse_args(options)
    if extra and args.command != "call":
        parser.error(f"unrecognized arguments: -- {' '.join(extra)}")
    try:
        settings = build_settings(args)
    except (OSError, ValueError) as exc:
        parser.error(f"Invalid configuration: {exc}")
    configure_logging(settings.log_level)

    if args.command in (None, "serve"):
        return _serve(settings)
    if args.command == "tools":
        _print_tools()
        return 0
    if args.command == "call":
        dispatcher = build_dispatcher(settings)
        response = asyncio.run(dispatcher.dispatch(args.tool, _call_arguments(args, extra)))
        style = "red" if response.is_error else "green"
        _CONSOLE.print(Panel(Text(response.text), title=args.tool, border_style=style))
        return 1 if response.is_error else 0

    parser.error("Unhandled command")
