"""Main entry point for the Azure MCP Server.

Usage:
    azmcp server start [--transport stdio|http] [--host H] [--port P] [--read-only]
    azmcp <area> [<subgroup>...] <command> [--<option> <value> ...]
    azmcp --help
"""

import asyncio
import sys
from typing import List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table

from .commands.factory import CommandFactory, build_command_factory
from .config import get_settings
from .logging_config import get_logger, setup_logging
from .options import Option, OptionKind, OptionParser
from .services import ServiceCollection

logger = get_logger(__name__)

console = Console()
err_console = Console(stderr=True)

SERVER_OPTIONS = (
    Option("transport", "Transport to serve on.", choices=("stdio", "http")),
    Option("host", "Host to bind the HTTP transport to."),
    Option("port", "Port for the HTTP transport.", kind=OptionKind.INT),
    Option("read-only", "Only expose and execute read-only commands.", kind=OptionKind.BOOL),
)

HELP_FLAGS = {"-h", "--help", "help"}


def _server_parser() -> OptionParser:
    parser = OptionParser("server start")
    for option in SERVER_OPTIONS:
        option.apply(parser)
    return parser


def render_commands(factory: CommandFactory, target: Optional[Console] = None) -> None:
    """Print the visible commands as a table."""
    table = Table(title="[bold]Azure MCP commands[/bold]", box=box.ROUNDED, border_style="dim cyan")
    table.add_column("Command", style="bold cyan", no_wrap=True)
    table.add_column("Description")
    for tokenized_name, command in factory.visible_commands().items():
        description = " ".join(command.get_command().description.split())
        table.add_row(f"azmcp {tokenized_name.replace('_', ' ')}", description)
    (target or console).print(table)


def start_server(args: Sequence[str]) -> int:
    """Handle ``azmcp server start``."""
    parse_result = _server_parser().parse(args)
    if parse_result.errors:
        err_console.print("\n".join(parse_result.errors), style="red")
        return 1

    settings = get_settings()
    transport = parse_result.get_value("transport", "stdio")
    read_only = parse_result.get_value("read-only", settings.azmcp_read_only)

    # stdio carries JSON-RPC on stdout, so logs always go to stderr
    setup_logging(settings.azmcp_log_level, use_stderr=transport == "stdio")
    services = ServiceCollection.with_defaults(settings, read_only=read_only)
    factory = build_command_factory(services)

    if transport == "http":
        import uvicorn

        from .server import create_app

        host = parse_result.get_value("host", settings.azmcp_server_host)
        port = parse_result.get_value("port", settings.azmcp_server_port)
        logger.info(
            "Starting Azure MCP Server (http transport)",
            extra={"host": host, "port": port, "config": settings.get_safe_dict()},
        )
        uvicorn.run(
            create_app(factory),
            host=host,
            port=port,
            log_level=settings.azmcp_log_level.lower(),
        )
        return 0

    from .mcp_server import run_stdio

    asyncio.run(run_stdio(factory))
    return 0


async def run_command(factory: CommandFactory, argv: Sequence[str]):
    try:
        return await factory.dispatch_command_line(argv)
    finally:
        await factory.aclose()


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI and return the process exit code."""
    argv = list(sys.argv[1:] if argv is None else argv)

    if argv[:2] == ["server", "start"]:
        return start_server(argv[2:])

    settings = get_settings()
    setup_logging(settings.azmcp_log_level, use_stderr=True)
    factory = build_command_factory()

    if not argv or argv[0] in HELP_FLAGS:
        render_commands(factory)
        return 0

    response = asyncio.run(run_command(factory, argv))
    console.print_json(response.to_json())
    return 0 if response.is_success else 1


if __name__ == "__main__":
    sys.exit(main())
