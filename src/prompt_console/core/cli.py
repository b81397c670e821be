"""
Command line entry point.

``prompt-console serve`` runs the HTTP API under uvicorn, ``console`` opens an
interactive prompt, ``run`` executes a single command line and ``list`` prints
the registered commands.
"""

from __future__ import annotations

import argparse
import json
import logging
import shlex
import socket
import sys
from collections.abc import Callable
from typing import Any

import uvicorn
from fastapi import FastAPI
from rich.console import Console
from rich.table import Table

from prompt_console.core.app.application_factory import (
    ConsoleServices,
    build_app,
    build_services,
)
from prompt_console.core.common.exceptions import PromptConsoleError
from prompt_console.core.common.logging_utils import (
    configure_logging_with_environment_tagging,
)
from prompt_console.core.config.app_config import AppConfig, LogLevel, load_config
from prompt_console.core.domain.dispatch import DispatchResponse

logger = logging.getLogger(__name__)

EXIT_COMMANDS = frozenset({"exit", "quit"})
CLEAR_COMMANDS = frozenset({"cls", "clear"})


def is_port_in_use(host: str, port: int) -> bool:
    """Check if a port is in use on a given host."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        return s.connect_ex((host, port)) == 0


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prompt-console",
        description="Administrative command console",
    )
    parser.add_argument("--config", help="Path to a YAML configuration file")
    parser.add_argument(
        "--log-level",
        choices=[level.value for level in LogLevel],
        help="Override the configured log level",
    )
    parser.add_argument("--log-file", help="Also write logs to this file")

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host")
    serve.add_argument("--port", type=int)

    subparsers.add_parser("console", help="Open an interactive console")

    run = subparsers.add_parser("run", help="Run one command line and print JSON")
    # Options of `run` precede the command line; the rest is passed through as is
    run.add_argument(
        "--current-page", type=int, default=0, help="Page the console is shown on"
    )
    run.add_argument(
        "line", nargs=argparse.REMAINDER, help="Command line, e.g. list-users -max 5"
    )

    subparsers.add_parser("list", help="List the registered commands")
    return parser


def apply_cli_args(args: argparse.Namespace) -> AppConfig:
    """Load the configuration and apply command line overrides to it."""
    cfg = load_config(args.config)
    if args.log_level:
        cfg.logging.level = LogLevel(args.log_level)
    if args.log_file:
        cfg.logging.log_file = args.log_file
    if getattr(args, "host", None):
        cfg.host = args.host
    if getattr(args, "port", None):
        cfg.port = args.port
    return cfg


def _configure_logging(cfg: AppConfig) -> None:
    configure_logging_with_environment_tagging(
        level=getattr(logging, cfg.logging.level.value),
        log_format=cfg.logging.log_format,
        log_file=cfg.logging.log_file,
    )


def render_response(console: Console, response: DispatchResponse) -> None:
    """Print a dispatch outcome: an error line, a help document or a result table."""
    payload = response.to_payload()
    if response.is_error:
        console.print(f"[red]{response.message}[/red]", markup=True, highlight=False)
        return
    if response.help is not None:
        _render_help(console, payload)
        return
    _render_result(console, payload)


def _render_help(console: Console, payload: dict[str, Any]) -> None:
    if payload.get("Error"):
        console.print(payload["Error"], style="red")
        return
    if payload.get("Name"):
        console.print(payload["Name"], style="bold")
    if payload.get("Description"):
        console.print(payload["Description"])
    options = payload.get("Options") or []
    if options:
        table = Table("Flag", "Type", "Default", "Description")
        for option in options:
            table.add_row(
                f"-{option['Flag']}",
                option["Type"],
                option["DefaultValue"],
                option["Description"],
            )
        console.print(table)
    if payload.get("ResultHtml"):
        console.print(payload["ResultHtml"], markup=False)


def _render_result(console: Console, payload: dict[str, Any]) -> None:
    rows = payload.get("Data") or []
    if rows:
        columns = list(payload.get("FieldOrder") or [])
        if not columns and isinstance(rows[0], dict):
            columns = list(rows[0])
        table = Table(*columns)
        for row in rows:
            table.add_row(*("" if row.get(c) is None else str(row.get(c)) for c in columns))
        console.print(table)
    paging = payload.get("PagingInfo")
    if paging and paging.get("TotalPages"):
        console.print(
            f"Page {paging['PageNo']} of {paging['TotalPages']}", style="dim"
        )
    output = payload.get("Output")
    if output:
        console.print(output, style="red" if payload.get("IsError") else None)


def run_console(services: ConsoleServices, console: Console | None = None) -> None:
    """Read command lines until ``exit`` or end of input."""
    console = console or Console()
    context = services.config.host_context.to_context()
    console.print("Type 'help syntax' for help, 'exit' to quit.", style="dim")
    while True:
        try:
            line = console.input("[bold]> [/bold]")
        except (EOFError, KeyboardInterrupt):
            console.print()
            return
        stripped = line.strip()
        if not stripped:
            continue
        if stripped.lower() in EXIT_COMMANDS:
            return
        if stripped.lower() in CLEAR_COMMANDS:
            console.clear()
            continue
        render_response(console, services.dispatcher.execute(stripped, context))


def _list_commands(services: ConsoleServices, console: Console) -> None:
    table = Table("Command", "Namespace", "Version", "Description")
    for summary in services.dispatcher.list_commands():
        table.add_row(summary.name, summary.namespace, summary.version, summary.description)
    console.print(table)


def _run_line(services: ConsoleServices, args: argparse.Namespace) -> int:
    context = services.config.host_context.to_context(args.current_page)
    # The shell has already split the line
    response = services.dispatcher.execute_tokens(args.line, context, shlex.join(args.line))
    sys.stdout.write(json.dumps(response.to_payload(), indent=2, default=str) + "\n")
    return 1 if response.is_error else 0


def _serve(cfg: AppConfig, build_app_fn: Callable[[AppConfig], FastAPI] | None) -> int:
    app = build_app_fn(cfg) if build_app_fn else build_app(cfg)
    if is_port_in_use(cfg.host, cfg.port):
        error_msg = f"Port {cfg.port} is already in use."
        logging.error(error_msg)
        sys.stderr.write(f"\nERROR: {error_msg}\n")
        return 1
    logging.info("Starting uvicorn on %s:%d", cfg.host, cfg.port)
    uvicorn.run(app, host=cfg.host, port=cfg.port)
    return 0


def main(
    argv: list[str] | None = None,
    build_app_fn: Callable[[AppConfig], FastAPI] | None = None,
) -> int:
    """Main entry point; returns the process exit code."""
    args = build_cli_parser().parse_args(argv)
    try:
        cfg = apply_cli_args(args)
    except PromptConsoleError as e:
        sys.stderr.write(f"ERROR: {e.message}\n")
        for message in e.details.get("errors", []):
            sys.stderr.write(f"  {message}\n")
        return 2

    _configure_logging(cfg)

    if args.command == "serve":
        return _serve(cfg, build_app_fn)

    try:
        services = build_services(cfg)
    except PromptConsoleError as e:
        logger.error("Failed to load commands: %s", e.message)
        sys.stderr.write(f"ERROR: {e.message}\n")
        return 1

    services.start()
    try:
        if args.command == "list":
            _list_commands(services, Console())
            return 0
        if args.command == "run":
            return _run_line(services, args)
        run_console(services)
        return 0
    finally:
        services.stop()


if __name__ == "__main__":
    sys.exit(main())
