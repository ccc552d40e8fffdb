"""tooldialect CLI - inspect dialects, system prompts and parses.

Examples:
    tooldialect dialects
    tooldialect prompt --dialect tagged --tools tools.yaml
    tooldialect parse --dialect fenced --tools tools.yaml reply.txt
    echo '<tool_call>{"name": "x", "arguments": {}}</tool_call>' | tooldialect parse -t tools.yaml
"""

import asyncio
import json
import sys
from typing import Any, NoReturn

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from tooldialect.capabilities import CapabilityDescriptor, CapabilityRegistry
from tooldialect.dialects import DIALECTS, DialectParser, dialect_from_config
from tooldialect.foundation.config import ToolDialectConfig, load_config, load_declarations
from tooldialect.foundation.errors import ToolDialectError
from tooldialect.foundation.logging import configure_logging

console = Console()
err_console = Console(stderr=True)


def _echo_arguments(arguments: Any) -> str:
    return json.dumps(arguments, sort_keys=True)


def _load_registry(tools_path: str | None) -> CapabilityRegistry:
    """Registry whose capabilities echo their arguments back as JSON."""
    if tools_path is None:
        return CapabilityRegistry()
    return CapabilityRegistry(
        CapabilityDescriptor.from_declaration(decl, invoke=_echo_arguments)
        for decl in load_declarations(tools_path)
    )


def _fail(error: ToolDialectError) -> NoReturn:
    err_console.print(f"[bold red]{error.error_id}[/bold red] {escape(error.message)}")
    for hint in error.recovery_hints:
        err_console.print(f"  [dim]-[/dim] {escape(hint)}")
    sys.exit(1)


def _dialect(ctx: click.Context, dialect_id: str | None) -> DialectParser:
    config: ToolDialectConfig = ctx.obj["config"]
    try:
        return dialect_from_config(dialect_id, config)
    except ToolDialectError as e:
        _fail(e)


@click.group()
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None,
              help="Config file (default: .tooldialect/config.yaml)")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, debug: bool) -> None:
    """Function-call dialects for LLM conversations."""
    try:
        config = load_config(config_path)
    except ToolDialectError as e:
        _fail(e)
    configure_logging(debug=debug or config.debug)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@main.command("dialects")
@click.pass_context
def list_dialects(ctx: click.Context) -> None:
    """List registered dialects and their error handling."""
    config: ToolDialectConfig = ctx.obj["config"]

    table = Table(show_header=True, header_style="bold")
    table.add_column("Dialect")
    table.add_column("Class")
    table.add_column("Wraps errors")
    table.add_column("Validates args")

    for dialect_id in DIALECTS:
        dialect = dialect_from_config(dialect_id, config)
        marker = " [dim](default)[/dim]" if dialect_id == config.default_dialect else ""
        table.add_row(
            f"{dialect_id}{marker}",
            type(dialect).__name__,
            "yes" if dialect.wraps_errors else "no",
            "yes" if dialect.settings.validate_arguments else "no",
        )

    console.print(table)


@main.command("prompt")
@click.option("--dialect", "-d", "dialect_id", default=None, help="Dialect id")
@click.option("--tools", "-t", "tools_path", type=click.Path(exists=True, dir_okay=False),
              default=None, help="YAML file with tool declarations")
@click.pass_context
def show_prompt(ctx: click.Context, dialect_id: str | None, tools_path: str | None) -> None:
    """Print the system message a dialect would send."""
    dialect = _dialect(ctx, dialect_id)
    try:
        message = dialect.build_system_message(_load_registry(tools_path))
    except ToolDialectError as e:
        _fail(e)
    click.echo(message.content)


@main.command("parse")
@click.argument("text_file", type=click.File("r"), default="-")
@click.option("--dialect", "-d", "dialect_id", default=None, help="Dialect id")
@click.option("--tools", "-t", "tools_path", type=click.Path(exists=True, dir_okay=False),
              default=None, help="YAML file with tool declarations")
@click.option("--model", "model_name", default="", help="Model name recorded on the response")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def parse_reply(
    ctx: click.Context,
    text_file: Any,
    dialect_id: str | None,
    tools_path: str | None,
    model_name: str,
    json_output: bool,
) -> None:
    """Run a model reply through a dialect.

    Declared tools echo their arguments back as JSON, so the output shows
    exactly what the dialect extracted, or the feedback the model would get.
    """
    dialect = _dialect(ctx, dialect_id)
    try:
        registry = _load_registry(tools_path)
    except ToolDialectError as e:
        _fail(e)

    raw_text = text_file.read()
    response = asyncio.run(dialect.parse(raw_text, model_name, registry))

    if json_output:
        click.echo(json.dumps(response.to_dict(), indent=2, default=str))
    else:
        title = "[green]tool result[/green]" if response.ok else "[red]feedback[/red]"
        console.print(Panel(
            Text(response.content),
            title=f"{dialect.dialect_id}: {title}",
            border_style="green" if response.ok else "red",
        ))

    if not response.ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
