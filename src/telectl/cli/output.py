"""Rendering of command results."""

import click
from rich.console import Console
from rich.markup import escape
from rich.measure import Measurement
from rich.table import Table

from telectl.errors import RemoteError, TelectlError
from telectl.models import LoadOutcome, PluginList, SwapOutcome, UnloadOutcome, format_time

console = Console()

# Upper bound when measuring a table; rows are never shrunk below their content.
_MAX_TABLE_WIDTH = 10_000


def loaded_lines(plugin: LoadOutcome) -> list[str]:
    return [
        "Plugin loaded",
        f"Name: {plugin.name}",
        f"Version: {plugin.version}",
        f"Type: {plugin.type}",
        f"Signed: {plugin.signed}",
        f"Loaded Time: {format_time(plugin.loaded_time)}",
    ]


def unloaded_lines(plugin: UnloadOutcome) -> list[str]:
    return [
        "Plugin unloaded",
        f"Name: {plugin.name}",
        f"Version: {plugin.version}",
        f"Type: {plugin.type}",
    ]


def swap_lines(outcome: SwapOutcome) -> list[str]:
    """Loaded block, a blank line, then the unloaded block."""
    return loaded_lines(outcome.loaded) + [""] + unloaded_lines(outcome.unloaded)


def echo_lines(lines: list[str]) -> None:
    for line in lines:
        click.echo(line)


def _print_full_width(table: Table) -> None:
    """Print a table at its natural width so no cell is truncated."""
    options = console.options.update(max_width=_MAX_TABLE_WIDTH)
    width = Measurement.get(console, options, table).maximum
    Console(width=max(console.width, width)).print(table, crop=False)


def print_plugin_table(plugins: PluginList, running: bool) -> None:
    if running:
        if not plugins.running_plugins:
            console.print("No running plugins found. Have you started a task?")
            return
        table = Table(box=None, pad_edge=False, header_style="bold")
        for column in ("NAME", "HIT COUNT", "LAST HIT", "TYPE", "PPROF PORT"):
            table.add_column(column)
        for p in plugins.running_plugins:
            table.add_row(
                p.name,
                str(p.hitcount),
                format_time(p.last_hit_time),
                p.type,
                str(p.pprof_port),
            )
    else:
        if not plugins.loaded_plugins:
            console.print("No plugins found. Have you loaded a plugin?")
            return
        table = Table(box=None, pad_edge=False, header_style="bold")
        for column in ("NAME", "VERSION", "TYPE", "SIGNED", "STATUS", "LOADED TIME"):
            table.add_column(column)
        for p in plugins.loaded_plugins:
            table.add_row(
                p.name,
                str(p.version),
                p.type,
                str(p.signed),
                p.status,
                format_time(p.loaded_time),
            )
    _print_full_width(table)


def fail(operation: str, err: TelectlError, note: str = "") -> None:
    """Report a terminal failure and exit with status 1."""
    console.print(f"[red]{operation}:[/red] {escape(str(err))}", soft_wrap=True)
    if isinstance(err, RemoteError):
        for key, value in err.fields.items():
            console.print(f"  {escape(str(key))}: {escape(str(value))}", soft_wrap=True)
    if note:
        console.print(f"[yellow]{escape(note)}[/yellow]", soft_wrap=True)
    raise SystemExit(1)
