"""telectl CLI - Main entry point."""

import logging
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from telectl import __version__

console = Console()

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"

_log_handler: logging.Handler | None = None


def _setup_logging(verbose: bool) -> None:
    """Attach a stderr handler to the package logger."""
    global _log_handler
    root = logging.getLogger("telectl")
    if _log_handler is not None:
        root.removeHandler(_log_handler)
    _log_handler = logging.StreamHandler()
    _log_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(_log_handler)
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)


@click.group()
@click.version_option(version=__version__, prog_name="telectl")
@click.option("--url", "-u", default=None, help="Control plane URL (env: TELECTL_URL)")
@click.option("--api-version", default=None, help="Control plane API version (default: v1)")
@click.option("--password", "-p", default=None, help="Control plane password (env: TELECTL_PASSWORD)")
@click.option("--insecure", is_flag=True, help="Skip TLS certificate verification")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file (default: ~/.telectl/config.yaml)",
)
@click.option("--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, url, api_version, password, insecure, config_path, verbose):
    """telectl - administer plugins of a telemetry service."""
    from telectl.cli.context import CommandContext
    from telectl.config import load_config
    from telectl.errors import ConfigError

    _setup_logging(verbose)

    if ctx.obj is None:
        try:
            config = load_config(config_path)
        except ConfigError as e:
            console.print(f"[red]{escape(str(e))}[/red]", soft_wrap=True)
            raise SystemExit(1) from e
        ctx.obj = CommandContext(config=config)

    control_plane = ctx.obj.config.control_plane
    if url:
        control_plane.url = url
    if api_version:
        control_plane.api_version = api_version
    if password:
        control_plane.password = password
    if insecure:
        control_plane.insecure = True


from .catalog_commands import download_release, download_url, list_catalog, release_links  # noqa: E402
from .plugin_commands import list_plugins, load, swap, unload  # noqa: E402

cli.add_command(load)
cli.add_command(unload)
cli.add_command(swap)
cli.add_command(list_plugins)
cli.add_command(list_catalog)
cli.add_command(download_url)
cli.add_command(release_links)
cli.add_command(download_release)


if __name__ == "__main__":
    cli()
