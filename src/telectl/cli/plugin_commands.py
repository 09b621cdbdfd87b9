"""Plugin load, unload, swap and list commands."""

import logging

import click

from telectl.errors import TelectlError, UsageError, ValidationError

from .output import echo_lines, fail, loaded_lines, print_plugin_table, swap_lines, unloaded_lines

logger = logging.getLogger(__name__)

SWAP_STATE_NOTE = (
    "The remote state of both the load and the unload is unknown; "
    "check with 'telectl list-plugins' before retrying."
)


def _usage_error(ctx: click.Context, err: TelectlError) -> click.UsageError:
    return click.UsageError(str(err), ctx=ctx)


@click.command()
@click.argument("plugin_path")
@click.option("--plugin-asc", "-a", default=None, help="Signature file (.asc) for the plugin")
@click.pass_context
def load(ctx, plugin_path, plugin_asc):
    """Load a plugin binary into the control plane."""
    from telectl.plugins.swap import resolve_load_paths

    try:
        paths = resolve_load_paths(plugin_path, plugin_asc)
    except UsageError as e:
        raise _usage_error(ctx, e) from e

    try:
        loaded = ctx.obj.plugin_client().load_plugin(paths)
    except TelectlError as e:
        fail("Error loading plugin", e)

    for plugin in loaded:
        echo_lines(loaded_lines(plugin) + [""])


@click.command()
@click.argument("plugin_type", required=False, default="")
@click.argument("name", required=False, default="")
@click.argument("version", required=False, default="")
@click.pass_context
def unload(ctx, plugin_type, name, version):
    """Unload a plugin.

    PLUGIN_TYPE, NAME and VERSION identify the plugin, e.g.
    ``telectl unload collector cpu 3``.
    """
    from telectl.plugins.spec import parse_parts

    try:
        spec = parse_parts(plugin_type, name, version)
    except ValidationError as e:
        raise _usage_error(ctx, e) from e

    try:
        outcome = ctx.obj.plugin_client().unload_plugin(spec.type, spec.name, spec.version)
    except TelectlError as e:
        fail("Error unloading plugin", e)

    echo_lines(unloaded_lines(outcome))


@click.command()
@click.argument("args", nargs=-1, metavar="PLUGIN_PATH [TYPE:NAME:VERSION]")
@click.option("--plugin-asc", "-a", default=None, help="Signature file (.asc) for the new plugin")
@click.option("--plugin-type", "-t", default=None, help="Type of the plugin to unload")
@click.option("--plugin-name", "-n", default=None, help="Name of the plugin to unload")
@click.option("--plugin-version", "-v", type=int, default=None, help="Version of the plugin to unload")
@click.pass_context
def swap(ctx, args, plugin_asc, plugin_type, plugin_name, plugin_version):
    """Load a plugin and unload another in one request.

    The plugin to unload is given either as a TYPE:NAME:VERSION token or
    with --plugin-type, --plugin-name and --plugin-version.

    Example: telectl swap ./new.plugin collector:cpu:1
    """
    from telectl.plugins.swap import SwapOrchestrator

    try:
        request = SwapOrchestrator.prepare(
            args,
            plugin_asc=plugin_asc,
            plugin_type=plugin_type,
            plugin_name=plugin_name,
            plugin_version=plugin_version,
        )
    except (UsageError, ValidationError) as e:
        raise _usage_error(ctx, e) from e

    try:
        outcome = SwapOrchestrator(ctx.obj.plugin_client()).execute(request)
    except TelectlError as e:
        fail("Error swapping plugins", e, note=SWAP_STATE_NOTE)

    echo_lines(swap_lines(outcome))


@click.command("list-plugins")
@click.option("--running", is_flag=True, help="Show running plugins instead of loaded ones")
@click.pass_context
def list_plugins(ctx, running):
    """List loaded (or running) plugins."""
    try:
        plugins = ctx.obj.plugin_client().get_plugins(running=running)
    except TelectlError as e:
        fail("Error listing plugins", e)

    print_plugin_table(plugins, running)
