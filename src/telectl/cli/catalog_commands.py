"""Plugin catalog, release and download commands."""

import json
import logging

import click

from telectl.errors import TelectlError

from .output import console, fail

logger = logging.getLogger(__name__)


@click.command("list-catalog")
@click.option("--plugin-type", "-t", default=None, help="Only plugins whose type contains this")
@click.option("--plugin-name", "-n", default=None, help="Only plugins whose name contains this")
@click.pass_context
def list_catalog(ctx, plugin_type, plugin_name):
    """Print publicly available plugins as JSON."""
    from telectl.plugins.catalog import CatalogClient, filter_catalog

    catalog = CatalogClient(ctx.obj.config.catalog)
    try:
        entries = catalog.fetch()
    except TelectlError as e:
        fail("Error fetching plugin catalog", e)

    matches = filter_catalog(entries, plugin_type=plugin_type, plugin_name=plugin_name)
    logger.debug(f"{len(matches)} of {len(entries)} catalog entries match")
    click.echo(json.dumps([m.model_dump(by_alias=True) for m in matches], indent=4))


def _download(url, filename, no_clobber, timeout=None):
    from telectl.plugins.downloader import download, filename_from_url

    click.echo(f"Downloading {url} to {filename or filename_from_url(url)}")
    try:
        result = download(url, filename=filename, no_clobber=no_clobber, timeout=timeout)
    except TelectlError as e:
        fail("Error downloading", e)
    click.echo(f"{result.size} bytes downloaded.")


@click.command("download")
@click.argument("url")
@click.option("--output", "-o", default="", help="Target file (default: last URL path segment)")
@click.option("--no-clobber", is_flag=True, help="Fail instead of overwriting an existing file")
def download_url(url, output, no_clobber):
    """Download a plugin binary from URL."""
    _download(url, output, no_clobber)


@click.command("release-links")
@click.argument("repo")
@click.pass_context
def release_links(ctx, repo):
    """Print every asset URL of REPO's latest release."""
    from telectl.plugins.releases import ReleaseResolver

    resolver = ReleaseResolver(ctx.obj.config.releases)
    try:
        links = resolver.asset_links(repo)
    except TelectlError as e:
        fail(f"Error reading latest release of {repo}", e)

    if not links:
        console.print(f"Latest release of {repo} has no assets.")
    for link in links:
        click.echo(link)


@click.command("download-release")
@click.argument("repo")
@click.option("--output", "-o", default="", help="Target file (default: REPO)")
@click.option("--no-clobber", is_flag=True, help="Fail instead of overwriting an existing file")
@click.pass_context
def download_release(ctx, repo, output, no_clobber):
    """Download REPO's latest release built for this platform."""
    from telectl.plugins.releases import ReleaseResolver

    config = ctx.obj.config.releases
    resolver = ReleaseResolver(config)
    try:
        url = resolver.platform_asset_url(repo)
    except TelectlError as e:
        fail(f"Error resolving latest release of {repo}", e)

    _download(url, output or repo, no_clobber, timeout=config.timeout)
