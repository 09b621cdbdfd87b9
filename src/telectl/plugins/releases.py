"""Latest-release lookup and platform-specific asset resolution."""

import logging
import platform
import sys
from typing import Any

import httpx
from pydantic import ValidationError

from telectl.config import ReleaseConfig
from telectl.errors import MalformedRelease, TransportError, UnsupportedArchitecture
from telectl.models import LatestRelease, ReleaseAsset

logger = logging.getLogger(__name__)

# Runtime architecture identifier -> asset naming
ARCH_ALIASES = {
    "amd64": "x86_64",
    "386": "x86_32",
}

_MACHINE_TO_ARCH = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "i386": "386",
    "i486": "386",
    "i586": "386",
    "i686": "386",
    "x86": "386",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv6l": "arm",
    "armv7l": "arm",
    "s390x": "s390x",
    "ppc64le": "ppc64le",
}


def current_platform() -> tuple[str, str]:
    """Return the (os, arch) identifiers of the running interpreter.

    The values follow the naming used for release assets, e.g.
    ``("linux", "amd64")`` or ``("darwin", "arm64")``.
    """
    os_name = sys.platform
    if os_name.startswith("linux"):
        os_name = "linux"
    elif os_name == "win32":
        os_name = "windows"
    machine = platform.machine().lower()
    return os_name, _MACHINE_TO_ARCH.get(machine, machine)


def map_architecture(arch: str) -> str:
    """Translate an architecture identifier into its asset suffix.

    Raises:
        UnsupportedArchitecture: For anything other than amd64 and 386.
    """
    try:
        return ARCH_ALIASES[arch]
    except KeyError:
        raise UnsupportedArchitecture(arch) from None


def major_tag(tag_name: str | None) -> str:
    """Return the part of a release tag before its first '.'.

    >>> major_tag("2.4.1-beta")
    '2'
    """
    if not tag_name:
        raise MalformedRelease("Release has no tag_name")
    return tag_name.split(".", 1)[0]


def decode_release(document: Any) -> LatestRelease:
    """Validate the shape of a latest-release document.

    Raises:
        MalformedRelease: If ``assets`` is missing or is not a list of
            objects each carrying a string ``browser_download_url``.
    """
    try:
        return LatestRelease.model_validate(document)
    except ValidationError as e:
        raise MalformedRelease(f"Unexpected release document: {e}") from e


def extract_assets(document: Any) -> list[ReleaseAsset]:
    return decode_release(document).assets


class ReleaseResolver:
    """Resolves download links for a plugin repository's latest release."""

    def __init__(self, config: ReleaseConfig | None = None) -> None:
        self._config = config or ReleaseConfig()

    def latest_release_url(self, repo: str) -> str:
        api_base = self._config.api_base.rstrip("/")
        return f"{api_base}/repos/{self._config.owner}/{repo}/releases/latest"

    def latest_release(self, repo: str) -> dict[str, Any]:
        """Fetch the raw latest-release document for ``repo``.

        Raises:
            TransportError: On network failure or an error status.
            MalformedRelease: If the body is not a JSON object.
        """
        url = self.latest_release_url(repo)
        kwargs = {}
        if self._config.timeout is not None:
            kwargs["timeout"] = self._config.timeout

        logger.debug(f"Fetching latest release from {url}")
        try:
            with httpx.Client(**kwargs) as client:
                resp = client.get(url, headers={"Accept": "application/vnd.github+json"})
                resp.raise_for_status()
        except httpx.HTTPError as e:
            raise TransportError(url, str(e)) from e

        try:
            data = resp.json()
        except ValueError as e:
            raise MalformedRelease(f"Release document from {url} is not JSON") from e
        if not isinstance(data, dict):
            raise MalformedRelease(f"Release document from {url} is not an object")
        return data

    def asset_links(self, repo: str) -> list[str]:
        """Every asset download URL attached to the latest release."""
        release = decode_release(self.latest_release(repo))
        return [asset.browser_download_url for asset in release.assets]

    def asset_url(self, repo: str, tag_name: str | None, os_name: str, arch: str) -> str:
        """Build the canonical download URL of a platform asset.

        The architecture is checked before anything else, so an unsupported
        platform never yields a URL.
        """
        suffix = map_architecture(arch)
        tag = major_tag(tag_name)
        artifact = self._config.artifact_name.format(repo=repo)
        host = self._config.download_host.rstrip("/")
        return (
            f"{host}/{self._config.owner}/{repo}/releases/download/"
            f"{tag}/{artifact}_{os_name}_{suffix}"
        )

    def platform_asset_url(self, repo: str, os_name: str | None = None, arch: str | None = None) -> str:
        """Resolve the asset URL of the latest release for a platform.

        Defaults to the running platform. An unsupported architecture fails
        before any network request.
        """
        detected_os, detected_arch = current_platform()
        os_name = os_name or detected_os
        arch = arch or detected_arch
        map_architecture(arch)

        release = decode_release(self.latest_release(repo))
        url = self.asset_url(repo, release.tag_name, os_name, arch)
        logger.info(f"Resolved {repo} asset for {os_name}/{arch}: {url}")
        return url
