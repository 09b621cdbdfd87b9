"""Stream remote files (plugin binaries, release assets) to disk."""

import logging
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlsplit

import httpx

from telectl.errors import CreateFailed, FetchFailed, WriteFailed

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


@dataclass
class DownloadResult:
    path: Path
    size: int


def filename_from_url(url: str) -> str:
    """Return the last segment of the URL path."""
    return urlsplit(url).path.rstrip("/").rsplit("/", 1)[-1]


def download(
    url: str,
    filename: str = "",
    no_clobber: bool = False,
    timeout: float | None = None,
) -> DownloadResult:
    """Download ``url`` into a newly created local file.

    The target file is created before the request is made. An existing
    file is truncated unless ``no_clobber`` is set. On failure a partially
    written file is left in place.

    Args:
        url: Resource to fetch.
        filename: Target path; empty derives it from the URL.
        no_clobber: Refuse to overwrite an existing file.
        timeout: Request timeout in seconds; None keeps the httpx default.

    Returns:
        Target path and number of bytes written.

    Raises:
        CreateFailed: If the target cannot be created.
        FetchFailed: If the request fails or returns an error status.
        WriteFailed: If the response body cannot be fully written.
    """
    target = Path(filename or filename_from_url(url))
    if not target.name:
        raise CreateFailed(str(target), f"cannot derive a file name from {url}")

    mode = "xb" if no_clobber else "wb"
    try:
        output = open(target, mode)
    except OSError as e:
        raise CreateFailed(str(target), f"Error while creating file: {e}") from e

    kwargs = {"follow_redirects": True}
    if timeout is not None:
        kwargs["timeout"] = timeout

    written = 0
    with output:
        try:
            with httpx.Client(**kwargs) as client:
                with client.stream("GET", url) as resp:
                    if resp.is_error:
                        raise FetchFailed(url, f"HTTP {resp.status_code}")
                    try:
                        for chunk in resp.iter_bytes(CHUNK_SIZE):
                            output.write(chunk)
                            written += len(chunk)
                    except (httpx.HTTPError, OSError) as e:
                        raise WriteFailed(
                            str(target), f"Error while downloading {url}: {e}"
                        ) from e
        except httpx.HTTPError as e:
            raise FetchFailed(url, f"Error while downloading: {e}") from e

    logger.info(f"Downloaded {written} bytes from {url} to {target}")
    return DownloadResult(path=target, size=written)
