"""Public plugin catalog: fetching and filtering."""

import logging
from collections.abc import Iterable

import httpx
from pydantic import TypeAdapter, ValidationError

from telectl.config import CatalogConfig
from telectl.errors import MalformedResponse, TransportError
from telectl.models import CatalogEntry

logger = logging.getLogger(__name__)

_ENTRIES = TypeAdapter(list[CatalogEntry])


class CatalogClient:
    """Reads the catalog of publicly available plugins."""

    def __init__(self, config: CatalogConfig | None = None) -> None:
        self._config = config or CatalogConfig()

    @property
    def url(self) -> str:
        return self._config.url

    def fetch(self) -> list[CatalogEntry]:
        """Fetch every catalog entry in the order the service returns them.

        Raises:
            TransportError: If the catalog cannot be reached.
            MalformedResponse: If the payload is not a list of plugin objects.
        """
        kwargs = {}
        if self._config.timeout is not None:
            kwargs["timeout"] = self._config.timeout

        logger.debug(f"Fetching plugin catalog from {self.url}")
        try:
            with httpx.Client(**kwargs) as client:
                resp = client.get(self.url)
                resp.raise_for_status()
        except httpx.HTTPError as e:
            raise TransportError(self.url, str(e)) from e

        try:
            return _ENTRIES.validate_json(resp.content)
        except ValidationError as e:
            raise MalformedResponse(f"Invalid catalog payload from {self.url}: {e}") from e


def filter_catalog(
    entries: Iterable[CatalogEntry],
    plugin_type: str | None = None,
    plugin_name: str | None = None,
) -> list[CatalogEntry]:
    """Select the entries matching every supplied filter.

    Args:
        entries: Catalog entries; not modified.
        plugin_type: Substring that must appear in the entry type.
        plugin_name: Substring that must appear in the entry full name or name.

    Returns:
        A new list, in source order.
    """
    results = []
    for entry in entries:
        if plugin_type and plugin_type not in entry.type:
            continue
        if plugin_name and plugin_name not in entry.full_name and plugin_name not in entry.name:
            continue
        results.append(entry)
    return results
