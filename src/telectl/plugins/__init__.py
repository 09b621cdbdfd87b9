"""Plugin administration: identities, catalog, releases, downloads, swaps."""

from .catalog import CatalogClient, filter_catalog
from .downloader import DownloadResult, download
from .releases import ReleaseResolver, current_platform, map_architecture
from .spec import FlagTarget, TokenTarget, parse_parts, parse_token, unload_target
from .swap import SwapOrchestrator, SwapRequest, resolve_load_paths

__all__ = [
    "CatalogClient",
    "DownloadResult",
    "FlagTarget",
    "ReleaseResolver",
    "SwapOrchestrator",
    "SwapRequest",
    "TokenTarget",
    "current_platform",
    "download",
    "filter_catalog",
    "map_architecture",
    "parse_parts",
    "parse_token",
    "resolve_load_paths",
    "unload_target",
]
