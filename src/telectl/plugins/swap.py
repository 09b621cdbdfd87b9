"""Load-path resolution and swap orchestration.

A swap loads a new plugin and unloads an existing one in a single call to
the plugin-management service. Every input is resolved and validated
locally before that call; nothing is sent if any of it is invalid.

The service either reports both sides as done or raises. When it raises,
no conclusion is drawn about which side took effect remotely, and no
attempt is made to restore the previous plugin.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from telectl.client import PluginClient
from telectl.errors import UsageError
from telectl.models import PluginSpec, SwapOutcome

from .spec import UnloadTarget, unload_target

logger = logging.getLogger(__name__)

SIGNATURE_SUFFIX = ".asc"


def resolve_load_paths(plugin_path: str, plugin_asc: str | None = None) -> list[str]:
    """Build the list of files to upload: the plugin and its signature.

    Raises:
        UsageError: If the signature path does not end with ``.asc``.
    """
    if not plugin_path:
        raise UsageError("Must provide a plugin path")
    paths = [plugin_path]
    if plugin_asc:
        if not plugin_asc.endswith(SIGNATURE_SUFFIX):
            raise UsageError(f"Must be a {SIGNATURE_SUFFIX} file for the --plugin-asc flag")
        paths.append(plugin_asc)
    return paths


@dataclass(frozen=True)
class SwapRequest:
    load_paths: list[str]
    unload: PluginSpec


class SwapOrchestrator:
    """Resolves swap arguments and submits them to the service."""

    def __init__(self, client: PluginClient) -> None:
        self._client = client

    @staticmethod
    def prepare(
        args: Sequence[str],
        plugin_asc: str | None = None,
        plugin_type: str | None = None,
        plugin_name: str | None = None,
        plugin_version: int | None = None,
    ) -> SwapRequest:
        """Resolve positional args and flags into a validated request.

        ``args`` is ``[plugin_path]`` or ``[plugin_path, "type:name:version"]``;
        without the token the unload target comes from the flags.

        Raises:
            UsageError: Wrong number of positional args or a bad signature path.
            ValidationError: The unload target is incomplete or invalid.
        """
        if len(args) < 1 or len(args) > 2:
            raise UsageError("Incorrect usage: expected a plugin path and an optional type:name:version")

        load_paths = resolve_load_paths(args[0], plugin_asc)
        target: UnloadTarget = unload_target(
            args[1] if len(args) == 2 else None,
            plugin_type=plugin_type,
            name=plugin_name,
            version=plugin_version,
        )
        return SwapRequest(load_paths=load_paths, unload=target.resolve())

    def execute(self, request: SwapRequest) -> SwapOutcome:
        logger.info(f"Swapping {request.load_paths[0]} for {request.unload}")
        return self._client.swap_plugin(request.load_paths, request.unload)

    def swap(self, args: Sequence[str], **flags) -> SwapOutcome:
        return self.execute(self.prepare(args, **flags))
