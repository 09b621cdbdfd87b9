"""Interface of the plugin-management service client."""

from typing import Protocol

from telectl.models import LoadOutcome, PluginList, PluginSpec, SwapOutcome, UnloadOutcome


class PluginClient(Protocol):
    """Operations the control plane exposes for plugin administration.

    Every method raises :class:`telectl.errors.RemoteError` when the
    service reports a failure and :class:`telectl.errors.TransportError`
    when it cannot be reached.
    """

    def load_plugin(self, paths: list[str]) -> list[LoadOutcome]:
        """Load a plugin binary, optionally with its signature file."""
        ...

    def unload_plugin(self, plugin_type: str, name: str, version: int) -> UnloadOutcome:
        ...

    def swap_plugin(self, paths: list[str], spec: PluginSpec) -> SwapOutcome:
        """Load ``paths`` and unload ``spec`` as one request.

        Success means both sides completed. After a failure neither side
        may be assumed committed, and nothing is rolled back.
        """
        ...

    def get_plugins(self, running: bool = False) -> PluginList:
        ...
