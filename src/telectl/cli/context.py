"""Per-invocation state shared by command handlers."""

from dataclasses import dataclass, field

from telectl.client import PluginClient, RemotePluginClient
from telectl.config import TelectlConfig


@dataclass
class CommandContext:
    """Configuration and collaborators for one command invocation.

    The plugin client is created on first use unless one was supplied.
    """

    config: TelectlConfig = field(default_factory=TelectlConfig)
    client: PluginClient | None = None

    def plugin_client(self) -> PluginClient:
        if self.client is None:
            self.client = RemotePluginClient(self.config.control_plane)
        return self.client
