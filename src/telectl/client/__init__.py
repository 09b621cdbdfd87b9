"""Clients for the plugin-management service."""

from .base import PluginClient
from .rest import RemotePluginClient

__all__ = [
    "PluginClient",
    "RemotePluginClient",
]
