"""HTTP client for the control plane's plugin REST API.

Responses are wrapped in an envelope::

    {"meta": {"code": 200, "message": "...", "type": "...", "version": 1},
     "body": {...}}

Failures carry ``{"message": "...", "fields": {...}}`` as the body.
"""

import logging
from contextlib import ExitStack
from pathlib import Path
from typing import Any

import httpx
from pydantic import ValidationError

from telectl.config import ControlPlaneConfig
from telectl.errors import FileError, RemoteError, TransportError
from telectl.models import LoadOutcome, PluginList, PluginSpec, SwapOutcome, UnloadOutcome

logger = logging.getLogger(__name__)

BASIC_AUTH_USER = "snap"


class RemotePluginClient:
    """Plugin administration over the control plane's REST API."""

    def __init__(self, config: ControlPlaneConfig | None = None) -> None:
        self._config = config or ControlPlaneConfig()
        if not self._config.url:
            raise ValueError("Control plane URL is required")
        self._base_url = f"{self._config.url.rstrip('/')}/{self._config.api_version}"

    @property
    def base_url(self) -> str:
        return self._base_url

    def _client(self) -> httpx.Client:
        """Create an httpx client with configured defaults."""
        kwargs: dict[str, Any] = {
            "base_url": self._base_url,
            "verify": not self._config.insecure,
        }
        if self._config.password:
            kwargs["auth"] = (BASIC_AUTH_USER, self._config.password)
        if self._config.timeout is not None:
            kwargs["timeout"] = self._config.timeout
        return httpx.Client(**kwargs)

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        """Send a request and unwrap the response envelope.

        Raises:
            TransportError: If the service cannot be reached.
            RemoteError: If the service reports a failure.
        """
        url = f"{self._base_url}{path}"
        logger.debug(f"{method} {url}")
        try:
            with self._client() as client:
                resp = client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise TransportError(url, str(e)) from e

        try:
            envelope = resp.json()
        except ValueError:
            envelope = None
        if not isinstance(envelope, dict):
            if resp.is_error:
                raise RemoteError(f"{resp.status_code} {resp.reason_phrase}: {resp.text.strip()}")
            raise RemoteError(f"Unexpected response from {url}")

        body = envelope.get("body")
        if not isinstance(body, dict):
            body = {}
        if resp.is_error:
            meta = envelope.get("meta") or {}
            message = body.get("message") or meta.get("message") or resp.reason_phrase
            raise RemoteError(message, body.get("fields"))
        return body

    def _decode(self, model: type, data: Any) -> Any:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise RemoteError(f"Unexpected {model.__name__} in response: {e}") from e

    # ------------------------------------------------------------------
    # Load / unload
    # ------------------------------------------------------------------

    def load_plugin(self, paths: list[str]) -> list[LoadOutcome]:
        """Upload a plugin binary (and optional signature) for loading.

        Raises:
            FileError: If a local file cannot be opened.
        """
        with ExitStack() as stack:
            files = []
            for path in paths:
                try:
                    handle = stack.enter_context(open(path, "rb"))
                except OSError as e:
                    raise FileError(path, f"cannot open plugin file: {e}") from e
                files.append(("plugin", (Path(path).name, handle, "application/octet-stream")))

            body = self._request("POST", "/plugins", files=files)

        loaded = body.get("loaded_plugins") or []
        outcomes = [self._decode(LoadOutcome, p) for p in loaded]
        for p in outcomes:
            logger.info(f"Loaded plugin {p.type}:{p.name}:{p.version}")
        return outcomes

    def unload_plugin(self, plugin_type: str, name: str, version: int) -> UnloadOutcome:
        body = self._request("DELETE", f"/plugins/{plugin_type}/{name}/{version}")
        outcome = self._decode(UnloadOutcome, body)
        logger.info(f"Unloaded plugin {outcome.type}:{outcome.name}:{outcome.version}")
        return outcome

    def swap_plugin(self, paths: list[str], spec: PluginSpec) -> SwapOutcome:
        """Load ``paths`` then unload ``spec``.

        Nothing is undone when the unload fails: the new plugin stays
        loaded and is named in ``fields["loaded"]`` of the RemoteError.
        """
        loaded = self.load_plugin(paths)
        if not loaded:
            raise RemoteError("Load reported no plugins")
        new = loaded[0]

        try:
            unloaded = self.unload_plugin(spec.type, spec.name, spec.version)
        except (RemoteError, TransportError) as e:
            fields = dict(e.fields) if isinstance(e, RemoteError) else {}
            fields.setdefault("error", e.message if isinstance(e, RemoteError) else str(e))
            fields["loaded"] = f"{new.type}:{new.name}:{new.version}"
            logger.error(f"Swap left {fields['loaded']} loaded; unload of {spec} failed")
            raise RemoteError(f"Failed to unload {spec}", fields) from e

        return SwapOutcome(loaded=new, unloaded=unloaded)

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def get_plugins(self, running: bool = False) -> PluginList:
        params = {"running": ""} if running else None
        body = self._request("GET", "/plugins", params=params)
        return self._decode(PluginList, body)
