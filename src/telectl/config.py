"""Client configuration loaded from YAML with Pydantic validation."""

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from telectl.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".telectl" / "config.yaml"

ENV_URL = "TELECTL_URL"
ENV_PASSWORD = "TELECTL_PASSWORD"


class ControlPlaneConfig(BaseModel):
    """Connection settings for the plugin-management REST API.

    Attributes:
        url: Base URL of the control plane (e.g. "http://localhost:8181").
        api_version: API version path segment.
        password: Password for basic auth; the user name is always "snap".
        insecure: Skip TLS certificate verification.
        timeout: Request timeout in seconds. None keeps the transport default.
    """

    url: str = Field(default="http://localhost:8181", min_length=1)
    api_version: str = "v1"
    password: str | None = None
    insecure: bool = False
    timeout: float | None = Field(default=None, gt=0)


class CatalogConfig(BaseModel):
    url: str = "http://staging.webapi.snap-telemetry.io/plugin"
    timeout: float | None = Field(default=None, gt=0)


class ReleaseConfig(BaseModel):
    """Where release descriptors and assets are published.

    ``artifact_name`` is a format string; ``{repo}`` is replaced by the
    plugin repository name.
    """

    api_base: str = "https://api.github.com"
    download_host: str = "https://github.com"
    owner: str = "intelsdi-x"
    artifact_name: str = "{repo}"
    timeout: float | None = Field(default=None, gt=0)


class TelectlConfig(BaseModel):
    control_plane: ControlPlaneConfig = Field(default_factory=ControlPlaneConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    releases: ReleaseConfig = Field(default_factory=ReleaseConfig)


def load_yaml(path: Path) -> dict:
    """Load a YAML mapping, returning {} for an empty file.

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigError(f"Configuration file not found: {path}") from None
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration in {path} must be a mapping")
    return data


def load_config(path: Path | None = None, environ: dict[str, str] | None = None) -> TelectlConfig:
    """Build the effective configuration.

    An explicit ``path`` must exist; the default path is optional.
    ``TELECTL_URL`` and ``TELECTL_PASSWORD`` override the file.

    Raises:
        ConfigError: If the file is unreadable or fails validation.
    """
    environ = os.environ if environ is None else environ

    data: dict = {}
    if path is not None:
        data = load_yaml(path)
    elif DEFAULT_CONFIG_PATH.exists():
        data = load_yaml(DEFAULT_CONFIG_PATH)
        path = DEFAULT_CONFIG_PATH

    try:
        config = TelectlConfig(**data)
    except PydanticValidationError as e:
        raise ConfigError(f"Configuration validation failed for {path}: {e}") from e

    if environ.get(ENV_URL):
        config.control_plane.url = environ[ENV_URL]
    if environ.get(ENV_PASSWORD):
        config.control_plane.password = environ[ENV_PASSWORD]

    if path is not None:
        logger.debug(f"Loaded configuration from {path}")
    return config
