"""Parsing and validation of plugin identities (type, name, version).

A plugin can be named either with one delimited token such as
``collector:cpu:3`` (split on ``os.pathsep``) or with three discrete
values. Both forms resolve to the same :class:`PluginSpec`.
"""

import logging
import os
import re
from dataclasses import dataclass

from telectl.errors import (
    IncompleteSpec,
    InvalidVersion,
    MissingName,
    MissingType,
    MissingVersion,
)
from telectl.models import PluginSpec

logger = logging.getLogger(__name__)


def validate(plugin_type: str, name: str, version: int) -> PluginSpec:
    """Check a (type, name, version) triple and build a PluginSpec.

    A version of 0 is treated the same as an omitted version.

    Raises:
        MissingType, MissingName, MissingVersion
    """
    if not plugin_type:
        raise MissingType()
    if not name:
        raise MissingName()
    if version < 1:
        raise MissingVersion()
    return PluginSpec(type=plugin_type, name=name, version=version)


_VERSION_RE = re.compile(r"[+-]?[0-9]+")


def _parse_version(text: str) -> int:
    # ASCII digits only, no whitespace or underscores
    if not _VERSION_RE.fullmatch(text):
        raise InvalidVersion(text)
    return int(text)


def parse_token(token: str) -> PluginSpec:
    """Parse a ``type<sep>name<sep>version`` token.

    Raises:
        IncompleteSpec: If the token does not split into three segments.
        InvalidVersion: If the version segment is not an integer.
        MissingType, MissingName, MissingVersion: If a segment is empty
            or the version is below 1.
    """
    parts = token.split(os.pathsep) if token else []
    if len(parts) != 3:
        raise IncompleteSpec(token)
    plugin_type, name, version_text = parts
    return validate(plugin_type, name, _parse_version(version_text))


def parse_parts(plugin_type: str, name: str, version_text: str) -> PluginSpec:
    """Parse three positional values where the version is still text."""
    if not plugin_type:
        raise MissingType()
    if not name:
        raise MissingName()
    return validate(plugin_type, name, _parse_version(version_text))


def from_flags(plugin_type: str | None, name: str | None, version: int | None) -> PluginSpec:
    """Build a PluginSpec from already-typed flag values."""
    return validate(plugin_type or "", name or "", version or 0)


@dataclass(frozen=True)
class TokenTarget:
    """Unload target given as a single delimited token."""

    token: str

    def resolve(self) -> PluginSpec:
        return parse_token(self.token)


@dataclass(frozen=True)
class FlagTarget:
    """Unload target given as three discrete flags."""

    plugin_type: str | None = None
    name: str | None = None
    version: int | None = None

    def resolve(self) -> PluginSpec:
        return from_flags(self.plugin_type, self.name, self.version)


UnloadTarget = TokenTarget | FlagTarget


def unload_target(
    token: str | None,
    plugin_type: str | None = None,
    name: str | None = None,
    version: int | None = None,
) -> UnloadTarget:
    """Pick the unload target form; a token takes precedence over flags."""
    if token is not None:
        if plugin_type or name or version:
            logger.debug(f"Ignoring --plugin-* flags in favour of token {token!r}")
        return TokenTarget(token)
    return FlagTarget(plugin_type=plugin_type, name=name, version=version)
