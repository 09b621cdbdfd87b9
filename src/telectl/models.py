"""Data models for plugins, remote outcomes, and catalog entries."""

from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictStr

TIME_FORMAT = "%a, %d %b %Y %H:%M:%S %Z"


def format_time(ts: datetime) -> str:
    """Format a timestamp in local time, e.g. ``Mon, 02 Jan 2006 15:04:05 MST``."""
    return ts.astimezone().strftime(TIME_FORMAT)


@dataclass(frozen=True)
class PluginSpec:
    """Identity of a loaded or loadable plugin."""

    type: str
    name: str
    version: int

    def __str__(self) -> str:
        return f"{self.type}:{self.name}:{self.version}"


class LoadOutcome(BaseModel):
    """A plugin reported as loaded by the control plane."""

    model_config = ConfigDict(extra="ignore")

    name: str
    version: int
    type: str
    signed: bool = False
    status: str = ""
    loaded_timestamp: int = 0

    @property
    def loaded_time(self) -> datetime:
        return datetime.fromtimestamp(self.loaded_timestamp)


class UnloadOutcome(BaseModel):
    """A plugin reported as unloaded by the control plane."""

    model_config = ConfigDict(extra="ignore")

    name: str
    version: int
    type: str


class SwapOutcome(BaseModel):
    """Both sides of a completed swap.

    Only produced when the control plane reports success for the load and
    the unload. A failed swap raises instead and carries no outcome: the
    caller cannot tell which side, if either, was committed remotely.
    """

    loaded: LoadOutcome
    unloaded: UnloadOutcome


class RunningPlugin(BaseModel):
    """A plugin instance currently serving a task."""

    model_config = ConfigDict(extra="ignore")

    name: str
    version: int = 0
    type: str = ""
    hitcount: int = 0
    last_hit_timestamp: int = 0
    pprof_port: int | str = ""

    @property
    def last_hit_time(self) -> datetime:
        return datetime.fromtimestamp(self.last_hit_timestamp)


class PluginList(BaseModel):
    loaded_plugins: list[LoadOutcome] = Field(default_factory=list)
    running_plugins: list[RunningPlugin] = Field(default_factory=list)


class CatalogEntry(BaseModel):
    """Public metadata for a cataloged plugin."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    name: str = ""
    full_name: str = ""
    type: str = ""
    owner: str = ""
    description: str = ""
    url: str = ""
    forks: int = Field(default=0, alias="fork_count")
    stars: int = Field(default=0, alias="star_count")
    watchers: int = Field(default=0, alias="watch_count")
    issues: int = Field(default=0, alias="issues_count")


class ReleaseAsset(BaseModel):
    model_config = ConfigDict(extra="ignore")

    browser_download_url: StrictStr


class LatestRelease(BaseModel):
    """Typed view of a source host's "latest release" document."""

    model_config = ConfigDict(extra="ignore")

    tag_name: StrictStr | None = None
    assets: list[ReleaseAsset]
