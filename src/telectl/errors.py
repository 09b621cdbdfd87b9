"""Exception hierarchy for telectl operations."""

from typing import Any


class TelectlError(Exception):
    """Base class for all telectl failures."""


class UsageError(TelectlError):
    """Raised when command-line arguments are malformed or missing."""


class ValidationError(TelectlError):
    """Raised when a plugin identity is structurally invalid."""


class MissingType(ValidationError):
    def __init__(self) -> None:
        super().__init__("Must provide plugin type")


class MissingName(ValidationError):
    def __init__(self) -> None:
        super().__init__("Must provide plugin name")


class MissingVersion(ValidationError):
    """Version omitted or less than 1 (the two cases are not distinguished)."""

    def __init__(self) -> None:
        super().__init__("Must provide plugin version")


class InvalidVersion(ValidationError):
    def __init__(self, value: str) -> None:
        super().__init__(f"Can't convert version string to integer: {value!r}")
        self.value = value


class IncompleteSpec(ValidationError):
    def __init__(self, token: str) -> None:
        super().__init__(f"Missing type, name, or version in {token!r}")
        self.token = token


class RemoteError(TelectlError):
    """The plugin-management service reported a failure.

    Attributes:
        message: Error message returned by the service.
        fields: Optional structured detail; ``fields["error"]`` carries the
            underlying cause when the service provides one.
    """

    def __init__(self, message: str, fields: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.fields = fields or {}

    @property
    def detail(self) -> Any:
        return self.fields.get("error")


class TransportError(TelectlError):
    """Network-level failure while contacting a remote endpoint."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(f"{url}: {message}")
        self.url = url


class FetchFailed(TransportError):
    """A download request errored or returned a failure status."""


class MalformedResponse(TelectlError):
    """A remote document did not have the expected shape."""


class MalformedRelease(MalformedResponse):
    """The latest-release document cannot be interpreted."""


class UnsupportedArchitecture(TelectlError):
    def __init__(self, arch: str) -> None:
        super().__init__(f"Architecture {arch!r} is not yet supported")
        self.arch = arch


class FileError(TelectlError):
    """Local file failure."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


class CreateFailed(FileError):
    """The download target could not be created."""


class WriteFailed(FileError):
    """The downloaded byte stream could not be fully written."""


class ConfigError(TelectlError):
    """Raised when configuration loading or validation fails."""
