"""Generic filesystem adapter contract.

Storage backends implement ``FilesystemAdapter`` so callers can read,
write and list files without knowing which backend holds them. Every
operation reports backend failure through a ``Failure`` result rather than
an exception.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from typing import Any, BinaryIO, List, Mapping, Optional, Union

from .models import Metadata, ObjectEntry
from .paths import PathPrefixer
from .results import Result


class Visibility(str, Enum):
    """Who may read an object."""

    public = "public"
    private = "private"


class Config:
    """Per-call write configuration.

    Keys absent here are looked up in ``fallback``, typically the adapter's
    own defaults.
    """

    def __init__(
        self,
        settings: Optional[Mapping[str, Any]] = None,
        fallback: Optional["Config"] = None,
    ):
        self._settings = dict(settings or {})
        self._fallback = fallback

    def get(self, key: str, default: Any = None) -> Any:
        if key in self._settings:
            return self._settings[key]
        if self._fallback is not None:
            return self._fallback.get(key, default)
        return default

    def has(self, key: str) -> bool:
        return key in self._settings

    def set(self, key: str, value: Any) -> "Config":
        self._settings[key] = value
        return self

    def set_fallback(self, fallback: "Config") -> "Config":
        self._fallback = fallback
        return self

    @classmethod
    def coerce(cls, config: Union["Config", Mapping[str, Any], None]) -> "Config":
        """Accept a ``Config``, a plain mapping, or nothing."""
        if isinstance(config, Config):
            return config
        return cls(config)

    def __repr__(self) -> str:
        return f"Config({self._settings!r})"


WriteConfig = Union[Config, Mapping[str, Any], None]


class FilesystemAdapter(ABC):
    """Filesystem operations over a storage backend, rooted at a path prefix."""

    _prefixer: PathPrefixer

    def set_path_prefix(self, prefix: Optional[str]) -> None:
        self._prefixer.set_prefix(prefix)

    def get_path_prefix(self) -> str:
        return self._prefixer.prefix

    def apply_path_prefix(self, path: str) -> str:
        return self._prefixer.to_physical(path)

    def remove_path_prefix(self, path: str) -> str:
        return self._prefixer.to_logical(path)

    # Writes

    @abstractmethod
    def write(
        self, path: str, contents: bytes, config: WriteConfig = None
    ) -> Result[Metadata]:
        """Write a new file."""

    @abstractmethod
    def write_stream(
        self, path: str, stream: BinaryIO, config: WriteConfig = None
    ) -> Result[Metadata]:
        """Write a new file from a readable binary stream."""

    @abstractmethod
    def update(
        self, path: str, contents: bytes, config: WriteConfig = None
    ) -> Result[Metadata]:
        """Overwrite a file."""

    @abstractmethod
    def update_stream(
        self, path: str, stream: BinaryIO, config: WriteConfig = None
    ) -> Result[Metadata]:
        """Overwrite a file from a readable binary stream."""

    @abstractmethod
    def rename(self, path: str, new_path: str) -> Result[bool]:
        """Move a file."""

    @abstractmethod
    def copy(self, path: str, new_path: str) -> Result[bool]:
        """Copy a file."""

    @abstractmethod
    def delete(self, path: str) -> Result[bool]:
        """Delete a file."""

    @abstractmethod
    def delete_dir(self, dirname: str) -> Result[bool]:
        """Delete a directory and everything under it."""

    @abstractmethod
    def create_dir(
        self, dirname: str, config: WriteConfig = None
    ) -> Result[ObjectEntry]:
        """Create a directory."""

    @abstractmethod
    def set_visibility(self, path: str, visibility: Visibility) -> Result[Visibility]:
        """Set the visibility of a file."""

    # Reads

    @abstractmethod
    def has(self, path: str) -> Result[bool]:
        """Check whether a file exists."""

    @abstractmethod
    def read(self, path: str) -> Result[bytes]:
        """Read a file."""

    @abstractmethod
    def read_stream(self, path: str) -> Result[BinaryIO]:
        """Read a file as a stream."""

    @abstractmethod
    def list_contents(
        self, directory: str = "", recursive: bool = False
    ) -> Result[List[ObjectEntry]]:
        """List the contents of a directory."""

    @abstractmethod
    def get_metadata(self, path: str) -> Result[Metadata]:
        """Get all the metadata of a file."""

    @abstractmethod
    def get_visibility(self, path: str) -> Result[Visibility]:
        """Get the visibility of a file."""

    def get_size(self, path: str) -> Result[Metadata]:
        return self.get_metadata(path)

    def get_mimetype(self, path: str) -> Result[Metadata]:
        return self.get_metadata(path)

    def get_timestamp(self, path: str) -> Result[Metadata]:
        return self.get_metadata(path)

    # URLs

    @abstractmethod
    def get_url(self, path: str, options: Optional[Mapping[str, Any]] = None) -> str:
        """Public URL of a file."""

    @abstractmethod
    def get_temporary_url(
        self,
        path: str,
        expiration: Union[int, float, datetime],
        options: Optional[Mapping[str, Any]] = None,
    ) -> Result[str]:
        """Signed URL granting temporary access to a file."""
