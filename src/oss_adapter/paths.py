"""Path prefix translation between logical paths and physical object keys.

A logical path is what callers see (``img/a.png``). A physical key is what
the bucket stores (``uploads/img/a.png`` when the adapter is rooted at
``uploads``). The prefix is fixed when the adapter is constructed.
"""

import posixpath
from typing import Optional, TypedDict

DELIMITER = "/"
_STRIP = "\\/"


class PathInfo(TypedDict, total=False):
    """Components of a path as split by ``pathinfo``."""

    path: str
    dirname: str
    basename: str
    filename: str
    extension: str


class PathPrefixer:
    """Prepends and strips a configured root prefix on object keys."""

    def __init__(self, prefix: Optional[str] = "", delimiter: str = DELIMITER):
        self.delimiter = delimiter
        self.prefix = ""
        self.set_prefix(prefix)

    def set_prefix(self, prefix: Optional[str]) -> None:
        """Set the root prefix, normalized to end in exactly one delimiter."""
        prefix = (prefix or "").rstrip(_STRIP)
        self.prefix = f"{prefix}{self.delimiter}" if prefix else ""

    def to_physical(self, path: str) -> str:
        """Convert a logical path into the physical object key."""
        return self.prefix + path.lstrip(_STRIP)

    def to_logical(self, key: str) -> str:
        """Convert a physical object key back into a logical path.

        Keys outside the prefix are returned unchanged.
        """
        if self.prefix and key.startswith(self.prefix):
            return key[len(self.prefix) :]
        return key

    def to_directory(self, path: str) -> str:
        """Physical listing prefix for a logical directory.

        The bucket root (empty prefix, empty path) maps to ``""``; anything
        else ends in the delimiter.
        """
        directory = self.to_physical(path).rstrip(_STRIP)
        return f"{directory}{self.delimiter}" if directory else ""


def dirname(path: str) -> str:
    """Parent directory of ``path``, ``""`` at the top level."""
    parent = posixpath.dirname(path.rstrip(DELIMITER))
    return "" if parent in (".", DELIMITER) else parent


def pathinfo(path: str) -> PathInfo:
    """Split a path into dirname, basename, filename and extension."""
    trimmed = path.rstrip(DELIMITER)
    basename = posixpath.basename(trimmed)
    info: PathInfo = {
        "path": path,
        "dirname": dirname(trimmed),
        "basename": basename,
    }
    filename, extension = posixpath.splitext(basename)
    info["filename"] = filename
    if extension:
        info["extension"] = extension[1:]
    return info
