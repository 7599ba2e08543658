"""Records describing objects in the virtual filesystem."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class EntryType(str, Enum):
    """Kind of entry projected from the flat object namespace."""

    file = "file"
    dir = "dir"


@dataclass(frozen=True)
class ObjectEntry:
    """One directory listing result.

    ``timestamp`` is 0 for directories inferred from a common prefix and the
    real last-modified time for explicit directory markers. ``size`` is only
    set for files.
    """

    type: EntryType
    path: str
    timestamp: int = 0
    size: Optional[int] = None

    @property
    def is_dir(self) -> bool:
        return self.type is EntryType.dir


@dataclass(frozen=True)
class Metadata:
    """Normalized metadata for a single object."""

    type: EntryType
    path: str
    dirname: str = ""
    basename: str = ""
    filename: str = ""
    extension: Optional[str] = None
    timestamp: Optional[int] = None
    mimetype: Optional[str] = None
    size: Optional[int] = None
    metadata: Optional[Dict[str, Any]] = None
