"""Projection of a flat, delimiter-separated key space onto directories.

For example, with objects:
- ``d/f.txt``
- ``d/sub/``  (zero-byte directory marker)
- ``d/sub/g.txt``

Listing ``d`` returns a file entry for ``d/f.txt`` and a dir entry for
``d/sub`` (timestamp 0, inferred from the common prefix ``d/sub/``).
Listing ``d`` recursively descends into ``d/sub/`` instead, yielding the
marker itself as a dir entry with its real timestamp, then ``d/sub/g.txt``.
"""

from typing import List

from oss_adapter.core import get_logger

from .clients.base import ObjectStorageClient
from .models import EntryType, ObjectEntry
from .normalizer import to_timestamp
from .paths import DELIMITER, PathPrefixer

logger = get_logger(__name__)

# Only the first page of each directory is read; see DESIGN.md.
LIST_PAGE_SIZE = 1000


class DirectoryLister:
    """Lists logical directories through one listing call per level."""

    def __init__(
        self, client: ObjectStorageClient, bucket: str, prefixer: PathPrefixer
    ):
        self.client = client
        self.bucket = bucket
        self.prefixer = prefixer

    def list_contents(
        self, directory: str = "", recursive: bool = False
    ) -> List[ObjectEntry]:
        """List entries under a logical directory.

        Files and directory markers at this level come first in backend
        order, then subdirectories in backend order. With ``recursive`` each
        subdirectory is replaced by its own listing, depth first.

        Raises:
            BackendError: If any listing call fails
        """
        prefix = self.prefixer.to_directory(directory)
        options = {
            "delimiter": DELIMITER,
            "prefix": prefix,
            "max-keys": LIST_PAGE_SIZE,
            "marker": "",
        }
        listing = self.client.list_objects(self.bucket, options)

        if listing.is_truncated:
            logger.warning(
                "Directory listing truncated",
                bucket=self.bucket,
                prefix=prefix,
                page_size=LIST_PAGE_SIZE,
                next_marker=listing.next_marker,
            )

        result: List[ObjectEntry] = []
        for summary in listing.objects:
            timestamp = to_timestamp(summary.last_modified) or 0
            if summary.size == 0 and summary.key == prefix:
                result.append(
                    ObjectEntry(
                        type=EntryType.dir,
                        path=self.prefixer.to_logical(summary.key).rstrip(DELIMITER),
                        timestamp=timestamp,
                    )
                )
                continue

            result.append(
                ObjectEntry(
                    type=EntryType.file,
                    path=self.prefixer.to_logical(summary.key),
                    timestamp=timestamp,
                    size=summary.size,
                )
            )

        for common_prefix in listing.prefixes:
            if recursive:
                result.extend(
                    self.list_contents(self.prefixer.to_logical(common_prefix), True)
                )
            else:
                result.append(
                    ObjectEntry(
                        type=EntryType.dir,
                        path=self.prefixer.to_logical(common_prefix).rstrip(DELIMITER),
                        timestamp=0,
                    )
                )

        logger.debug(
            "Directory listed",
            bucket=self.bucket,
            prefix=prefix,
            recursive=recursive,
            entry_count=len(result),
        )
        return result
