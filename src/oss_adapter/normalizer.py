"""Normalization of backend responses into ``Metadata`` records."""

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from .models import EntryType, Metadata
from .paths import DELIMITER, PathPrefixer, pathinfo

# Backend field name -> Metadata field name
RESULT_MAP: Mapping[str, str] = MappingProxyType(
    {
        "ContentLength": "size",
        "ContentType": "mimetype",
        "Size": "size",
        "Metadata": "metadata",
        "Content-Length": "size",
        "Content-Type": "mimetype",
        "content-length": "size",
        "content-type": "mimetype",
    }
)

LAST_MODIFIED_FIELDS = ("LastModified", "last-modified")


def to_timestamp(value: Union[int, float, str, datetime, None]) -> Optional[int]:
    """Convert a last-modified value into seconds since the epoch.

    Accepts epoch numbers, datetimes, RFC 1123 dates (HTTP headers) and ISO
    8601 strings (listing responses). Naive datetimes are taken as UTC.
    Returns None for anything unparsable.
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, datetime):
        moment = value
    else:
        text = str(value).strip()
        if text.isdigit():
            return int(text)
        try:
            moment = parsedate_to_datetime(text)
        except (TypeError, ValueError):
            try:
                moment = datetime.fromisoformat(text.replace("Z", "+00:00"))
            except ValueError:
                return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp())


class ResponseNormalizer:
    """Turns raw backend key/value responses into ``Metadata``."""

    def __init__(self, prefixer: PathPrefixer):
        self.prefixer = prefixer

    def normalize(
        self, response: Mapping[str, Any], path: Optional[str] = None
    ) -> Metadata:
        """Normalize ``response``, using ``path`` when the caller knows it.

        Without a path, the response's ``Key`` (or ``Prefix`` for
        common-prefix entries) is translated back to a logical path. A path
        ending in the delimiter is a directory: the delimiter is stripped and
        no field mapping is applied.
        """
        if not path:
            key = response["Key"] if "Key" in response else response["Prefix"]
            path = self.prefixer.to_logical(key)

        info = pathinfo(path)
        fields: dict = {
            "dirname": info["dirname"],
            "basename": info["basename"],
            "filename": info["filename"],
            "extension": info.get("extension"),
        }
        for name in LAST_MODIFIED_FIELDS:
            if name in response:
                fields["timestamp"] = to_timestamp(response[name])
                break

        if path.endswith(DELIMITER):
            return Metadata(type=EntryType.dir, path=path.rstrip(DELIMITER), **fields)

        for source, target in RESULT_MAP.items():
            if source in response:
                fields[target] = response[source]
        if fields.get("size") is not None:
            fields["size"] = int(fields["size"])
        return Metadata(type=EntryType.file, path=path, **fields)
