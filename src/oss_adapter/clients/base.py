"""Outbound contract for object storage clients.

The adapter talks to the backend only through ``ObjectStorageClient``.
Implementations raise ``BackendError`` for every failed call and nothing
else; the adapter converts it to a ``Failure`` result.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Protocol, Union

# Request option keys understood by every client
OSS_CONTENT_TYPE = "Content-Type"
OSS_LENGTH = "Content-Length"
OSS_HEADERS = "headers"
OSS_OBJECT_ACL = "x-oss-object-acl"

OSS_ACL_PUBLIC_READ = "public-read"
OSS_ACL_PRIVATE = "private"

OSS_HTTP_GET = "GET"

RequestOptions = Dict[str, Any]
Body = Union[bytes, str]


@dataclass(frozen=True)
class ObjectSummary:
    """One object returned by a listing call."""

    key: str
    size: int
    last_modified: Optional[int] = None


@dataclass(frozen=True)
class ObjectListing:
    """One page of a delimiter-based listing."""

    objects: List[ObjectSummary] = field(default_factory=list)
    prefixes: List[str] = field(default_factory=list)
    is_truncated: bool = False
    next_marker: str = ""


class ObjectStorageClient(Protocol):
    """Operations the adapter needs from an object storage backend."""

    def put_object(
        self,
        bucket: str,
        key: str,
        body: Body,
        options: Optional[RequestOptions] = None,
    ) -> None: ...

    def get_object(self, bucket: str, key: str) -> bytes: ...

    def delete_object(self, bucket: str, key: str) -> None: ...

    def delete_objects(self, bucket: str, keys: List[str]) -> None: ...

    def copy_object(
        self, from_bucket: str, from_key: str, to_bucket: str, to_key: str
    ) -> None: ...

    def does_object_exist(self, bucket: str, key: str) -> bool: ...

    def get_object_meta(self, bucket: str, key: str) -> Mapping[str, str]:
        """Response headers of the object, lower-cased."""
        ...

    def list_objects(self, bucket: str, options: Mapping[str, Any]) -> ObjectListing:
        """List one page; ``options`` holds delimiter, prefix, max-keys, marker."""
        ...

    def put_object_acl(self, bucket: str, key: str, acl: str) -> None: ...

    def get_object_acl(self, bucket: str, key: str) -> str: ...

    def create_object_dir(
        self, bucket: str, key: str, options: Optional[RequestOptions] = None
    ) -> None: ...

    def upload_file(
        self,
        bucket: str,
        key: str,
        file_path: str,
        options: Optional[RequestOptions] = None,
    ) -> None: ...

    def sign_url(
        self,
        bucket: str,
        key: str,
        timeout: int,
        method: str = OSS_HTTP_GET,
        options: Optional[Mapping[str, Any]] = None,
    ) -> str: ...
