"""Aliyun OSS client built on the ``oss2`` SDK.

``Oss2Client`` implements the ``ObjectStorageClient`` contract. It keeps
one ``oss2.Bucket`` per bucket name, created on first use, and converts
every ``oss2.exceptions.OssError`` into ``BackendError``.

Authentication Methods Supported:
    1. AccessKey pair (access_id, access_key)
    2. STS temporary credentials (access_id, access_key, security_token)
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, TypeVar

import oss2
from oss2.exceptions import OssError
from pydantic import BaseModel, ConfigDict, Field

from oss_adapter.core import BackendError, get_logger, get_tracer

from .base import (
    OSS_CONTENT_TYPE,
    OSS_HEADERS,
    OSS_HTTP_GET,
    OSS_LENGTH,
    Body,
    ObjectListing,
    ObjectSummary,
    RequestOptions,
)

logger = get_logger(__name__)
tracer = get_tracer(__name__)

T = TypeVar("T")


class OssClientConfig(BaseModel):
    """Configuration for OSS client connections.

    Example:
        config = OssClientConfig(
            access_id="LTAI5tEXAMPLE",
            access_key="EXAMPLEKEY",
            endpoint="https://oss-cn-hangzhou.aliyuncs.com",
        )
    """

    model_config = ConfigDict(extra="forbid")

    access_id: str = Field(..., description="AccessKey ID")
    access_key: str = Field(..., description="AccessKey secret")
    endpoint: str = Field(
        ..., description="OSS endpoint, e.g. oss-cn-hangzhou.aliyuncs.com"
    )
    security_token: Optional[str] = Field(
        None, description="STS security token for temporary credentials"
    )
    connect_timeout: Optional[float] = Field(
        None, description="Connection timeout in seconds"
    )


def headers_from_options(options: Optional[RequestOptions]) -> Dict[str, str]:
    """Flatten adapter request options into HTTP headers."""
    if not options:
        return {}
    headers = {k: str(v) for k, v in (options.get(OSS_HEADERS) or {}).items()}
    if options.get(OSS_CONTENT_TYPE) is not None:
        headers[OSS_CONTENT_TYPE] = str(options[OSS_CONTENT_TYPE])
    if options.get(OSS_LENGTH) is not None:
        headers[OSS_LENGTH] = str(options[OSS_LENGTH])
    return headers


class Oss2Client:
    """Object storage client for Aliyun OSS."""

    def __init__(self, config: OssClientConfig):
        """Initialize the OSS client.

        Args:
            config: OSS client configuration
        """
        self.config = config
        self._auth = None
        self._buckets: Dict[str, oss2.Bucket] = {}
        logger.info("OSS client initialized", endpoint=config.endpoint)

    @property
    def auth(self):
        """Get or create the oss2 auth object."""
        if self._auth is None:
            if self.config.security_token:
                self._auth = oss2.StsAuth(
                    self.config.access_id,
                    self.config.access_key,
                    self.config.security_token,
                )
                logger.info("OSS auth created with STS token")
            else:
                self._auth = oss2.Auth(self.config.access_id, self.config.access_key)
                logger.info("OSS auth created with AccessKey pair")
        return self._auth

    def bucket(self, name: str) -> oss2.Bucket:
        """Get or create the ``oss2.Bucket`` for ``name``."""
        if name not in self._buckets:
            self._buckets[name] = oss2.Bucket(
                self.auth,
                self.config.endpoint,
                name,
                connect_timeout=self.config.connect_timeout,
            )
        return self._buckets[name]

    def _invoke(self, operation: str, key: str, call: Callable[[], T]) -> T:
        with tracer.start_as_current_span(f"oss.{operation}") as span:
            span.set_attribute("oss.key", key)
            try:
                return call()
            except OssError as e:
                detail = f"{e.status} {e.code}: {e.message}"
                raise BackendError(operation, key, detail) from e

    def put_object(
        self,
        bucket: str,
        key: str,
        body: Body,
        options: Optional[RequestOptions] = None,
    ) -> None:
        headers = headers_from_options(options)
        self._invoke(
            "put_object",
            key,
            lambda: self.bucket(bucket).put_object(key, body, headers=headers),
        )

    def get_object(self, bucket: str, key: str) -> bytes:
        return self._invoke(
            "get_object", key, lambda: self.bucket(bucket).get_object(key).read()
        )

    def delete_object(self, bucket: str, key: str) -> None:
        self._invoke(
            "delete_object", key, lambda: self.bucket(bucket).delete_object(key)
        )

    def delete_objects(self, bucket: str, keys: List[str]) -> None:
        self._invoke(
            "delete_objects",
            ",".join(keys),
            lambda: self.bucket(bucket).batch_delete_objects(keys),
        )

    def copy_object(
        self, from_bucket: str, from_key: str, to_bucket: str, to_key: str
    ) -> None:
        self._invoke(
            "copy_object",
            from_key,
            lambda: self.bucket(to_bucket).copy_object(from_bucket, from_key, to_key),
        )

    def does_object_exist(self, bucket: str, key: str) -> bool:
        return self._invoke(
            "does_object_exist", key, lambda: self.bucket(bucket).object_exists(key)
        )

    def get_object_meta(self, bucket: str, key: str) -> Mapping[str, str]:
        result = self._invoke(
            "get_object_meta", key, lambda: self.bucket(bucket).head_object(key)
        )
        return {name.lower(): value for name, value in result.headers.items()}

    def list_objects(self, bucket: str, options: Mapping[str, Any]) -> ObjectListing:
        prefix = options.get("prefix", "")
        result = self._invoke(
            "list_objects",
            prefix,
            lambda: self.bucket(bucket).list_objects(
                prefix=prefix,
                delimiter=options.get("delimiter", ""),
                marker=options.get("marker", ""),
                max_keys=options.get("max-keys", 100),
            ),
        )
        return ObjectListing(
            objects=[
                ObjectSummary(
                    key=info.key, size=info.size, last_modified=info.last_modified
                )
                for info in result.object_list
            ],
            prefixes=list(result.prefix_list),
            is_truncated=result.is_truncated,
            next_marker=result.next_marker,
        )

    def put_object_acl(self, bucket: str, key: str, acl: str) -> None:
        self._invoke(
            "put_object_acl", key, lambda: self.bucket(bucket).put_object_acl(key, acl)
        )

    def get_object_acl(self, bucket: str, key: str) -> str:
        result = self._invoke(
            "get_object_acl", key, lambda: self.bucket(bucket).get_object_acl(key)
        )
        return result.acl

    def create_object_dir(
        self, bucket: str, key: str, options: Optional[RequestOptions] = None
    ) -> None:
        marker = key.rstrip("/") + "/"
        headers = headers_from_options(options)
        self._invoke(
            "create_object_dir",
            marker,
            lambda: self.bucket(bucket).put_object(marker, b"", headers=headers),
        )

    def upload_file(
        self,
        bucket: str,
        key: str,
        file_path: str,
        options: Optional[RequestOptions] = None,
    ) -> None:
        headers = headers_from_options(options)
        self._invoke(
            "upload_file",
            key,
            lambda: self.bucket(bucket).put_object_from_file(
                key, file_path, headers=headers
            ),
        )

    def sign_url(
        self,
        bucket: str,
        key: str,
        timeout: int,
        method: str = OSS_HTTP_GET,
        options: Optional[Mapping[str, Any]] = None,
    ) -> str:
        options = options or {}
        return self._invoke(
            "sign_url",
            key,
            lambda: self.bucket(bucket).sign_url(
                method,
                key,
                timeout,
                headers=options.get(OSS_HEADERS),
                params=options.get("params"),
            ),
        )
