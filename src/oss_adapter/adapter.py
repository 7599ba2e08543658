"""Filesystem adapter for Aliyun OSS.

``OssAdapter`` maps filesystem operations onto an ``ObjectStorageClient``.
Logical paths are translated to object keys through the adapter's root
prefix, and every ``BackendError`` is converted to a ``Failure`` result at
the point of the call.

Two operations can fail after changing the bucket:

* ``rename`` copies then deletes. If the delete fails the rename is a
  ``Failure`` even though the object now exists at both paths.
* ``delete_dir`` issues one batched delete. A partial failure of the batch
  is reported as a single ``Failure``; some objects may be gone.
"""

import io
import os
from datetime import datetime
from types import MappingProxyType
from typing import Any, BinaryIO, Dict, List, Mapping, Optional, Union

from oss_adapter.core import BackendError, get_logger

from .clients.base import (
    OSS_ACL_PRIVATE,
    OSS_ACL_PUBLIC_READ,
    OSS_CONTENT_TYPE,
    OSS_HEADERS,
    OSS_HTTP_GET,
    OSS_LENGTH,
    OSS_OBJECT_ACL,
    ObjectStorageClient,
    RequestOptions,
)
from .interface import Config, FilesystemAdapter, Visibility, WriteConfig
from .listing import DirectoryLister
from .models import EntryType, Metadata, ObjectEntry
from .normalizer import ResponseNormalizer, to_timestamp
from .paths import DELIMITER, PathPrefixer, dirname
from .results import Failure, Result, Success
from .urls import expiration_to_timeout, public_url, rewrite_host

logger = get_logger(__name__)

# Write configuration key -> request option key. Other keys are ignored.
MAPPING_OPTIONS: Mapping[str, str] = MappingProxyType(
    {
        "contentType": OSS_CONTENT_TYPE,
        "mimetype": OSS_CONTENT_TYPE,
        "contentLength": OSS_LENGTH,
        "size": OSS_LENGTH,
        "headers": OSS_HEADERS,
    }
)

URL_OPTIONS = ("endpoint", "cname")


def acl_for(visibility: Any) -> str:
    """Backend ACL for a visibility value."""
    return OSS_ACL_PUBLIC_READ if visibility == Visibility.public else OSS_ACL_PRIVATE


class OssAdapter(FilesystemAdapter):
    """Filesystem adapter backed by one OSS bucket."""

    def __init__(
        self,
        client: ObjectStorageClient,
        bucket: str,
        prefix: Optional[str] = "",
        options: Optional[Mapping[str, Any]] = None,
        endpoint: Optional[str] = None,
        cname: Optional[str] = None,
    ):
        """Initialize the adapter.

        Args:
            client: Object storage client
            bucket: Bucket name
            prefix: Root prefix prepended to every key
            options: Default request options sent with every upload
            endpoint: OSS endpoint, used for public URLs
            cname: Custom domain, used for public and signed URLs
        """
        self._client = client
        self._bucket = bucket
        self._prefixer = PathPrefixer(prefix)
        self.options: Dict[str, Any] = dict(options or {})
        self.endpoint = endpoint
        self.cname = cname
        self._normalizer = ResponseNormalizer(self._prefixer)
        self._lister = DirectoryLister(client, bucket, self._prefixer)

    @property
    def bucket(self) -> str:
        return self._bucket

    @property
    def client(self) -> ObjectStorageClient:
        return self._client

    def _failure(self, operation: str, path: str, error: BackendError) -> Failure:
        logger.warning(
            "OSS operation failed",
            operation=operation,
            bucket=self._bucket,
            path=path,
            error=str(error),
        )
        return Failure(operation, path)

    def _options_from_config(self, config: Config) -> RequestOptions:
        options = dict(self.options)
        for option, oss_option in MAPPING_OPTIONS.items():
            if config.has(option):
                options[oss_option] = config.get(option)
        return options

    def _upload_options(self, config: Config) -> RequestOptions:
        options = self._options_from_config(config)
        visibility = config.get("visibility")
        if visibility:
            headers = dict(options.get(OSS_HEADERS) or {})
            headers[OSS_OBJECT_ACL] = acl_for(visibility)
            options[OSS_HEADERS] = headers
        return options

    # Writes

    def write(
        self, path: str, contents: Union[bytes, str], config: WriteConfig = None
    ) -> Result[Metadata]:
        return self._upload("write", path, contents, Config.coerce(config))

    def update(
        self, path: str, contents: Union[bytes, str], config: WriteConfig = None
    ) -> Result[Metadata]:
        return self._upload("update", path, contents, Config.coerce(config))

    def _upload(
        self, operation: str, path: str, body: Union[bytes, str], config: Config
    ) -> Result[Metadata]:
        key = self._prefixer.to_physical(path)
        options = self._upload_options(config)

        try:
            self._client.put_object(self._bucket, key, body, options)
        except BackendError as e:
            return self._failure(operation, path, e)

        logger.debug("Object written", bucket=self._bucket, key=key)
        return Success(self._normalizer.normalize(options, path))

    def write_stream(
        self, path: str, stream: BinaryIO, config: WriteConfig = None
    ) -> Result[Metadata]:
        return self.update_stream(path, stream, config)

    def update_stream(
        self, path: str, stream: BinaryIO, config: WriteConfig = None
    ) -> Result[Metadata]:
        """Overwrite a file from a stream.

        Unread streams backed by a local file are uploaded from that file;
        any other stream is read into memory from its current position.
        """
        config = Config.coerce(config)
        key = self._prefixer.to_physical(path)
        options = self._upload_options(config)
        file_path = getattr(stream, "name", None)

        try:
            if (
                isinstance(file_path, str)
                and os.path.isfile(file_path)
                and stream.tell() == 0
            ):
                self._client.upload_file(self._bucket, key, file_path, options)
            else:
                self._client.put_object(self._bucket, key, stream.read(), options)
        except BackendError as e:
            return self._failure("update_stream", path, e)

        logger.debug("Object streamed", bucket=self._bucket, key=key)
        return Success(self._normalizer.normalize(options, path))

    def rename(self, path: str, new_path: str) -> Result[bool]:
        if self._prefixer.to_physical(path) == self._prefixer.to_physical(new_path):
            exists = self.has(path)
            if exists.ok and exists.value:
                return Success(True)
            return Failure("rename", path)

        copied = self.copy(path, new_path)
        if not copied.ok:
            return Failure("rename", path)

        deleted = self.delete(path)
        if not deleted.ok:
            logger.warning(
                "Rename left a copy at the destination",
                bucket=self._bucket,
                path=path,
                new_path=new_path,
            )
            return Failure("rename", path)
        return Success(True)

    def copy(self, path: str, new_path: str) -> Result[bool]:
        source = self._prefixer.to_physical(path)
        target = self._prefixer.to_physical(new_path)

        try:
            self._client.copy_object(self._bucket, source, self._bucket, target)
        except BackendError as e:
            return self._failure("copy", path, e)
        return Success(True)

    def delete(self, path: str) -> Result[bool]:
        key = self._prefixer.to_physical(path)

        try:
            self._client.delete_object(self._bucket, key)
        except BackendError as e:
            return self._failure("delete", path, e)
        return Success(True)

    def delete_dir(self, dirname: str) -> Result[bool]:
        try:
            entries = self._lister.list_contents(dirname, recursive=True)
        except BackendError as e:
            return self._failure("delete_dir", dirname, e)

        keys: List[str] = []
        for entry in entries:
            key = self._prefixer.to_physical(entry.path)
            keys.append(key if entry.type is EntryType.file else key + DELIMITER)

        try:
            self._client.delete_objects(self._bucket, keys)
        except BackendError as e:
            return self._failure("delete_dir", dirname, e)

        logger.info(
            "Directory deleted",
            bucket=self._bucket,
            dirname=dirname,
            object_count=len(keys),
        )
        return Success(True)

    def create_dir(
        self, dirname: str, config: WriteConfig = None
    ) -> Result[ObjectEntry]:
        key = self._prefixer.to_physical(dirname)
        options = self._options_from_config(Config.coerce(config))

        try:
            self._client.create_object_dir(self._bucket, key, options)
        except BackendError as e:
            return self._failure("create_dir", dirname, e)
        return Success(ObjectEntry(type=EntryType.dir, path=dirname))

    def set_visibility(self, path: str, visibility: Visibility) -> Result[Visibility]:
        visibility = Visibility(visibility)
        try:
            self._client.put_object_acl(
                self._bucket, self._prefixer.to_physical(path), acl_for(visibility)
            )
        except BackendError as e:
            return self._failure("set_visibility", path, e)
        return Success(visibility)

    # Reads

    def has(self, path: str) -> Result[bool]:
        key = self._prefixer.to_physical(path)

        try:
            exists = self._client.does_object_exist(self._bucket, key)
        except BackendError as e:
            return self._failure("has", path, e)
        return Success(exists)

    def read(self, path: str) -> Result[bytes]:
        key = self._prefixer.to_physical(path)

        try:
            contents = self._client.get_object(self._bucket, key)
        except BackendError as e:
            return self._failure("read", path, e)
        return Success(contents)

    def read_stream(self, path: str) -> Result[BinaryIO]:
        contents = self.read(path)
        if not contents.ok:
            return Failure("read_stream", path)
        return Success(io.BytesIO(contents.value))

    def list_contents(
        self, directory: str = "", recursive: bool = False
    ) -> Result[List[ObjectEntry]]:
        try:
            return Success(self._lister.list_contents(directory, recursive))
        except BackendError as e:
            return self._failure("list_contents", directory, e)

    def get_metadata(self, path: str) -> Result[Metadata]:
        key = self._prefixer.to_physical(path)

        try:
            meta = self._client.get_object_meta(self._bucket, key)
        except BackendError as e:
            return self._failure("get_metadata", path, e)

        size = meta.get("content-length")
        return Success(
            Metadata(
                type=EntryType.file,
                path=path,
                dirname=dirname(path),
                timestamp=to_timestamp(meta.get("last-modified")),
                mimetype=meta.get("content-type"),
                size=int(size) if size is not None else None,
            )
        )

    def get_visibility(self, path: str) -> Result[Visibility]:
        try:
            acl = self._client.get_object_acl(
                self._bucket, self._prefixer.to_physical(path)
            )
        except BackendError as e:
            return self._failure("get_visibility", path, e)

        if acl == OSS_ACL_PUBLIC_READ:
            return Success(Visibility.public)
        return Success(Visibility.private)

    # URLs

    def _url_option(self, name: str, options: Optional[Mapping[str, Any]]) -> Any:
        if options and options.get(name):
            return options[name]
        return getattr(self, name)

    def get_url(self, path: str, options: Optional[Mapping[str, Any]] = None) -> str:
        return public_url(
            self._bucket,
            self._prefixer.to_physical(path),
            endpoint=self._url_option("endpoint", options),
            cname=self._url_option("cname", options),
        )

    def get_temporary_url(
        self,
        path: str,
        expiration: Union[int, float, datetime],
        options: Optional[Mapping[str, Any]] = None,
    ) -> Result[str]:
        timeout = expiration_to_timeout(expiration)
        sign_options = {
            k: v for k, v in (options or {}).items() if k not in URL_OPTIONS
        }

        try:
            url = self._client.sign_url(
                self._bucket,
                self._prefixer.to_physical(path),
                timeout,
                OSS_HTTP_GET,
                sign_options,
            )
        except BackendError as e:
            return self._failure("get_temporary_url", path, e)

        cname = self._url_option("cname", options)
        if cname:
            url = rewrite_host(url, cname)
        return Success(url)
