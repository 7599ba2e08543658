"""Test configuration and fixtures for oss-adapter."""

from email.utils import formatdate
from typing import Any, Dict, List, Mapping, Optional, Set
from urllib.parse import quote

import pytest

from oss_adapter.adapter import OssAdapter
from oss_adapter.clients import ObjectListing, ObjectSummary
from oss_adapter.clients.oss_client import headers_from_options
from oss_adapter.core import BackendError

MODIFIED_AT = 1700000000


class FakeObjectStorageClient:
    """In-memory object storage client implementing the outbound contract.

    Objects live in ``objects[bucket][key]``. Operations named in
    ``failing`` raise ``BackendError``; every call is recorded in ``calls``.
    """

    def __init__(self):
        self.objects: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.failing: Set[str] = set()
        self.calls: List[tuple] = []

    def _record(self, operation: str, *args) -> None:
        self.calls.append((operation,) + args)
        if operation in self.failing:
            key = str(args[1]) if len(args) > 1 else ""
            raise BackendError(operation, key, "injected failure")

    def _bucket(self, bucket: str) -> Dict[str, Dict[str, Any]]:
        return self.objects.setdefault(bucket, {})

    def _require(self, operation: str, bucket: str, key: str) -> Dict[str, Any]:
        if key not in self._bucket(bucket):
            raise BackendError(operation, key, "404 NoSuchKey")
        return self._bucket(bucket)[key]

    def add(self, bucket: str, key: str, body: bytes = b"", **extra) -> None:
        """Seed an object without recording a call."""
        self._bucket(bucket)[key] = {
            "body": body,
            "headers": extra.pop("headers", {}),
            "acl": extra.pop("acl", "default"),
            "last_modified": extra.pop("last_modified", MODIFIED_AT),
        }

    def put_object(self, bucket, key, body, options=None):
        self._record("put_object", bucket, key, body, options)
        if isinstance(body, str):
            body = body.encode()
        headers = headers_from_options(options)
        acl = headers.get("x-oss-object-acl", "default")
        self.add(bucket, key, body, headers=headers, acl=acl)

    def get_object(self, bucket, key):
        self._record("get_object", bucket, key)
        return self._require("get_object", bucket, key)["body"]

    def delete_object(self, bucket, key):
        self._record("delete_object", bucket, key)
        self._require("delete_object", bucket, key)
        del self._bucket(bucket)[key]

    def delete_objects(self, bucket, keys):
        self._record("delete_objects", bucket, list(keys))
        if not keys:
            raise BackendError("delete_objects", "", "key list is empty")
        for key in keys:
            self._bucket(bucket).pop(key, None)

    def copy_object(self, from_bucket, from_key, to_bucket, to_key):
        self._record("copy_object", from_bucket, from_key, to_bucket, to_key)
        source = self._require("copy_object", from_bucket, from_key)
        self._bucket(to_bucket)[to_key] = dict(source)

    def does_object_exist(self, bucket, key):
        self._record("does_object_exist", bucket, key)
        return key in self._bucket(bucket)

    def get_object_meta(self, bucket, key):
        self._record("get_object_meta", bucket, key)
        obj = self._require("get_object_meta", bucket, key)
        return {
            "content-length": str(len(obj["body"])),
            "content-type": obj["headers"].get(
                "Content-Type", "application/octet-stream"
            ),
            "last-modified": formatdate(obj["last_modified"], usegmt=True),
            "etag": '"5D41402ABC4B2A76B9719D911017C592"',
        }

    def list_objects(self, bucket, options: Mapping[str, Any]) -> ObjectListing:
        self._record("list_objects", bucket, dict(options))
        prefix = options.get("prefix", "")
        delimiter = options.get("delimiter", "")
        marker = options.get("marker", "")
        max_keys = options.get("max-keys", 100)

        objects: List[ObjectSummary] = []
        prefixes: List[str] = []
        count = 0
        truncated = False
        next_marker = ""
        for key in sorted(self._bucket(bucket)):
            if not key.startswith(prefix) or key <= marker:
                continue
            rest = key[len(prefix) :]
            if delimiter and delimiter in rest:
                common = prefix + rest[: rest.index(delimiter) + 1]
                if common in prefixes:
                    continue
                if count == max_keys:
                    truncated = True
                    break
                prefixes.append(common)
            else:
                if count == max_keys:
                    truncated = True
                    break
                obj = self._bucket(bucket)[key]
                objects.append(
                    ObjectSummary(
                        key=key,
                        size=len(obj["body"]),
                        last_modified=obj["last_modified"],
                    )
                )
            count += 1
            next_marker = key
        return ObjectListing(
            objects=objects,
            prefixes=prefixes,
            is_truncated=truncated,
            next_marker=next_marker if truncated else "",
        )

    def put_object_acl(self, bucket, key, acl):
        self._record("put_object_acl", bucket, key, acl)
        self._require("put_object_acl", bucket, key)["acl"] = acl

    def get_object_acl(self, bucket, key):
        self._record("get_object_acl", bucket, key)
        return self._require("get_object_acl", bucket, key)["acl"]

    def create_object_dir(self, bucket, key, options=None):
        self._record("create_object_dir", bucket, key, options)
        self.add(bucket, key.rstrip("/") + "/", b"")

    def upload_file(self, bucket, key, file_path, options=None):
        self._record("upload_file", bucket, key, file_path, options)
        with open(file_path, "rb") as f:
            body = f.read()
        headers = headers_from_options(options)
        acl = headers.get("x-oss-object-acl", "default")
        self.add(bucket, key, body, headers=headers, acl=acl)

    def sign_url(
        self, bucket, key, timeout, method="GET", options: Optional[Mapping] = None
    ):
        self._record("sign_url", bucket, key, timeout, method, options)
        return (
            f"http://{bucket}.oss-cn-hangzhou.aliyuncs.com/{quote(key)}"
            f"?OSSAccessKeyId=test_id&Expires={MODIFIED_AT + timeout}"
            f"&Signature=dGVzdA%3D%3D"
        )

    def called(self, operation: str) -> List[tuple]:
        return [call for call in self.calls if call[0] == operation]


@pytest.fixture
def fake_client():
    """In-memory object storage client."""
    return FakeObjectStorageClient()


@pytest.fixture
def adapter(fake_client):
    """Adapter rooted at the ``uploads`` prefix of ``test-bucket``."""
    return OssAdapter(
        fake_client,
        "test-bucket",
        "uploads",
        endpoint="oss-cn-hangzhou.aliyuncs.com",
    )


@pytest.fixture
def root_adapter(fake_client):
    """Adapter rooted at the top of ``test-bucket``."""
    return OssAdapter(
        fake_client, "test-bucket", endpoint="oss-cn-hangzhou.aliyuncs.com"
    )
