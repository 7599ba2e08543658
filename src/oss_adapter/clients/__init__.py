"""Object storage client contract and the Aliyun OSS implementation."""

from .base import (
    OSS_ACL_PRIVATE,
    OSS_ACL_PUBLIC_READ,
    OSS_CONTENT_TYPE,
    OSS_HEADERS,
    OSS_HTTP_GET,
    OSS_LENGTH,
    OSS_OBJECT_ACL,
    ObjectListing,
    ObjectStorageClient,
    ObjectSummary,
)
from .oss_client import Oss2Client, OssClientConfig

__all__ = [
    "OSS_ACL_PRIVATE",
    "OSS_ACL_PUBLIC_READ",
    "OSS_CONTENT_TYPE",
    "OSS_HEADERS",
    "OSS_HTTP_GET",
    "OSS_LENGTH",
    "OSS_OBJECT_ACL",
    "ObjectListing",
    "ObjectStorageClient",
    "ObjectSummary",
    "Oss2Client",
    "OssClientConfig",
]
