"""Filesystem adapter for Aliyun OSS object storage.

This package exposes an OSS bucket through a generic filesystem adapter
interface: read, write, delete, copy, list, visibility and URL generation,
all rooted at an optional key prefix.

Key Features:
    - Logical paths mapped onto prefixed object keys
    - Directory projection of the flat key space
    - Normalized metadata records
    - Success/Failure results instead of backend exceptions
    - Named disk registry with an ``oss`` driver
    - CLI interface

Recommended Usage:

    >>> from oss_adapter import StorageRegistry, register
    >>> registry = StorageRegistry({"media": {"driver": "oss", ...}})
    >>> register(registry)
    >>> adapter = registry.disk("media")
    >>> adapter.write("images/logo.png", data, {"visibility": "public"})

Advanced Usage:
    Inject any ``ObjectStorageClient`` directly:

    >>> from oss_adapter import OssAdapter
    >>> adapter = OssAdapter(client, "media-bucket", prefix="uploads")
"""

__version__ = "0.1.0"

from .adapter import OssAdapter
from .clients import (
    ObjectListing,
    ObjectStorageClient,
    ObjectSummary,
    Oss2Client,
    OssClientConfig,
)
from .interface import Config, FilesystemAdapter, Visibility
from .models import EntryType, Metadata, ObjectEntry
from .paths import PathPrefixer
from .registry import StorageRegistry, create_oss_adapter, register
from .results import Failure, Result, Success
from .schemas import OssStorageConfig

__all__ = [
    # Adapter
    "OssAdapter",
    "FilesystemAdapter",
    "Config",
    "Visibility",
    "PathPrefixer",
    # Records
    "EntryType",
    "Metadata",
    "ObjectEntry",
    "Failure",
    "Result",
    "Success",
    # Clients
    "ObjectListing",
    "ObjectStorageClient",
    "ObjectSummary",
    "Oss2Client",
    "OssClientConfig",
    # Configuration
    "OssStorageConfig",
    "StorageRegistry",
    "create_oss_adapter",
    "register",
]
