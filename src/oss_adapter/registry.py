"""Named storage disks and the OSS driver registration hook.

Example:
    >>> registry = StorageRegistry(
    ...     {
    ...         "media": {
    ...             "driver": "oss",
    ...             "access_id": "LTAI5tEXAMPLE",
    ...             "access_key": "EXAMPLEKEY",
    ...             "endpoint": "oss-cn-hangzhou.aliyuncs.com",
    ...             "bucket": "media-bucket",
    ...             "prefix": "uploads",
    ...         }
    ...     }
    ... )
    >>> register(registry)
    >>> adapter = registry.disk("media")
"""

from typing import Any, Callable, Dict, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from oss_adapter.core import ValidationError, get_logger

from .adapter import OssAdapter
from .clients import Oss2Client, OssClientConfig
from .interface import FilesystemAdapter
from .schemas import OssStorageConfig

logger = get_logger(__name__)

AdapterFactory = Callable[[Mapping[str, Any]], FilesystemAdapter]

OSS_DRIVER = "oss"


class StorageRegistry:
    """Builds adapters for named disks from registered driver factories."""

    def __init__(self, disks: Optional[Mapping[str, Mapping[str, Any]]] = None):
        self._disks: Dict[str, Mapping[str, Any]] = dict(disks or {})
        self._drivers: Dict[str, AdapterFactory] = {}
        self._resolved: Dict[str, FilesystemAdapter] = {}

    def extend(self, driver: str, factory: AdapterFactory) -> None:
        """Register a factory for a driver name."""
        self._drivers[driver] = factory
        logger.debug("Storage driver registered", driver=driver)

    def add_disk(self, name: str, config: Mapping[str, Any]) -> None:
        self._disks[name] = config
        self._resolved.pop(name, None)

    def disk(self, name: str) -> FilesystemAdapter:
        """Get the adapter for a disk, building it on first use.

        Raises:
            ValidationError: If the disk or its driver is unknown
        """
        if name in self._resolved:
            return self._resolved[name]

        if name not in self._disks:
            raise ValidationError(f"Storage disk [{name}] is not configured")
        config = self._disks[name]

        driver = config.get("driver")
        if driver not in self._drivers:
            raise ValidationError(
                f"Driver [{driver}] for disk [{name}] is not supported"
            )

        adapter = self._drivers[driver](config)
        self._resolved[name] = adapter
        logger.info("Storage disk resolved", disk=name, driver=driver)
        return adapter


def create_oss_adapter(config: Mapping[str, Any]) -> OssAdapter:
    """Build an ``OssAdapter`` and its ``Oss2Client`` from a config block.

    Raises:
        ValidationError: If the configuration block is incomplete
    """
    try:
        storage = OssStorageConfig.model_validate(dict(config))
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid OSS storage configuration: {e}") from e

    client = Oss2Client(
        OssClientConfig(
            access_id=storage.access_id,
            access_key=storage.access_key,
            endpoint=storage.endpoint,
            security_token=storage.security_token,
        )
    )
    return OssAdapter(
        client,
        storage.bucket,
        storage.prefix,
        options=storage.options,
        endpoint=storage.endpoint,
        cname=storage.cname,
    )


def register(registry: StorageRegistry) -> None:
    """Install the ``oss`` driver."""
    registry.extend(OSS_DRIVER, create_oss_adapter)
