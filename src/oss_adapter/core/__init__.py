"""Core utilities and shared components for oss-adapter."""

from .config import settings
from .exceptions import BackendError, OssAdapterError, ValidationError
from .observability import get_logger, get_tracer

__all__ = [
    "settings",
    "BackendError",
    "OssAdapterError",
    "ValidationError",
    "get_logger",
    "get_tracer",
]
