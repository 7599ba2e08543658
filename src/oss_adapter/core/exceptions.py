"""Exception hierarchy for oss-adapter."""


class OssAdapterError(Exception):
    """Base exception for all oss-adapter errors."""

    pass


class ValidationError(OssAdapterError):
    """Raised when configuration or arguments fail validation."""

    pass


class BackendError(OssAdapterError):
    """Raised by an object storage client when a backend call fails.

    The adapter never lets this escape; it is converted to a ``Failure``
    result at the point of the call.
    """

    def __init__(self, operation: str, key: str = "", detail: str = ""):
        self.operation = operation
        self.key = key
        self.detail = detail
        super().__init__(f"{operation} failed for '{key}': {detail}")
