"""Public and signed URL composition for OSS objects."""

from datetime import datetime, timezone
from typing import Optional, Tuple, Union
from urllib.parse import urlsplit, urlunsplit

from oss_adapter.core import ValidationError

DEFAULT_SCHEME = "http"


def split_base(base: str) -> Tuple[str, str]:
    """Split an endpoint or custom domain into ``(scheme, host)``.

    A bare host such as ``oss-cn-hangzhou.aliyuncs.com`` gets the default
    scheme.
    """
    if "//" in base:
        parts = urlsplit(base)
        return parts.scheme or DEFAULT_SCHEME, parts.netloc
    return DEFAULT_SCHEME, base.strip("/")


def public_url(
    bucket: str,
    key: str,
    endpoint: Optional[str] = None,
    cname: Optional[str] = None,
) -> str:
    """Compose ``scheme://host/key`` without calling the backend.

    The custom domain is used verbatim. Otherwise the bucket name is
    prepended to the endpoint host unless it is already the host's leading
    label.
    """
    base = cname or endpoint
    if not base:
        raise ValidationError("An endpoint or cname is required to build a URL")

    scheme, host = split_base(base)
    if not cname and not (host == bucket or host.startswith(bucket + ".")):
        host = f"{bucket}.{host}"
    return f"{scheme}://{host}/{key}"


def expiration_to_timeout(
    expiration: Union[int, float, datetime], now: Optional[datetime] = None
) -> int:
    """Seconds a signed URL stays valid.

    Numbers are taken as a second count; datetimes as the expiry instant.
    """
    if isinstance(expiration, bool):
        raise ValidationError(f"Invalid expiration: {expiration!r}")
    if isinstance(expiration, (int, float)):
        return int(expiration)
    if isinstance(expiration, datetime):
        if now is None:
            now = datetime.now(timezone.utc if expiration.tzinfo else None)
        return int((expiration - now).total_seconds())
    raise ValidationError(f"Invalid expiration: {expiration!r}")


def rewrite_host(url: str, cname: str) -> str:
    """Swap the authority of a signed URL for the custom domain.

    Path and query are kept byte for byte; the signature covers them.
    """
    parts = urlsplit(url)
    scheme, host = split_base(cname)
    if "//" not in cname:
        scheme = parts.scheme
    return urlunsplit((scheme, host, parts.path, parts.query, parts.fragment))
