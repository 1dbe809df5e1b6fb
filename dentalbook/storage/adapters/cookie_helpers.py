import datetime as dt
from urllib.parse import quote, unquote

from loguru import logger

# Characters encodeURIComponent leaves untouched besides alphanumerics.
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_cookie_value(value: str) -> str:
    """Percent-encode ``value`` the way a browser page would before storing a cookie.

    ``'[{"id":"A"}]'`` becomes ``'%5B%7B%22id%22%3A%22A%22%7D%5D'``.
    """
    return quote(value, safe=_URI_COMPONENT_SAFE)


def decode_cookie_value(encoded: str) -> str:
    return unquote(encoded)


def cookie_expiry(days: int, now: dt.datetime | None = None) -> dt.datetime:
    """Absolute UTC expiry ``days`` days after ``now``."""
    now = now or dt.datetime.now(dt.timezone.utc)
    return now + dt.timedelta(days=days)


def warn_if_oversized(name: str, encoded: str, max_bytes: int) -> None:
    size = len(name) + 1 + len(encoded.encode("utf-8"))
    if size > max_bytes:
        logger.warning(
            "Cookie '{}' is {} bytes, over the {} byte limit browsers enforce",
            name,
            size,
            max_bytes,
        )
