import datetime as dt

from dentalbook.storage.adapters.cookie_helpers import (
    cookie_expiry,
    decode_cookie_value,
    encode_cookie_value,
    warn_if_oversized,
)


class MemoryCookieJar:
    """In-memory implementation of the CookieJarProtocol protocol.

    Values are held percent-encoded with their expiry, as a browser would
    hold them. Inspect ``raw`` to see exactly what was stored, or write to it
    directly to simulate a corrupted cookie. Set ``write_error`` to make the
    next ``set_cookie`` raise.
    """

    def __init__(self, max_bytes: int = 4096) -> None:
        self.raw: dict[str, str] = {}
        self.expires: dict[str, dt.datetime] = {}
        self.max_bytes = max_bytes
        self.write_error: Exception | None = None

    def get_cookie(self, name: str) -> str | None:
        encoded = self.raw.get(name)
        if encoded is None:
            return None
        expires = self.expires.get(name)
        if expires is not None and expires <= dt.datetime.now(dt.timezone.utc):
            return None
        return decode_cookie_value(encoded)

    def set_cookie(self, name: str, value: str, days: int = 365) -> None:
        if self.write_error:
            raise self.write_error
        encoded = encode_cookie_value(value)
        warn_if_oversized(name, encoded, self.max_bytes)
        self.raw[name] = encoded
        self.expires[name] = cookie_expiry(days)


class MemoryKeyValueStore:
    """In-memory implementation of the KeyValueStoreProtocol protocol.

    ``items`` is the backing dict; tests may seed or corrupt it directly.
    Set ``write_error`` to make the next ``set_item`` raise.
    """

    def __init__(self) -> None:
        self.items: dict[str, str] = {}
        self.write_error: Exception | None = None

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.write_error:
            raise self.write_error
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)

    def clear(self) -> None:
        self.items.clear()
