import json
import os
import tempfile
from http.cookiejar import Cookie, LoadError, MozillaCookieJar

from loguru import logger

from dentalbook.domain.exceptions import StorageError
from dentalbook.storage.adapters.cookie_helpers import (
    cookie_expiry,
    decode_cookie_value,
    encode_cookie_value,
    warn_if_oversized,
)


def _ensure_parent(path: str) -> str:
    folder = os.path.dirname(os.path.abspath(path))
    os.makedirs(folder, exist_ok=True)
    return folder


class FileCookieJar:
    """Cookie jar persisted to a Netscape/Mozilla ``cookies.txt`` file.

    Every cookie is scoped to ``domain`` and path ``/``. The file is re-read
    on each access so separate processes see each other's writes. Expired
    cookies are dropped on load.
    """

    def __init__(self, path: str, domain: str = "localhost", max_bytes: int = 4096) -> None:
        self._path = path
        self._domain = domain
        self._max_bytes = max_bytes

    def _load(self) -> MozillaCookieJar:
        jar = MozillaCookieJar(self._path)
        if not os.path.exists(self._path):
            return jar
        try:
            jar.load(ignore_discard=True, ignore_expires=False)
        except (LoadError, UnicodeDecodeError):
            # Bad header, layout or encoding; the list store degrades to empty.
            logger.warning("Cookie file {} is unreadable; ignoring its contents", self._path)
            return MozillaCookieJar(self._path)
        except OSError as exc:
            raise StorageError(str(exc), path=self._path) from exc
        return jar

    def get_cookie(self, name: str) -> str | None:
        for cookie in self._load():
            if cookie.name != name or cookie.domain != self._domain or cookie.path != "/":
                continue
            if cookie.is_expired() or cookie.value is None:
                return None
            return decode_cookie_value(cookie.value)
        return None

    def set_cookie(self, name: str, value: str, days: int = 365) -> None:
        encoded = encode_cookie_value(value)
        warn_if_oversized(name, encoded, self._max_bytes)

        jar = self._load()
        jar.set_cookie(
            Cookie(
                version=0,
                name=name,
                value=encoded,
                port=None,
                port_specified=False,
                domain=self._domain,
                domain_specified=False,
                domain_initial_dot=False,
                path="/",
                path_specified=True,
                secure=False,
                expires=int(cookie_expiry(days).timestamp()),
                discard=False,
                comment=None,
                comment_url=None,
                rest={"SameSite": "Lax"},
            )
        )
        try:
            _ensure_parent(self._path)
            jar.save(ignore_discard=True, ignore_expires=False)
        except OSError as exc:
            raise StorageError(str(exc), path=self._path) from exc


class FileKeyValueStore:
    """Key-value store kept as a single JSON object on disk.

    Writes go through a temporary file and ``os.replace`` so a crash never
    leaves a half-written file behind.
    """

    def __init__(self, path: str) -> None:
        self._path = path

    def _read(self) -> dict[str, str]:
        if not os.path.exists(self._path):
            return {}
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("Key-value file {} is unreadable; ignoring its contents", self._path)
            return {}
        except OSError as exc:
            raise StorageError(str(exc), path=self._path) from exc

        if not isinstance(raw, dict):
            logger.warning("Key-value file {} does not hold an object; ignoring it", self._path)
            return {}
        return {str(k): v for k, v in raw.items() if isinstance(v, str)}

    def _write(self, items: dict[str, str]) -> None:
        try:
            folder = _ensure_parent(self._path)
            with tempfile.NamedTemporaryFile(
                "w", delete=False, encoding="utf-8", dir=folder, suffix=".tmp"
            ) as tf:
                json.dump(items, tf, ensure_ascii=False, indent=2)
                tmp_name = tf.name
            os.replace(tmp_name, self._path)
        except OSError as exc:
            raise StorageError(str(exc), path=self._path) from exc

    def get_item(self, key: str) -> str | None:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read()
        items[key] = value
        self._write(items)

    def remove_item(self, key: str) -> None:
        items = self._read()
        if items.pop(key, None) is not None:
            self._write(items)

    def clear(self) -> None:
        self._write({})
