import os
from typing import Callable

from loguru import logger

from dentalbook.config import StorageBackend, StorageConfig
from dentalbook.domain.exceptions import ConfigurationError
from dentalbook.storage.adapters.filesystem import FileCookieJar, FileKeyValueStore
from dentalbook.storage.adapters.memory import MemoryCookieJar, MemoryKeyValueStore
from dentalbook.storage.service import AppointmentStore

COOKIE_FILE_NAME = "cookies.txt"
LOCAL_STORAGE_FILE_NAME = "local_storage.json"


def _build_memory(config: StorageConfig) -> AppointmentStore:
    return AppointmentStore(
        cookies=MemoryCookieJar(max_bytes=config.cookie_max_bytes),
        local_storage=MemoryKeyValueStore(),
        cookie_name=config.cookie_name,
        cookie_days=config.cookie_days,
    )


def _build_file(config: StorageConfig) -> AppointmentStore:
    return AppointmentStore(
        cookies=FileCookieJar(
            os.path.join(config.data_dir, COOKIE_FILE_NAME),
            max_bytes=config.cookie_max_bytes,
        ),
        local_storage=FileKeyValueStore(os.path.join(config.data_dir, LOCAL_STORAGE_FILE_NAME)),
        cookie_name=config.cookie_name,
        cookie_days=config.cookie_days,
    )


_BUILDERS: dict[StorageBackend, Callable[[StorageConfig], AppointmentStore]] = {
    StorageBackend.MEMORY: _build_memory,
    StorageBackend.FILE: _build_file,
}


def build_store(config: StorageConfig) -> AppointmentStore:
    """Build the appointment store for the configured backend."""
    backend = config.backend
    builder = _BUILDERS.get(backend)
    if builder is None:
        raise ConfigurationError(f"Unsupported storage backend: {backend!r}")
    logger.info("Building appointment store with backend: {}", backend.value)
    return builder(config)
