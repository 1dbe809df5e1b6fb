from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_COOKIE_NAME = "clinicdental_appointments"


class StorageBackend(Enum):
    MEMORY = "memory"
    FILE = "file"


class StorageConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DENTALBOOK_STORAGE_", env_file=".env", extra="ignore"
    )

    backend: StorageBackend = StorageBackend.FILE
    data_dir: str = ".dentalbook"
    cookie_name: str = DEFAULT_COOKIE_NAME
    cookie_days: int = Field(default=365, ge=1)
    # Browsers cap a single cookie at roughly 4 KB.
    cookie_max_bytes: int = Field(default=4096, ge=1)


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="DENTALBOOK_", env_file=".env", extra="ignore")

    log_level: str = "INFO"
    storage: StorageConfig = Field(default_factory=lambda: StorageConfig())
