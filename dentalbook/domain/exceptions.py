class DentalBookError(Exception):
    """Base exception for all appointment book errors."""


class ConfigurationError(DentalBookError):
    """Raised when the configured storage backend cannot be built."""


class StorageError(DentalBookError):
    """Raised when a durable store cannot be read or written at the OS level.

    Corrupt contents are not a ``StorageError``: those are recovered by the
    store and treated as empty.
    """

    def __init__(self, reason: str, path: str | None = None) -> None:
        self.reason = reason
        self.path = path
        super().__init__(f"Storage failure: {reason}")
