from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Protocol

from dentalbook.domain.models import Appointment


class AbstractAppointmentStore(ABC):
    """Abstract base class for appointment persistence."""

    @abstractmethod
    def load_all(self) -> list[Appointment]:
        """Read the full appointment list.

        Returns:
            Appointments in stored order. Empty list if nothing is stored or
            the stored data is unreadable.
        """

    @abstractmethod
    def save_all(self, appointments: Iterable[Appointment]) -> None:
        """Overwrite the full appointment list."""

    @abstractmethod
    def upsert(self, appointment: Appointment) -> None:
        """Insert the appointment, or replace the stored one with the same id.

        Both the full list and the per-id lookup entry are written. The two
        writes are not atomic.
        """

    @abstractmethod
    def remove_by_id(self, appointment_id: str) -> None:
        """Delete an appointment from both stores. Unknown ids are ignored."""

    @abstractmethod
    def sync_local_from_cookie(self) -> int:
        """Create missing per-id lookup entries from the full list.

        Existing entries are left untouched.

        Returns:
            Number of entries written.
        """

    @abstractmethod
    def get_by_id(self, appointment_id: str) -> Appointment | None:
        """Look up one appointment.

        Args:
            appointment_id: The appointment's unique ID.

        Returns:
            The appointment, or None if neither store holds it.
        """


class CookieJarProtocol(Protocol):
    """Holds named string cookies, the durable full-list store."""

    def get_cookie(self, name: str) -> str | None:
        """Return the decoded cookie value, or None if unset or expired."""
        ...

    def set_cookie(self, name: str, value: str, days: int = 365) -> None:
        """Store ``value`` under ``name`` for ``days`` days."""
        ...


class KeyValueStoreProtocol(Protocol):
    """String key-value store, the durable per-id lookup store."""

    def get_item(self, key: str) -> str | None:
        """Return the stored value, or None."""
        ...

    def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``."""
        ...

    def remove_item(self, key: str) -> None:
        """Delete ``key``; unknown keys are ignored."""
        ...
