from collections.abc import Iterable

from loguru import logger

from dentalbook.config import DEFAULT_COOKIE_NAME
from dentalbook.domain.models import Appointment
from dentalbook.storage.codec import (
    decode_appointment,
    decode_appointment_list,
    encode_appointment,
    encode_appointment_list,
)
from dentalbook.storage.ports import (
    AbstractAppointmentStore,
    CookieJarProtocol,
    KeyValueStoreProtocol,
)


class AppointmentStore(AbstractAppointmentStore):
    """Keeps the appointment list in a cookie and mirrors each record by id.

    The cookie is authoritative. The key-value store is a lookup cache that
    ``sync_local_from_cookie`` can rebuild.
    """

    def __init__(
        self,
        cookies: CookieJarProtocol,
        local_storage: KeyValueStoreProtocol,
        cookie_name: str = DEFAULT_COOKIE_NAME,
        cookie_days: int = 365,
    ) -> None:
        self._cookies = cookies
        self._local = local_storage
        self._cookie_name = cookie_name
        self._cookie_days = cookie_days

    def load_all(self) -> list[Appointment]:
        raw = self._cookies.get_cookie(self._cookie_name)
        appointments = decode_appointment_list(raw)
        if appointments is None:
            if raw:
                logger.warning("Stored appointment list is unreadable; treating it as empty")
            return []
        return appointments

    def save_all(self, appointments: Iterable[Appointment]) -> None:
        self._cookies.set_cookie(
            self._cookie_name, encode_appointment_list(appointments), days=self._cookie_days
        )

    def upsert(self, appointment: Appointment) -> None:
        appointments = self.load_all()
        for index, existing in enumerate(appointments):
            if existing.id == appointment.id:
                appointments[index] = appointment
                logger.info("Updating appointment: id={}", appointment.id)
                break
        else:
            appointments.append(appointment)
            logger.info("Adding appointment: id={}", appointment.id)

        self.save_all(appointments)
        self._local.set_item(appointment.id, encode_appointment(appointment))

    def remove_by_id(self, appointment_id: str) -> None:
        appointments = self.load_all()
        remaining = [a for a in appointments if a.id != appointment_id]
        self.save_all(remaining)
        self._local.remove_item(appointment_id)

        if len(remaining) < len(appointments):
            logger.info("Removed appointment: id={}", appointment_id)

    def sync_local_from_cookie(self) -> int:
        written = 0
        for appointment in self.load_all():
            if self._local.get_item(appointment.id):
                continue
            self._local.set_item(appointment.id, encode_appointment(appointment))
            written += 1

        if written:
            logger.info("Restored {} lookup entries from the appointment list", written)
        return written

    def get_by_id(self, appointment_id: str) -> Appointment | None:
        raw = self._local.get_item(appointment_id)
        appointment = decode_appointment(raw)
        if appointment is not None and appointment.id == appointment_id:
            return appointment
        if raw:
            logger.warning("Lookup entry for id={} is unreadable; scanning the list", appointment_id)

        return next((a for a in self.load_all() if a.id == appointment_id), None)
