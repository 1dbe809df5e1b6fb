from loguru import logger
from pydantic import BaseModel, ConfigDict

from dentalbook.domain.models import Appointment
from dentalbook.storage.ports import AbstractAppointmentStore

EMPTY_LIST_TEXT = "No appointments yet."
DELETE_CONFIRMATION = "Delete this appointment? This cannot be undone."


class AppointmentRow(BaseModel):
    """One line of the appointment table."""

    model_config = ConfigDict(frozen=True)

    position: int
    appointment_id: str
    date: str
    time: str
    national_id: str
    patient_name: str
    phone: str
    birth_date: str

    @classmethod
    def from_appointment(cls, position: int, appointment: Appointment) -> "AppointmentRow":
        when = appointment.appointment_datetime
        patient = appointment.patient
        return cls(
            position=position,
            appointment_id=appointment.id,
            date=when.date_label,
            time=when.time_label,
            national_id=patient.national_id,
            patient_name=patient.full_name,
            phone=patient.phone,
            birth_date=patient.birth_date,
        )


class ListView(BaseModel):
    model_config = ConfigDict(frozen=True)

    count: int
    rows: list[AppointmentRow]

    @property
    def is_empty(self) -> bool:
        return self.count == 0


class AppointmentListPage:
    """Backs the appointment list: builds the table and handles deletion."""

    def __init__(self, store: AbstractAppointmentStore) -> None:
        self._store = store

    def render(self) -> ListView:
        """Build the table, repairing the lookup store from the list first."""
        self._store.sync_local_from_cookie()
        appointments = self._store.load_all()
        rows = [
            AppointmentRow.from_appointment(position, appointment)
            for position, appointment in enumerate(appointments, start=1)
        ]
        return ListView(count=len(rows), rows=rows)

    def delete(self, appointment_id: str, confirmed: bool) -> ListView:
        """Remove an appointment once the user confirmed, then rebuild the table."""
        if confirmed:
            self._store.remove_by_id(appointment_id)
        else:
            logger.info("Deletion not confirmed: id={}", appointment_id)
        return self.render()
