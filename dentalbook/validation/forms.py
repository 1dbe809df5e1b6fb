from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

from dentalbook.domain.models import Appointment, AppointmentDateTime, Patient

REQUIRED_FIELDS: tuple[str, ...] = (
    "day",
    "month",
    "year",
    "hour",
    "minute",
    "national_id",
    "first_name",
    "last_name",
    "phone",
    "birth_date",
)


class FormFields(BaseModel):
    """Raw values of the appointment form, exactly as typed.

    Accepts snake_case or camelCase names (``national_id`` or ``nationalId``).
    Missing or None values become empty strings.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )

    day: str = ""
    month: str = ""
    year: str = ""
    hour: str = ""
    minute: str = ""
    national_id: str = ""
    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    birth_date: str = ""
    notes: str = ""

    @model_validator(mode="before")
    @classmethod
    def _none_to_empty(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: ("" if value is None else value) for key, value in data.items()}
        return data

    @classmethod
    def from_appointment(cls, appointment: Appointment) -> "FormFields":
        when = appointment.appointment_datetime
        patient = appointment.patient
        return cls(
            day=when.day,
            month=when.month,
            year=when.year,
            hour=when.hour,
            minute=when.minute,
            national_id=patient.national_id,
            first_name=patient.first_name,
            last_name=patient.last_name,
            phone=patient.phone,
            birth_date=patient.birth_date,
            notes=appointment.notes,
        )

    def trimmed(self) -> dict[str, str]:
        return {name: value.strip() for name, value in self.model_dump().items()}


class AppointmentData(BaseModel):
    """Normalised form output, ready to build an ``Appointment`` from."""

    model_config = ConfigDict(frozen=True)

    appointment_datetime: AppointmentDateTime
    patient: Patient
    notes: str = ""


class ValidationResult(BaseModel):
    """Outcome of validating the appointment form.

    ``errors`` maps snake_case field names to a user-facing message and is
    empty when ``is_valid`` is True.
    """

    model_config = ConfigDict(frozen=True)

    is_valid: bool
    errors: dict[str, str]
    data: AppointmentData
