import datetime as dt
import random
import string
import time
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

APPOINTMENT_ID_PREFIX = "CITA"

_BASE36_ALPHABET = string.digits + string.ascii_lowercase
_ID_SUFFIX_LENGTH = 6


def now_ms() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


def generate_appointment_id() -> str:
    """Build a fresh id like ``CITA-1760870400000-k3x9q2``."""
    suffix = "".join(random.choices(_BASE36_ALPHABET, k=_ID_SUFFIX_LENGTH))
    return f"{APPOINTMENT_ID_PREFIX}-{now_ms()}-{suffix}"


class _Record(BaseModel):
    """Immutable record persisted with camelCase keys."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


class AppointmentDateTime(_Record):
    """Date and time of a visit, each part kept as the digits the user typed."""

    day: str
    month: str
    year: str
    hour: str
    minute: str

    def to_datetime(self) -> dt.datetime:
        return dt.datetime(
            int(self.year), int(self.month), int(self.day), int(self.hour), int(self.minute)
        )

    @property
    def date_label(self) -> str:
        return f"{self.day}/{self.month}/{self.year}"

    @property
    def time_label(self) -> str:
        return f"{self.hour.zfill(2)}:{self.minute.zfill(2)}"


class Patient(_Record):
    """The patient an appointment is booked for."""

    national_id: str
    first_name: str
    last_name: str
    phone: str
    birth_date: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Appointment(_Record):
    """A scheduled clinic visit.

    ``id`` and ``created_at`` are generated when not supplied, so the same
    constructor serves both a new booking and an edit of an existing one.
    Field formats are not checked here; run the form validator first.
    """

    id: str = Field(default_factory=generate_appointment_id)
    appointment_datetime: AppointmentDateTime = Field(alias="appointmentDateTime")
    patient: Patient
    notes: str = ""
    created_at: int = Field(default_factory=now_ms)

    @model_validator(mode="before")
    @classmethod
    def _fill_blank_defaults(cls, data: Any) -> Any:
        # Treat None/"" like an omitted value so defaults kick in.
        if not isinstance(data, dict):
            return data
        optional = {"id", "notes", "created_at", "createdAt"}
        return {
            key: value
            for key, value in data.items()
            if not (key in optional and (value is None or value == ""))
        }

    @property
    def starts_at(self) -> dt.datetime:
        return self.appointment_datetime.to_datetime()
