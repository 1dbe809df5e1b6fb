from collections.abc import Callable
from typing import Any

import pytest

from dentalbook.domain.models import Appointment
from dentalbook.storage.adapters.memory import MemoryCookieJar, MemoryKeyValueStore
from dentalbook.storage.service import AppointmentStore

AppointmentFactory = Callable[..., Appointment]


@pytest.fixture
def cookies() -> MemoryCookieJar:
    return MemoryCookieJar()


@pytest.fixture
def local_storage() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def store(cookies: MemoryCookieJar, local_storage: MemoryKeyValueStore) -> AppointmentStore:
    return AppointmentStore(cookies=cookies, local_storage=local_storage)


@pytest.fixture
def valid_fields() -> dict[str, str]:
    """A complete, valid form submission."""
    return {
        "day": "15",
        "month": "3",
        "year": "2026",
        "hour": "9",
        "minute": "05",
        "national_id": "12345678A",
        "first_name": "Ana",
        "last_name": "Ruiz",
        "phone": "600123456",
        "birth_date": "1990-01-01",
        "notes": "Cleaning",
    }


@pytest.fixture
def make_appointment() -> AppointmentFactory:
    def _make(**overrides: Any) -> Appointment:
        data: dict[str, Any] = {
            "appointment_datetime": {
                "day": "15",
                "month": "3",
                "year": "2026",
                "hour": "9",
                "minute": "5",
            },
            "patient": {
                "national_id": "12345678A",
                "first_name": "Ana",
                "last_name": "Ruiz",
                "phone": "600123456",
                "birth_date": "1990-01-01",
            },
            "notes": "",
        }
        data.update(overrides)
        return Appointment.model_validate(data)

    return _make
