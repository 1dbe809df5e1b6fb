import json
from collections.abc import Iterable

from loguru import logger
from pydantic import ValidationError

from dentalbook.domain.models import Appointment


def encode_appointment(appointment: Appointment) -> str:
    return appointment.model_dump_json(by_alias=True)


def encode_appointment_list(appointments: Iterable[Appointment]) -> str:
    return json.dumps(
        [a.model_dump(mode="json", by_alias=True) for a in appointments],
        ensure_ascii=False,
        separators=(",", ":"),
    )


def _has_stored_identity(item: dict) -> bool:
    # Stored records must carry their own id and creation time; the model
    # would otherwise invent fresh ones on every read.
    record_id = item.get("id")
    created_at = item.get("createdAt", item.get("created_at"))
    return isinstance(record_id, str) and bool(record_id.strip()) and created_at not in (None, "")


def _decode_stored(item: object) -> Appointment | None:
    if not isinstance(item, dict) or not _has_stored_identity(item):
        return None
    try:
        return Appointment.model_validate(item)
    except ValidationError:
        return None


def decode_appointment(raw: str | None) -> Appointment | None:
    """Parse one stored appointment. Returns None for missing or unreadable data."""
    if not raw:
        return None
    try:
        return _decode_stored(json.loads(raw))
    except json.JSONDecodeError:
        return None


def decode_appointment_list(raw: str | None) -> list[Appointment] | None:
    """Parse the stored appointment list.

    Returns None when ``raw`` is missing, is not JSON, or is not a JSON array.
    Array items that are not valid appointments, including those without a
    stored id or creation time, are dropped with a warning rather than
    failing the whole list.
    """
    if not raw:
        return None
    try:
        items = json.loads(raw)
    except json.JSONDecodeError:
        return None
    if not isinstance(items, list):
        return None

    appointments: list[Appointment] = []
    for position, item in enumerate(items):
        appointment = _decode_stored(item)
        if appointment is None:
            logger.warning("Skipping unreadable appointment at position {}", position)
            continue
        appointments.append(appointment)
    return appointments
