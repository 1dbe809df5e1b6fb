import datetime as dt
import re
from collections.abc import Mapping

from dentalbook.domain.models import AppointmentDateTime, Patient
from dentalbook.validation.forms import REQUIRED_FIELDS, AppointmentData, FormFields, ValidationResult

MSG_REQUIRED = "This field is required."
MSG_NATIONAL_ID = "Invalid national ID (7-8 digits followed by a letter)."
MSG_PHONE = "Invalid phone number (at least 9 characters)."
MSG_DATE_INVALID = "Appointment date is not valid."
MSG_BIRTH_DATE = "Invalid birth date."

# field -> (min, max, message), checked in this order.
RANGE_RULES: dict[str, tuple[int, int, str]] = {
    "day": (1, 31, "Invalid day (1-31)."),
    "month": (1, 12, "Invalid month (1-12)."),
    "year": (1900, 2100, "Invalid year (1900-2100)."),
    "hour": (0, 23, "Invalid hour (0-23)."),
    "minute": (0, 59, "Invalid minute (0-59)."),
}

_INT_RE = re.compile(r"[0-9]+")
_NATIONAL_ID_RE = re.compile(r"[0-9]{7,8}[A-Za-z]")
_PHONE_RE = re.compile(r"[0-9\s()+\-]{9,}")

_BIRTH_DATE_FORMATS = ("%d/%m/%Y", "%d-%m-%Y")


def is_int(value: str) -> bool:
    """True for a non-negative ASCII integer string such as ``"07"``."""
    return _INT_RE.fullmatch(value.strip()) is not None


def is_national_id(value: str) -> bool:
    return _NATIONAL_ID_RE.fullmatch(value.strip()) is not None


def is_phone(value: str) -> bool:
    return _PHONE_RE.fullmatch(value.strip()) is not None


def is_real_date(day: str, month: str, year: str) -> bool:
    """True when the parts name an existing calendar day (no 31 April, no 29 Feb 2023)."""
    if not (is_int(day) and is_int(month) and is_int(year)):
        return False
    try:
        dt.date(int(year), int(month), int(day))
    except ValueError:
        return False
    return True


def parse_birth_date(value: str) -> dt.date | None:
    """Parse a birth date in ISO 8601 (date or date-time) or ``dd/mm/yyyy`` form."""
    value = value.strip()
    if not value:
        return None
    try:
        return dt.date.fromisoformat(value)
    except ValueError:
        pass
    try:
        return dt.datetime.fromisoformat(value).date()
    except ValueError:
        pass
    for fmt in _BIRTH_DATE_FORMATS:
        try:
            return dt.datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    return None


def _in_range(value: str, low: int, high: int) -> bool:
    return is_int(value) and low <= int(value) <= high


def validate_form(fields: FormFields | Mapping[str, object]) -> ValidationResult:
    """Check a submitted appointment form.

    Every applicable error is collected. A field reported as missing is not
    checked again, and the calendar check only runs when day, month and year
    each passed on their own.
    """
    if not isinstance(fields, FormFields):
        fields = FormFields.model_validate(dict(fields))
    values = fields.trimmed()
    errors: dict[str, str] = {}

    for name in REQUIRED_FIELDS:
        if not values[name]:
            errors[name] = MSG_REQUIRED

    for name, (low, high, message) in RANGE_RULES.items():
        if name not in errors and not _in_range(values[name], low, high):
            errors[name] = message

    if "national_id" not in errors and not is_national_id(values["national_id"]):
        errors["national_id"] = MSG_NATIONAL_ID

    if "phone" not in errors and not is_phone(values["phone"]):
        errors["phone"] = MSG_PHONE

    date_parts = ("day", "month", "year")
    if not any(name in errors for name in date_parts) and not is_real_date(
        values["day"], values["month"], values["year"]
    ):
        for name in date_parts:
            errors[name] = MSG_DATE_INVALID

    if "birth_date" not in errors and parse_birth_date(values["birth_date"]) is None:
        errors["birth_date"] = MSG_BIRTH_DATE

    data = AppointmentData(
        appointment_datetime=AppointmentDateTime(
            day=values["day"],
            month=values["month"],
            year=values["year"],
            hour=values["hour"],
            minute=values["minute"],
        ),
        patient=Patient(
            national_id=values["national_id"],
            first_name=values["first_name"],
            last_name=values["last_name"],
            phone=values["phone"],
            birth_date=values["birth_date"],
        ),
        notes=values["notes"],
    )
    return ValidationResult(is_valid=not errors, errors=errors, data=data)
