import json

import pytest

from dentalbook.storage.codec import (
    decode_appointment,
    decode_appointment_list,
    encode_appointment,
    encode_appointment_list,
)


class TestDecodeAppointment:
    @pytest.mark.parametrize(
        "raw",
        [None, "", "{oops", "[]", '{"id": "CITA-1-aaaaaa"}'],
        ids=["none", "empty", "bad-json", "array", "missing-fields"],
    )
    def test_returns_none_for_unreadable_input(self, raw: str | None) -> None:
        assert decode_appointment(raw) is None

    def test_reads_encoded_record(self, make_appointment) -> None:
        appt = make_appointment()

        assert decode_appointment(encode_appointment(appt)) == appt


class TestDecodeAppointmentList:
    @pytest.mark.parametrize(
        "raw",
        [None, "", "nope", '{"a": 1}', '"text"'],
        ids=["none", "empty", "bad-json", "object", "string"],
    )
    def test_returns_none_for_unreadable_input(self, raw: str | None) -> None:
        assert decode_appointment_list(raw) is None

    def test_empty_array_is_an_empty_list(self) -> None:
        assert decode_appointment_list("[]") == []

    def test_drops_invalid_items(self, make_appointment) -> None:
        appt = make_appointment()
        raw = json.dumps([1, appt.model_dump(by_alias=True), {"patient": None}])

        assert decode_appointment_list(raw) == [appt]


class TestEncodeAppointmentList:
    def test_keeps_non_ascii_text(self, make_appointment) -> None:
        appt = make_appointment(notes="revisión")

        assert "revisión" in encode_appointment_list([appt])


class TestStoredIdentity:
    """Stored records must carry their own id and creation time."""

    @pytest.mark.parametrize(
        ("field", "value"),
        [("id", None), ("id", ""), ("id", "   "), ("createdAt", None), ("createdAt", "")],
        ids=["id-null", "id-empty", "id-blank", "created-null", "created-empty"],
    )
    def test_blank_identity_is_unreadable(self, make_appointment, field: str, value) -> None:
        record = make_appointment().model_dump(by_alias=True)
        record[field] = value

        assert decode_appointment(json.dumps(record)) is None
        assert decode_appointment_list(json.dumps([record])) == []

    @pytest.mark.parametrize("field", ["id", "createdAt"])
    def test_missing_identity_is_unreadable(self, make_appointment, field: str) -> None:
        record = make_appointment().model_dump(by_alias=True)
        del record[field]

        assert decode_appointment(json.dumps(record)) is None
        assert decode_appointment_list(json.dumps([record])) == []

    def test_keeps_stored_identity(self, make_appointment) -> None:
        appt = make_appointment(id="CITA-1-aaaaaa", created_at=1234)

        (decoded,) = decode_appointment_list(encode_appointment_list([appt])) or []

        assert decoded.id == "CITA-1-aaaaaa"
        assert decoded.created_at == 1234
