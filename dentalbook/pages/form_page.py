from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict

from dentalbook.domain.models import Appointment
from dentalbook.storage.ports import AbstractAppointmentStore
from dentalbook.validation.forms import FormFields
from dentalbook.validation.validators import validate_form

HEADING_CREATE = "Create appointment"
HEADING_EDIT = "Edit appointment"
MSG_CREATED = "Appointment created successfully."
MSG_UPDATED = "Appointment updated successfully."
LIST_PAGE = "index"


class FormView(BaseModel):
    """What the form page shows when opened."""

    model_config = ConfigDict(frozen=True)

    heading: str
    form: FormFields
    editing: Appointment | None = None


class SubmitOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    saved: Appointment | None = None
    errors: dict[str, str] = {}
    message: str | None = None
    redirect_to: str | None = None

    @property
    def ok(self) -> bool:
        return self.saved is not None


class AppointmentFormPage:
    """Backs the create/edit form."""

    def __init__(self, store: AbstractAppointmentStore) -> None:
        self._store = store

    def open(self, appointment_id: str | None = None) -> FormView:
        """Prepare the form, prefilled when ``appointment_id`` names a stored appointment.

        An id that resolves to nothing falls back to an empty create form.
        """
        if appointment_id:
            self._store.sync_local_from_cookie()
            loaded = self._store.get_by_id(appointment_id)
            if loaded is not None:
                return FormView(
                    heading=HEADING_EDIT,
                    form=FormFields.from_appointment(loaded),
                    editing=loaded,
                )
        return FormView(heading=HEADING_CREATE, form=FormFields())

    def submit(
        self,
        fields: FormFields | Mapping[str, object],
        editing: Appointment | None = None,
    ) -> SubmitOutcome:
        """Validate and save the form.

        Invalid input saves nothing and returns the per-field errors. When
        ``editing`` is given, its id and creation time carry over to the saved
        record.
        """
        result = validate_form(fields)
        if not result.is_valid:
            return SubmitOutcome(errors=result.errors)

        appointment = Appointment(
            id=editing.id if editing else None,
            created_at=editing.created_at if editing else None,
            appointment_datetime=result.data.appointment_datetime,
            patient=result.data.patient,
            notes=result.data.notes,
        )
        self._store.upsert(appointment)
        return SubmitOutcome(
            saved=appointment,
            message=MSG_UPDATED if editing else MSG_CREATED,
            redirect_to=LIST_PAGE,
        )
