import argparse
import sys

from loguru import logger

from dentalbook.config import AppConfig
from dentalbook.domain.models import Appointment
from dentalbook.pages.form_page import AppointmentFormPage
from dentalbook.pages.list_page import DELETE_CONFIRMATION, EMPTY_LIST_TEXT, AppointmentListPage
from dentalbook.storage.factory import build_store
from dentalbook.storage.ports import AbstractAppointmentStore
from dentalbook.validation.forms import FormFields

_FORM_FIELDS: tuple[str, ...] = tuple(FormFields.model_fields)


def _setup_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


def _add_form_options(parser: argparse.ArgumentParser) -> None:
    for name in _FORM_FIELDS:
        parser.add_argument(f"--{name.replace('_', '-')}", dest=name, default=None)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dentalbook", description="Dental clinic appointment book")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List all appointments")
    sub.add_parser("sync", help="Rebuild missing lookup entries from the appointment list")

    show = sub.add_parser("show", help="Show one appointment")
    show.add_argument("appointment_id")

    add = sub.add_parser("add", help="Create an appointment")
    _add_form_options(add)

    edit = sub.add_parser("edit", help="Edit an appointment; omitted options keep their value")
    edit.add_argument("appointment_id")
    _add_form_options(edit)

    delete = sub.add_parser("delete", help="Delete an appointment")
    delete.add_argument("appointment_id")
    delete.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    return parser


def _print_appointment(appointment: Appointment) -> None:
    when = appointment.appointment_datetime
    patient = appointment.patient
    print(f"id:          {appointment.id}")
    print(f"date:        {when.date_label} {when.time_label}")
    print(f"patient:     {patient.full_name} ({patient.national_id})")
    print(f"phone:       {patient.phone}")
    print(f"birth date:  {patient.birth_date}")
    print(f"notes:       {appointment.notes}")


def _print_errors(errors: dict[str, str]) -> None:
    for name, message in errors.items():
        print(f"{name}: {message}", file=sys.stderr)


def _collect_fields(args: argparse.Namespace, base: FormFields | None = None) -> dict[str, str]:
    values = base.model_dump() if base is not None else {}
    for name in _FORM_FIELDS:
        given = getattr(args, name)
        if given is not None:
            values[name] = given
    return values


def _cmd_list(store: AbstractAppointmentStore) -> int:
    view = AppointmentListPage(store).render()
    print(f"{view.count} appointment(s)")
    if view.is_empty:
        print(EMPTY_LIST_TEXT)
        return 0
    for row in view.rows:
        print(
            f"{row.position:>3}  {row.date:<10}  {row.time}  {row.national_id:<10}  "
            f"{row.patient_name:<25}  {row.phone:<14}  {row.birth_date:<10}  {row.appointment_id}"
        )
    return 0


def _cmd_show(store: AbstractAppointmentStore, appointment_id: str) -> int:
    store.sync_local_from_cookie()
    appointment = store.get_by_id(appointment_id)
    if appointment is None:
        print(f"Appointment not found: {appointment_id}", file=sys.stderr)
        return 1
    _print_appointment(appointment)
    return 0


def _cmd_save(store: AbstractAppointmentStore, args: argparse.Namespace) -> int:
    page = AppointmentFormPage(store)
    editing_id = getattr(args, "appointment_id", None)
    view = page.open(editing_id)
    if editing_id and view.editing is None:
        print(f"Appointment not found: {editing_id}", file=sys.stderr)
        return 1

    outcome = page.submit(_collect_fields(args, view.form), editing=view.editing)
    if not outcome.ok:
        _print_errors(outcome.errors)
        return 1
    print(outcome.message)
    print(f"id: {outcome.saved.id}")
    return 0


def _cmd_delete(store: AbstractAppointmentStore, appointment_id: str, yes: bool) -> int:
    store.sync_local_from_cookie()
    if store.get_by_id(appointment_id) is None:
        print(f"Appointment not found: {appointment_id}", file=sys.stderr)
        return 1
    confirmed = yes or input(f"{DELETE_CONFIRMATION} [y/N] ").strip().lower() in {"y", "yes"}
    AppointmentListPage(store).delete(appointment_id, confirmed=confirmed)
    print("Appointment deleted." if confirmed else "Deletion cancelled.")
    return 0


def main(argv: list[str] | None = None, store: AbstractAppointmentStore | None = None) -> int:
    args = _build_parser().parse_args(argv)

    if store is None:
        config = AppConfig()
        _setup_logging(config.log_level)
        store = build_store(config.storage)

    if args.command == "list":
        return _cmd_list(store)
    if args.command == "sync":
        written = store.sync_local_from_cookie()
        print(f"Restored {written} lookup entries.")
        return 0
    if args.command == "show":
        return _cmd_show(store, args.appointment_id)
    if args.command in ("add", "edit"):
        return _cmd_save(store, args)
    if args.command == "delete":
        return _cmd_delete(store, args.appointment_id, args.yes)
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
