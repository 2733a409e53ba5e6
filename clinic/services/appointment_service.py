import logging

from clinic.errors import BadRequest, NotFound
from clinic.models import Appointment
from clinic.schemas import AppointmentCreate, AppointmentUpdate
from clinic.services.db_context import transaction
from clinic.services.patient_service import get_patient
from clinic.services.portal_service import to_clinic_naive


logger = logging.getLogger("clinic.appointments")


# -------------------------------
# 📅 APPOINTMENT HELPERS
# -------------------------------

def _check_schedule(date_time, repeat_schedule, end_date):
    """An end date only makes sense for a repeating appointment, and never before it starts."""
    if repeat_schedule is None and end_date is not None:
        raise BadRequest("endDate requires a repeatSchedule", fields=["endDate"])
    if end_date is not None and end_date < date_time.date():
        raise BadRequest("endDate cannot be before the appointment date", fields=["endDate"])


def list_appointments(session, patient_id: int | None = None):
    """Appointments ordered by date-time, optionally for one patient."""
    query = session.query(Appointment)
    if patient_id is not None:
        query = query.filter(Appointment.patient_id == patient_id)
    return query.order_by(Appointment.date_time.asc(), Appointment.id.asc()).all()


def get_appointment(session, appointment_id: int) -> Appointment:
    appt = session.get(Appointment, appointment_id)
    if appt is None:
        raise NotFound("Appointment not found")
    return appt


def create_appointment(session, data: AppointmentCreate) -> Appointment:
    # the owning patient must exist; appointments never dangle
    patient = get_patient(session, data.patient_id)

    date_time = to_clinic_naive(data.date_time)
    _check_schedule(date_time, data.repeat_schedule, data.end_date)

    appt = Appointment(
        patient_id=patient.id,
        provider_name=data.provider_name,
        date_time=date_time,
        repeat_schedule=data.repeat_schedule,
        end_date=data.end_date,
        reason=data.reason,
    )
    with transaction(session, "create_appointment"):
        session.add(appt)

    logger.info(f"[create_appointment] appointment_id={appt.id} patient_id={patient.id}")
    return appt


def update_appointment(session, appointment_id: int, data: AppointmentUpdate) -> Appointment:
    """
    Partial update. Clearing repeatSchedule also clears endDate unless the
    caller sends one, which is then rejected.
    """
    appt = get_appointment(session, appointment_id)
    changes = data.changes()

    if "date_time" in changes:
        changes["date_time"] = to_clinic_naive(changes["date_time"])
    if "repeat_schedule" in changes and changes["repeat_schedule"] is None and "end_date" not in changes:
        changes["end_date"] = None

    _check_schedule(
        changes.get("date_time", appt.date_time),
        changes.get("repeat_schedule", appt.repeat_schedule),
        changes.get("end_date", appt.end_date),
    )

    with transaction(session, "update_appointment"):
        for field, value in changes.items():
            setattr(appt, field, value)

    logger.info(f"[update_appointment] appointment_id={appt.id} fields={sorted(changes)}")
    return appt


def delete_appointment(session, appointment_id: int) -> None:
    appt = get_appointment(session, appointment_id)
    with transaction(session, "delete_appointment"):
        session.delete(appt)
    logger.info(f"[delete_appointment] appointment_id={appointment_id}")
