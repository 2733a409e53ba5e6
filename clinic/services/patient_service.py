import logging

from sqlalchemy.exc import IntegrityError

from clinic.errors import Conflict, NotFound
from clinic.models import Appointment, Patient, Prescription
from clinic.schemas import PatientCreate, PatientUpdate
from clinic.services.credentials import hash_password
from clinic.services.db_context import transaction


logger = logging.getLogger("clinic.patients")

DUPLICATE_EMAIL = "Email already registered"


# -------------------------------
# 👤 PATIENT HELPERS
# -------------------------------

def list_patients(session):
    """All patients, newest first."""
    return (
        session.query(Patient)
        .order_by(Patient.created_at.desc(), Patient.id.desc())
        .all()
    )


def get_patient(session, patient_id: int) -> Patient:
    patient = session.get(Patient, patient_id)
    if patient is None:
        raise NotFound("Patient not found")
    return patient


def email_taken(session, email: str, exclude_id: int | None = None) -> bool:
    query = session.query(Patient.id).filter(Patient.email == email)
    if exclude_id is not None:
        query = query.filter(Patient.id != exclude_id)
    return query.first() is not None


def create_patient(session, data: PatientCreate) -> Patient:
    """Register a patient; the plaintext password is hashed before it is stored."""
    if email_taken(session, data.email):
        raise Conflict(DUPLICATE_EMAIL)

    patient = Patient(
        first_name=data.first_name,
        last_name=data.last_name,
        email=data.email,
        password_hash=hash_password(data.password),
        date_of_birth=data.date_of_birth,
        phone=data.phone,
        address=data.address,
    )
    try:
        with transaction(session, "create_patient"):
            session.add(patient)
    except IntegrityError:
        # lost a race with another registration for the same email
        raise Conflict(DUPLICATE_EMAIL) from None

    logger.info(f"[create_patient] created patient_id={patient.id}")
    return patient


def update_patient(session, patient_id: int, data: PatientUpdate) -> Patient:
    """
    Partial update: only supplied fields change. An empty or missing password
    keeps the stored hash.
    """
    patient = get_patient(session, patient_id)
    changes = data.changes()

    password = changes.pop("password", None)
    if "email" in changes and email_taken(session, changes["email"], exclude_id=patient.id):
        raise Conflict(DUPLICATE_EMAIL)

    try:
        with transaction(session, "update_patient"):
            for field, value in changes.items():
                setattr(patient, field, value)
            if password:
                patient.password_hash = hash_password(password)
    except IntegrityError:
        raise Conflict(DUPLICATE_EMAIL) from None

    logger.info(f"[update_patient] patient_id={patient.id} fields={sorted(changes)}")
    return patient


def delete_patient(session, patient_id: int) -> dict:
    """
    Delete a patient together with every appointment and prescription it owns,
    as one transaction. Returns how many child rows went with it.
    """
    patient = get_patient(session, patient_id)

    with transaction(session, "delete_patient"):
        appointments = (
            session.query(Appointment)
            .filter(Appointment.patient_id == patient.id)
            .delete(synchronize_session="fetch")
        )
        prescriptions = (
            session.query(Prescription)
            .filter(Prescription.patient_id == patient.id)
            .delete(synchronize_session="fetch")
        )
        session.delete(patient)

    logger.info(
        f"[delete_patient] patient_id={patient_id} "
        f"appointments={appointments} prescriptions={prescriptions}"
    )
    return {"appointments": appointments, "prescriptions": prescriptions}
