import logging

from clinic.errors import NotFound
from clinic.models import Prescription
from clinic.schemas import PrescriptionCreate, PrescriptionUpdate
from clinic.services.db_context import transaction
from clinic.services.patient_service import get_patient


logger = logging.getLogger("clinic.prescriptions")


def list_prescriptions(session, patient_id: int | None = None):
    """Prescriptions ordered by next refill date, optionally for one patient."""
    query = session.query(Prescription)
    if patient_id is not None:
        query = query.filter(Prescription.patient_id == patient_id)
    return query.order_by(Prescription.refill_date.asc(), Prescription.id.asc()).all()


def get_prescription(session, prescription_id: int) -> Prescription:
    rx = session.get(Prescription, prescription_id)
    if rx is None:
        raise NotFound("Prescription not found")
    return rx


def create_prescription(session, data: PrescriptionCreate) -> Prescription:
    patient = get_patient(session, data.patient_id)

    rx = Prescription(
        patient_id=patient.id,
        medication_name=data.medication_name,
        dosage=data.dosage,
        quantity=data.quantity,
        refill_date=data.refill_date,
        refill_schedule=data.refill_schedule,
    )
    with transaction(session, "create_prescription"):
        session.add(rx)

    logger.info(f"[create_prescription] prescription_id={rx.id} patient_id={patient.id}")
    return rx


def update_prescription(session, prescription_id: int, data: PrescriptionUpdate) -> Prescription:
    rx = get_prescription(session, prescription_id)
    changes = data.changes()

    with transaction(session, "update_prescription"):
        for field, value in changes.items():
            setattr(rx, field, value)

    logger.info(f"[update_prescription] prescription_id={rx.id} fields={sorted(changes)}")
    return rx


def delete_prescription(session, prescription_id: int) -> None:
    rx = get_prescription(session, prescription_id)
    with transaction(session, "delete_prescription"):
        session.delete(rx)
    logger.info(f"[delete_prescription] prescription_id={prescription_id}")
