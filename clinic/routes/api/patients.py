from flask import Blueprint, jsonify

from extensions import db
from clinic.routes.api import json_body
from clinic.schemas import PatientCreate, PatientUpdate, validate_payload
from clinic.services import patient_service
from clinic.services.access import Operation, require_access
from clinic.services.serializers import serialize_patient


patients_bp = Blueprint("patients", __name__, url_prefix="/patients")


@patients_bp.route("", methods=["GET"])
def list_patients():
    require_access(None, Operation.LIST_ALL)
    patients = patient_service.list_patients(db.session)
    return jsonify([serialize_patient(p, include_children=True) for p in patients])


@patients_bp.route("", methods=["POST"])
def create_patient():
    """Self-registration and admin console both land here."""
    data = validate_payload(PatientCreate, json_body())
    patient = patient_service.create_patient(db.session, data)
    return jsonify(serialize_patient(patient)), 201


@patients_bp.route("/<int:patient_id>", methods=["GET"])
def get_patient(patient_id: int):
    require_access(patient_id, Operation.READ)
    patient = patient_service.get_patient(db.session, patient_id)
    return jsonify(serialize_patient(patient, include_children=True))


@patients_bp.route("/<int:patient_id>", methods=["PUT", "PATCH"])
def update_patient(patient_id: int):
    require_access(patient_id, Operation.UPDATE_PROFILE)
    data = validate_payload(PatientUpdate, json_body())
    patient = patient_service.update_patient(db.session, patient_id, data)
    return jsonify(serialize_patient(patient))


@patients_bp.route("/<int:patient_id>", methods=["DELETE"])
def delete_patient(patient_id: int):
    require_access(patient_id, Operation.DELETE_PATIENT)
    removed = patient_service.delete_patient(db.session, patient_id)
    return jsonify({"success": True, "removed": removed})
