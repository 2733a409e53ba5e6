from flask import Blueprint, jsonify

from extensions import db
from clinic.routes.api import json_body, optional_int_arg
from clinic.schemas import PrescriptionCreate, PrescriptionUpdate, validate_payload
from clinic.services import prescription_service
from clinic.services.access import Operation, require_access, require_identity, require_record_access, scoped_patient_id
from clinic.services.serializers import serialize_prescription


prescriptions_bp = Blueprint("prescriptions", __name__, url_prefix="/prescriptions")


@prescriptions_bp.route("", methods=["GET"])
def list_prescriptions():
    patient_id = scoped_patient_id(optional_int_arg("patientId"))
    prescriptions = prescription_service.list_prescriptions(db.session, patient_id)
    return jsonify([serialize_prescription(rx, include_patient=True) for rx in prescriptions])


@prescriptions_bp.route("", methods=["POST"])
def create_prescription():
    require_identity()
    data = validate_payload(PrescriptionCreate, json_body())
    require_access(data.patient_id, Operation.MANAGE_RECORDS)
    rx = prescription_service.create_prescription(db.session, data)
    return jsonify(serialize_prescription(rx)), 201


@prescriptions_bp.route("/<int:prescription_id>", methods=["GET"])
def get_prescription(prescription_id: int):
    rx = require_record_access(lambda: prescription_service.get_prescription(db.session, prescription_id), Operation.READ)
    return jsonify(serialize_prescription(rx))


@prescriptions_bp.route("/<int:prescription_id>", methods=["PUT", "PATCH"])
def update_prescription(prescription_id: int):
    require_record_access(lambda: prescription_service.get_prescription(db.session, prescription_id), Operation.MANAGE_RECORDS)
    data = validate_payload(PrescriptionUpdate, json_body())
    rx = prescription_service.update_prescription(db.session, prescription_id, data)
    return jsonify(serialize_prescription(rx))


@prescriptions_bp.route("/<int:prescription_id>", methods=["DELETE"])
def delete_prescription(prescription_id: int):
    require_record_access(lambda: prescription_service.get_prescription(db.session, prescription_id), Operation.MANAGE_RECORDS)
    prescription_service.delete_prescription(db.session, prescription_id)
    return jsonify({"success": True})
