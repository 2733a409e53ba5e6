from flask import Blueprint, jsonify

from extensions import db
from clinic.routes.api import json_body, optional_int_arg
from clinic.schemas import AppointmentCreate, AppointmentUpdate, validate_payload
from clinic.services import appointment_service
from clinic.services.access import Operation, require_access, require_identity, require_record_access, scoped_patient_id
from clinic.services.serializers import serialize_appointment


appointments_bp = Blueprint("appointments", __name__, url_prefix="/appointments")


@appointments_bp.route("", methods=["GET"])
def list_appointments():
    patient_id = scoped_patient_id(optional_int_arg("patientId"))
    appointments = appointment_service.list_appointments(db.session, patient_id)
    return jsonify([serialize_appointment(a, include_patient=True) for a in appointments])


@appointments_bp.route("", methods=["POST"])
def create_appointment():
    require_identity()
    data = validate_payload(AppointmentCreate, json_body())
    require_access(data.patient_id, Operation.MANAGE_RECORDS)
    appt = appointment_service.create_appointment(db.session, data)
    return jsonify(serialize_appointment(appt)), 201


@appointments_bp.route("/<int:appointment_id>", methods=["GET"])
def get_appointment(appointment_id: int):
    appt = require_record_access(lambda: appointment_service.get_appointment(db.session, appointment_id), Operation.READ)
    return jsonify(serialize_appointment(appt))


@appointments_bp.route("/<int:appointment_id>", methods=["PUT", "PATCH"])
def update_appointment(appointment_id: int):
    # ownership comes from the stored row, never from the request
    require_record_access(lambda: appointment_service.get_appointment(db.session, appointment_id), Operation.MANAGE_RECORDS)
    data = validate_payload(AppointmentUpdate, json_body())
    appt = appointment_service.update_appointment(db.session, appointment_id, data)
    return jsonify(serialize_appointment(appt))


@appointments_bp.route("/<int:appointment_id>", methods=["DELETE"])
def delete_appointment(appointment_id: int):
    require_record_access(lambda: appointment_service.get_appointment(db.session, appointment_id), Operation.MANAGE_RECORDS)
    appointment_service.delete_appointment(db.session, appointment_id)
    return jsonify({"success": True})
