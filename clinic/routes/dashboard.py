from flask import Blueprint, flash, make_response, redirect, render_template, request, url_for

from extensions import db
from clinic.errors import ClinicError, InvalidCredentials, NotFound
from clinic.models import RefillSchedule, RepeatSchedule
from clinic.routes.views import flash_error, form_payload
from clinic.schemas import (
    AppointmentCreate,
    AppointmentUpdate,
    PatientCreate,
    PatientUpdate,
    PrescriptionCreate,
    PrescriptionUpdate,
    validate_payload,
)
from clinic.services import appointment_service, patient_service, prescription_service
from clinic.services.access import Operation, require_access, require_admin
from clinic.services.credentials import verify_admin
from clinic.services.medications import medication_choices
from clinic.services.sessions import clear_session_cookie, current_identity, set_session_cookie


dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/admin")


def _back_to_patient(patient_id):
    if patient_id:
        return redirect(url_for("dashboard.patient_detail", patient_id=patient_id))
    return redirect(url_for("dashboard.dashboard_home"))


@dashboard_bp.route("/login", methods=["GET"])
def login_page():
    identity = current_identity()
    if identity is not None and identity.is_admin:
        return redirect(url_for("dashboard.dashboard_home"))
    return render_template("login.html", form_action=url_for("dashboard.login_submit"), admin=True)


@dashboard_bp.route("/login", methods=["POST"])
def login_submit():
    email = (request.form.get("email") or "").strip()
    password = request.form.get("password") or ""
    try:
        identity = verify_admin(email, password)
    except InvalidCredentials as e:
        flash(e.message, "error")
        html = render_template("login.html", form_action=url_for("dashboard.login_submit"), admin=True, email=email)
        return html, 401

    resp = make_response(redirect(url_for("dashboard.dashboard_home")))
    return set_session_cookie(resp, identity)


@dashboard_bp.route("/logout", methods=["GET", "POST"])
def logout():
    resp = make_response(redirect(url_for("dashboard.login_page")))
    return clear_session_cookie(resp)


@dashboard_bp.route("", methods=["GET"])
@dashboard_bp.route("/patients", methods=["GET"])
@require_admin
def dashboard_home():
    """
    Admin console: every patient, newest first, with a form to add one.
    """
    require_access(None, Operation.LIST_ALL)
    patients = patient_service.list_patients(db.session)
    return render_template("admin.html", patients=patients, active_page="patients")


@dashboard_bp.route("/patients/<int:patient_id>", methods=["GET"])
@require_admin
def patient_detail(patient_id: int):
    """
    One patient's profile with their appointments and prescriptions.
    """
    require_access(patient_id, Operation.READ)
    try:
        patient = patient_service.get_patient(db.session, patient_id)
    except NotFound as e:
        flash(e.message, "error")
        return redirect(url_for("dashboard.dashboard_home"))

    return render_template(
        "admin_patient.html",
        patient=patient,
        appointments=appointment_service.list_appointments(db.session, patient.id),
        prescriptions=prescription_service.list_prescriptions(db.session, patient.id),
        medications=medication_choices(),
        repeat_schedules=[s.value for s in RepeatSchedule],
        refill_schedules=[s.value for s in RefillSchedule],
        active_page="patients",
    )


@dashboard_bp.route("/patients/save", methods=["POST"])
@require_admin
def save_patient():
    """
    Create or update a patient from the console form.
    """
    patient_id_raw = request.form.get("patient_id") or None
    patient_id = int(patient_id_raw) if patient_id_raw and patient_id_raw.isdigit() else None
    payload = form_payload(request.form, "patient_id")

    try:
        if patient_id is not None:
            require_access(patient_id, Operation.UPDATE_PROFILE)
            patient_service.update_patient(db.session, patient_id, validate_payload(PatientUpdate, payload))
            flash("Patient updated.", "success")
        else:
            patient = patient_service.create_patient(db.session, validate_payload(PatientCreate, payload))
            patient_id = patient.id
            flash("Patient created.", "success")
    except ClinicError as e:
        flash_error(e)

    return _back_to_patient(patient_id)


@dashboard_bp.route("/patients/<int:patient_id>/delete", methods=["POST"])
@require_admin
def delete_patient_route(patient_id: int):
    """
    Delete a patient and everything they own (the browser confirms first).
    """
    try:
        require_access(patient_id, Operation.DELETE_PATIENT)
        patient_service.delete_patient(db.session, patient_id)
        flash("Patient deleted.", "success")
    except ClinicError as e:
        flash_error(e)

    return redirect(url_for("dashboard.dashboard_home"))


@dashboard_bp.route("/appointments/save", methods=["POST"])
@require_admin
def save_appointment():
    """
    Create or update an appointment from the patient detail page.
    """
    appt_id_raw = request.form.get("appointment_id") or None
    patient_id_raw = request.form.get("patientId") or None
    appointment_id = int(appt_id_raw) if appt_id_raw and appt_id_raw.isdigit() else None
    patient_id = int(patient_id_raw) if patient_id_raw and patient_id_raw.isdigit() else None

    try:
        if appointment_id is not None:
            appt = appointment_service.get_appointment(db.session, appointment_id)
            patient_id = appt.patient_id
            require_access(appt.patient_id, Operation.MANAGE_RECORDS)
            payload = form_payload(request.form, "appointment_id", "patientId")
            appointment_service.update_appointment(db.session, appointment_id, validate_payload(AppointmentUpdate, payload))
            flash("Appointment updated.", "success")
        else:
            data = validate_payload(AppointmentCreate, form_payload(request.form, "appointment_id"))
            require_access(data.patient_id, Operation.MANAGE_RECORDS)
            appointment_service.create_appointment(db.session, data)
            flash("Appointment created.", "success")
    except ClinicError as e:
        flash_error(e)

    return _back_to_patient(patient_id)


@dashboard_bp.route("/appointments/<int:appointment_id>/delete", methods=["POST"])
@require_admin
def delete_appointment_route(appointment_id: int):
    patient_id = None
    try:
        appt = appointment_service.get_appointment(db.session, appointment_id)
        patient_id = appt.patient_id
        require_access(appt.patient_id, Operation.MANAGE_RECORDS)
        appointment_service.delete_appointment(db.session, appointment_id)
        flash("Appointment deleted.", "success")
    except ClinicError as e:
        flash_error(e)

    return _back_to_patient(patient_id)


@dashboard_bp.route("/prescriptions/save", methods=["POST"])
@require_admin
def save_prescription():
    """
    Create or update a prescription from the patient detail page.
    """
    rx_id_raw = request.form.get("prescription_id") or None
    patient_id_raw = request.form.get("patientId") or None
    prescription_id = int(rx_id_raw) if rx_id_raw and rx_id_raw.isdigit() else None
    patient_id = int(patient_id_raw) if patient_id_raw and patient_id_raw.isdigit() else None

    try:
        if prescription_id is not None:
            rx = prescription_service.get_prescription(db.session, prescription_id)
            patient_id = rx.patient_id
            require_access(rx.patient_id, Operation.MANAGE_RECORDS)
            payload = form_payload(request.form, "prescription_id", "patientId")
            prescription_service.update_prescription(db.session, prescription_id, validate_payload(PrescriptionUpdate, payload))
            flash("Prescription updated.", "success")
        else:
            data = validate_payload(PrescriptionCreate, form_payload(request.form, "prescription_id"))
            require_access(data.patient_id, Operation.MANAGE_RECORDS)
            prescription_service.create_prescription(db.session, data)
            flash("Prescription created.", "success")
    except ClinicError as e:
        flash_error(e)

    return _back_to_patient(patient_id)


@dashboard_bp.route("/prescriptions/<int:prescription_id>/delete", methods=["POST"])
@require_admin
def delete_prescription_route(prescription_id: int):
    patient_id = None
    try:
        rx = prescription_service.get_prescription(db.session, prescription_id)
        patient_id = rx.patient_id
        require_access(rx.patient_id, Operation.MANAGE_RECORDS)
        prescription_service.delete_prescription(db.session, prescription_id)
        flash("Prescription deleted.", "success")
    except ClinicError as e:
        flash_error(e)

    return _back_to_patient(patient_id)
