from flask import Blueprint, flash, make_response, redirect, render_template, request, url_for

from extensions import db
from clinic.errors import ClinicError, InvalidCredentials, NotFound
from clinic.routes.views import flash_error, form_payload
from clinic.schemas import PatientCreate, PatientUpdate, validate_payload
from clinic.services import patient_service
from clinic.services.access import Operation, require_access, require_patient
from clinic.services.credentials import verify_credentials
from clinic.services.portal_service import get_portal_snapshot
from clinic.services.sessions import clear_session_cookie, current_identity, set_session_cookie


portal_bp = Blueprint("portal", __name__)

PORTAL_VIEWS = ("dashboard", "appointments", "prescriptions")


@portal_bp.route("/", methods=["GET"])
def login_page():
    identity = current_identity()
    if identity is not None and not identity.is_admin:
        return redirect(url_for("portal.portal_home"))
    return render_template("login.html", form_action=url_for("portal.login_submit"), admin=False)


@portal_bp.route("/", methods=["POST"])
def login_submit():
    email = (request.form.get("email") or "").strip()
    password = request.form.get("password") or ""
    try:
        identity = verify_credentials(db.session, email, password)
    except InvalidCredentials as e:
        flash(e.message, "error")
        html = render_template("login.html", form_action=url_for("portal.login_submit"), admin=False, email=email)
        return html, 401

    resp = make_response(redirect(url_for("portal.portal_home")))
    return set_session_cookie(resp, identity)


@portal_bp.route("/register", methods=["GET", "POST"])
def register():
    """Self-registration for new patients."""
    if request.method == "GET":
        return render_template("register.html", form={})

    try:
        data = validate_payload(PatientCreate, form_payload(request.form))
        patient_service.create_patient(db.session, data)
    except ClinicError as e:
        flash_error(e)
        return render_template("register.html", form=form_payload(request.form, "password")), e.status_code

    flash("Registration complete. Please sign in.", "success")
    return redirect(url_for("portal.login_page"))


@portal_bp.route("/logout", methods=["GET", "POST"])
def logout():
    resp = make_response(redirect(url_for("portal.login_page")))
    return clear_session_cookie(resp)


@portal_bp.route("/portal", methods=["GET"])
@portal_bp.route("/portal/<view>", methods=["GET"])
@require_patient
def portal_home(view: str = "dashboard"):
    """
    Patient dashboard: what is due this week, plus the longer
    appointment and prescription lists on their own tabs.
    """
    if view not in PORTAL_VIEWS:
        return redirect(url_for("portal.portal_home"))

    identity = require_access(current_identity().patient_id, Operation.READ)
    try:
        patient = patient_service.get_patient(db.session, identity.patient_id)
    except NotFound:
        # account removed while the session was still valid
        return clear_session_cookie(make_response(redirect(url_for("portal.login_page"))))
    context = get_portal_snapshot(patient)
    return render_template("portal.html", active_page=view, **context)


@portal_bp.route("/portal/profile", methods=["GET", "POST"])
@require_patient
def profile():
    """Patients can edit their own contact details and password."""
    identity = require_access(current_identity().patient_id, Operation.UPDATE_PROFILE)
    try:
        patient = patient_service.get_patient(db.session, identity.patient_id)
    except NotFound:
        return clear_session_cookie(make_response(redirect(url_for("portal.login_page"))))

    if request.method == "POST":
        try:
            data = validate_payload(PatientUpdate, form_payload(request.form))
            patient_service.update_patient(db.session, patient.id, data)
        except ClinicError as e:
            flash_error(e)
        else:
            flash("Profile updated.", "success")
        return redirect(url_for("portal.profile"))

    return render_template("profile.html", patient=patient, active_page="profile")
