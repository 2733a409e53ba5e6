from flask import Blueprint, jsonify

from extensions import db
from clinic.errors import Unauthorized
from clinic.routes.api import json_body
from clinic.schemas import LoginRequest, validate_payload
from clinic.services.credentials import verify_admin, verify_credentials
from clinic.services.sessions import clear_session_cookie, current_identity, issue_token, set_session_cookie


auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


def _signed_in(identity):
    resp = jsonify({"identity": identity.to_dict(), "token": issue_token(identity)})
    return set_session_cookie(resp, identity)


@auth_bp.route("/login", methods=["POST"])
def login():
    """Patient sign-in. Unknown email and wrong password look the same."""
    creds = validate_payload(LoginRequest, json_body())
    identity = verify_credentials(db.session, creds.email, creds.password)
    return _signed_in(identity)


@auth_bp.route("/admin/login", methods=["POST"])
def admin_login():
    creds = validate_payload(LoginRequest, json_body())
    identity = verify_admin(creds.email, creds.password)
    return _signed_in(identity)


@auth_bp.route("/logout", methods=["POST"])
def logout():
    return clear_session_cookie(jsonify({"success": True}))


@auth_bp.route("/me", methods=["GET"])
def me():
    identity = current_identity()
    if identity is None:
        raise Unauthorized()
    return jsonify(identity.to_dict())
