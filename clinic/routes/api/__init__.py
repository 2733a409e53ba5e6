from flask import Blueprint, request

from clinic.errors import BadRequest


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        raise BadRequest("Request body must be JSON")
    return data


def optional_int_arg(name: str) -> int | None:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise BadRequest(f"{name} must be an integer", fields=[name]) from None


def build_api_blueprint() -> Blueprint:
    from clinic.routes.api.auth import auth_bp
    from clinic.routes.api.patients import patients_bp
    from clinic.routes.api.appointments import appointments_bp
    from clinic.routes.api.prescriptions import prescriptions_bp
    from clinic.routes.api.medications import medications_bp

    api_bp = Blueprint("api", __name__, url_prefix="/api")
    for bp in (auth_bp, patients_bp, appointments_bp, prescriptions_bp, medications_bp):
        api_bp.register_blueprint(bp)
    return api_bp
