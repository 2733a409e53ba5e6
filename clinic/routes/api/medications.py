from flask import Blueprint, jsonify

from clinic.services.medications import fetch_medication_catalog


medications_bp = Blueprint("medications", __name__, url_prefix="/medications")


@medications_bp.route("", methods=["GET"])
def list_medications():
    """Proxy for the external catalog; only used to populate prescription choices."""
    return jsonify(fetch_medication_catalog())
