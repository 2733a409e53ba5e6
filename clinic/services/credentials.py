"""
Credential checks for patients and the admin console account.

Both verifiers fail with the same InvalidCredentials error whether the email
is unknown or the password is wrong, and both spend a hash comparison in
either case.
"""
import hmac
import logging

from flask import current_app
from werkzeug.security import check_password_hash, generate_password_hash

from clinic.errors import InvalidCredentials
from clinic.models import Patient
from clinic.services.identity import Identity, ROLE_ADMIN, ROLE_PATIENT


logger = logging.getLogger("clinic.auth")

_dummy_hashes: dict[str, str] = {}


def hash_password(plaintext: str) -> str:
    method = current_app.config.get("PASSWORD_HASH_METHOD", "scrypt")
    return generate_password_hash(plaintext, method=method)


def _dummy_hash() -> str:
    # Compared against when the email is unknown so both failure paths do the same work.
    method = current_app.config.get("PASSWORD_HASH_METHOD", "scrypt")
    if method not in _dummy_hashes:
        _dummy_hashes[method] = generate_password_hash("not-a-real-password", method=method)
    return _dummy_hashes[method]


def verify_credentials(session, email: str, password: str) -> Identity:
    """Return the patient's Identity or raise InvalidCredentials."""
    email = (email or "").strip().lower()
    password = password or ""

    patient = None
    if email:
        patient = session.query(Patient).filter(Patient.email == email).first()

    stored_hash = patient.password_hash if patient else _dummy_hash()
    password_ok = check_password_hash(stored_hash, password) if password else False

    if patient is None or not password_ok:
        logger.info("[verify_credentials] rejected sign-in attempt")
        raise InvalidCredentials()

    logger.info(f"[verify_credentials] patient_id={patient.id} signed in")
    return Identity(patient_id=patient.id, name=patient.display_name, role=ROLE_PATIENT)


def verify_admin(email: str, password: str) -> Identity:
    """Check the configured admin account; raise InvalidCredentials on mismatch."""
    admin_email = (current_app.config.get("ADMIN_EMAIL") or "").strip().lower()
    admin_hash = current_app.config.get("ADMIN_PASSWORD_HASH") or ""
    email = (email or "").strip().lower()
    password = password or ""

    if not admin_email or not admin_hash:
        logger.warning("[verify_admin] admin account is not configured")
        check_password_hash(_dummy_hash(), password)
        raise InvalidCredentials()

    email_ok = hmac.compare_digest(email.encode(), admin_email.encode())
    password_ok = check_password_hash(admin_hash, password) if password else False

    if not (email_ok and password_ok):
        logger.info("[verify_admin] rejected admin sign-in attempt")
        raise InvalidCredentials()

    logger.info("[verify_admin] admin signed in")
    return Identity(patient_id=None, name="Administrator", role=ROLE_ADMIN)
