"""
Stateless signed session tokens.

A token is an itsdangerous timed signature over the caller's Identity. Nothing
is stored server-side: a token is valid until it is older than
SESSION_MAX_AGE, and signing out just drops the cookie.
"""
import logging
from typing import Optional

from flask import current_app, g, request
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from clinic.services.identity import Identity, ROLE_ADMIN, ROLE_PATIENT


logger = logging.getLogger("clinic.sessions")

TOKEN_SALT = "clinic-session-token"


def _serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(current_app.config["SECRET_KEY"], salt=TOKEN_SALT)


def issue_token(identity: Identity) -> str:
    return _serializer().dumps(
        {"pid": identity.patient_id, "name": identity.name, "role": identity.role}
    )


def resolve_token(token: Optional[str], max_age: Optional[int] = None) -> Optional[Identity]:
    """Turn a token back into an Identity, or None if missing, tampered or stale."""
    if not token:
        return None
    if max_age is None:
        max_age = current_app.config.get("SESSION_MAX_AGE", 8 * 60 * 60)

    try:
        claims = _serializer().loads(token, max_age=max_age)
    except SignatureExpired:
        logger.info("[resolve_token] expired session token")
        return None
    except BadSignature:
        logger.warning("[resolve_token] rejected tampered session token")
        return None

    if not isinstance(claims, dict):
        return None
    role = claims.get("role")
    pid = claims.get("pid")
    if role == ROLE_ADMIN:
        return Identity(patient_id=None, name=claims.get("name") or "Administrator", role=ROLE_ADMIN)
    if role == ROLE_PATIENT and isinstance(pid, int):
        return Identity(patient_id=pid, name=claims.get("name") or "", role=ROLE_PATIENT)
    return None


def token_from_request(req=None) -> Optional[str]:
    req = req or request
    header = req.headers.get("Authorization", "")
    if header.startswith("Bearer "):
        return header[7:].strip()
    return req.cookies.get(current_app.config.get("AUTH_COOKIE_NAME", "clinic_auth"))


def load_identity():
    """before_request hook: resolve the caller once per request."""
    g.identity = resolve_token(token_from_request())


def current_identity() -> Optional[Identity]:
    return g.get("identity")


def set_session_cookie(response, identity: Identity):
    response.set_cookie(
        current_app.config.get("AUTH_COOKIE_NAME", "clinic_auth"),
        issue_token(identity),
        max_age=current_app.config.get("SESSION_MAX_AGE"),
        path="/",
        secure=current_app.config.get("SESSION_COOKIE_SECURE", True),
        httponly=True,
        samesite="Lax",
    )
    return response


def clear_session_cookie(response):
    response.delete_cookie(
        current_app.config.get("AUTH_COOKIE_NAME", "clinic_auth"),
        path="/",
        secure=current_app.config.get("SESSION_COOKIE_SECURE", True),
        httponly=True,
        samesite="Lax",
    )
    return response
